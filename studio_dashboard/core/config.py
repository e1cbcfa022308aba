# studio_dashboard/core/config.py
from decimal import Decimal
from typing import List, Optional
from pydantic import AliasChoices, BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class PricingRules(BaseModel):
    """Per-unit rates used by the project form, all amounts in VND"""

    deposit_ratio: Decimal = Decimal("0.6")

    # Customer surcharges (outside the package)
    extra_hour_rate: Decimal = Decimal("1000000")
    extra_person_rate: Decimal = Decimal("600000")
    extra_makeup_rate: Decimal = Decimal("800000")

    # Staff bonuses paid out of the same surcharge counts
    photo_bonus_per_hour: Decimal = Decimal("300000")
    photo_bonus_per_person: Decimal = Decimal("100000")
    assist_bonus_per_hour: Decimal = Decimal("200000")
    assist_bonus_per_person: Decimal = Decimal("50000")
    makeup_bonus_per_hour: Decimal = Decimal("200000")
    makeup_bonus_per_person: Decimal = Decimal("60000")
    retouch_bonus_per_photo: Decimal = Decimal("15000")

    # Package staff rates are stored in thousands ("500" == 500k)
    package_rate_unit: Decimal = Decimal("1000")

    @field_validator("deposit_ratio")
    def validate_deposit_ratio(cls, v):
        if v < 0 or v > 1:
            raise ValueError("deposit_ratio must be between 0 and 1")
        return v


class Settings(BaseSettings):
    """Dashboard settings loaded from .env"""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        extra="ignore",
        populate_by_name=True,
    )

    # === Backend API ===
    API_URL: str = Field(
        "http://localhost:8000/api",
        validation_alias=AliasChoices("NEXT_PUBLIC_API_URL", "API_URL"),
    )
    HTTP_TIMEOUT: Optional[float] = None

    # === Session ===
    STORAGE_PATH: Optional[str] = ".studio/storage.json"
    LOGIN_PATH: str = "/login"
    PASSWORD_MIN_LENGTH: int = 6

    # === Feature switches ===
    FINANCE_API_ENABLED: bool = False

    # === CORS ===
    ALLOWED_ORIGINS: List[str] = ["http://localhost:3000", "http://127.0.0.1:3000"]

    # === System ===
    DEBUG: bool = False
    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "INFO"
    LOG_DIR: str = "logs"
    EXPORT_DIR: str = "exports"

    # === Business Rules ===
    CALENDAR_EVENT_HOURS: int = 2
    PRICING: PricingRules = PricingRules()

    @field_validator("API_URL")
    def validate_api_url(cls, v):
        if not v.startswith(("http://", "https://")):
            raise ValueError("API_URL must be an http(s) URL")
        return v.rstrip("/")


# Create a global settings instance
settings = Settings()
