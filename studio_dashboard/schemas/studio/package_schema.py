from pydantic import BaseModel, ConfigDict, field_validator
from typing import List, Optional, Union
from datetime import datetime
from decimal import Decimal
from enum import Enum

from studio_dashboard.schemas.common.pagination import EntityId, Money


class PackageCategory(str, Enum):
    PORTRAIT = "portrait"
    FAMILY = "family"
    COUPLE = "couple"
    WEDDING = "wedding"
    EVENT = "event"
    COMMERCIAL = "commercial"
    OTHER = "other"


class PackageDetails(BaseModel):
    """Staff pay is stored in thousands of dong, ``retouch`` may arrive as ``"50k"``"""
    photo: Optional[Money] = None
    makeup: Optional[Money] = None
    assistant: Optional[Money] = None
    retouch: Optional[Union[Money, str]] = None
    time: Optional[str] = None
    location: Optional[str] = None
    retouch_photos: Optional[int] = None
    extra_services: List[str] = []

    model_config = ConfigDict(extra="allow")


class PackageBase(BaseModel):
    name: str
    category: PackageCategory = PackageCategory.WEDDING
    price: Money = Decimal("0")
    description: str = ""
    details: PackageDetails = PackageDetails()
    includes: List[str] = []
    is_active: bool = True
    notes: Optional[str] = None

    model_config = ConfigDict(extra="allow")

    @field_validator("details", mode="before")
    def coerce_details(cls, v):
        return v if v is not None else {}


class PackageCreate(PackageBase):
    popularity_score: int = 0

    @field_validator("name")
    def validate_name(cls, v):
        if not v or not v.strip():
            raise ValueError("Vui lòng nhập tên gói")
        return v.strip()

    @field_validator("price")
    def validate_price(cls, v):
        if v < 0:
            raise ValueError("Giá gói không được âm")
        return v


class Package(PackageBase):
    id: EntityId
    package_id: Optional[str] = None
    popularity_score: int = 0
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
