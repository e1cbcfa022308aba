from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import List, Literal, Optional, Union
from datetime import datetime
from decimal import Decimal
from enum import Enum

from studio_dashboard.schemas.common.pagination import EntityId, Money

BILLED_COST = "Theo bill"


class PartnerType(str, Enum):
    CLOTHING = "clothing"
    PRINTING = "printing"
    FLOWER = "flower"
    VENUE = "venue"
    EQUIPMENT = "equipment"
    OTHER = "other"


class ContactInfo(BaseModel):
    contact_person: str = ""
    phone: str = ""
    email: str = ""
    address: str = ""

    model_config = ConfigDict(extra="allow")


class PartnerBase(BaseModel):
    name: str
    type: PartnerType = PartnerType.OTHER
    contact_info: ContactInfo = ContactInfo()
    # A fixed amount or the literal "Theo bill" (charged per invoice)
    cost: Union[Money, Literal["Theo bill"]] = Decimal("0")
    services: List[str] = []
    rating: int = Field(default=5, ge=1, le=5)
    notes: Optional[str] = None
    is_active: bool = True

    model_config = ConfigDict(extra="allow")

    @field_validator("contact_info", mode="before")
    def coerce_contact(cls, v):
        return v if v is not None else {}

    @field_validator("type", mode="before")
    def coerce_type(cls, v):
        # Unknown vendor kinds from older records are grouped under "other"
        if v not in {t.value for t in PartnerType}:
            return PartnerType.OTHER
        return v


class PartnerCreate(PartnerBase):
    @field_validator("name")
    def validate_name(cls, v):
        if not v or not v.strip():
            raise ValueError("Vui lòng nhập tên đối tác")
        return v.strip()


class Partner(PartnerBase):
    id: EntityId
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
