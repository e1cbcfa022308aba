from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from typing import Any, Dict, List, Optional
from datetime import datetime
from decimal import Decimal
from enum import Enum

from studio_dashboard.schemas.common.pagination import EntityId, Money


class ProjectStatus(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    SHOOTING = "shooting"
    RETOUCHING = "retouching"
    DELIVERED = "delivered"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class PaymentStatus(str, Enum):
    UNPAID = "unpaid"
    DEPOSIT_PAID = "deposit_paid"
    PARTIALLY_PAID = "partially_paid"
    FULLY_PAID = "fully_paid"


class PaymentRecord(BaseModel):
    amount: Money = Decimal("0")
    date: Optional[str] = None
    method: Optional[str] = None
    notes: Optional[str] = None


class Payment(BaseModel):
    deposit: Money = Decimal("0")
    paid: Money = Decimal("0")
    final: Money = Decimal("0")
    status: PaymentStatus = PaymentStatus.UNPAID
    payment_history: List[PaymentRecord] = []

    model_config = ConfigDict(extra="allow")


class Progress(BaseModel):
    shooting_done: bool = False
    retouch_done: bool = False
    delivered: bool = False


class TeamAssignment(BaseModel):
    employee: Optional[EntityId] = None
    salary: Money = Decimal("0")
    bonus: Money = Decimal("0")
    notes: Optional[str] = None

    model_config = ConfigDict(extra="allow")

    @field_validator("salary", "bonus", mode="before")
    def coerce_amount(cls, v):
        if v in (None, ""):
            return Decimal("0")
        return v


class Team(BaseModel):
    main_photographer: Optional[TeamAssignment] = None
    assist_photographers: List[TeamAssignment] = []
    makeup_artists: List[TeamAssignment] = []
    retouch_artists: List[TeamAssignment] = []

    @property
    def size(self) -> int:
        main = 1 if self.main_photographer and self.main_photographer.employee else 0
        return main + len(self.assist_photographers) + len(self.makeup_artists) + len(self.retouch_artists)


class Project(BaseModel):
    id: EntityId
    project_code: Optional[str] = None
    customer_name: str = ""
    customer_phone: Optional[str] = None
    customer_email: Optional[str] = None
    package_type: Optional[EntityId] = None
    package_name: Optional[str] = None
    package_price: Money = Decimal("0")
    package_discount: Money = Decimal("0")
    package_final_price: Optional[Money] = None
    shoot_date: Optional[str] = None
    shoot_time: Optional[str] = None
    location: Optional[str] = None
    notes: Optional[str] = None
    status: ProjectStatus = ProjectStatus.PENDING
    payment: Payment = Payment()
    progress: Progress = Progress()
    team: Team = Team()
    partners: Optional[Any] = None
    additional_packages: List[Any] = []
    completed_date: Optional[str] = None
    delivery_date: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(extra="allow")

    @field_validator("package_price", "package_discount", mode="before")
    def coerce_amount(cls, v):
        if v in (None, ""):
            return Decimal("0")
        return v

    @field_validator("payment", "progress", "team", mode="before")
    def coerce_missing_block(cls, v):
        return v if v is not None else {}


# Working copy of the project modal

class TeamMemberInput(BaseModel):
    employee_id: EntityId = ""
    salary: Money = Decimal("0")
    bonus: Money = Decimal("0")
    notes: Optional[str] = None


class TeamInput(BaseModel):
    main_photographer: TeamMemberInput = TeamMemberInput()
    assistants: List[TeamMemberInput] = []
    makeup_artists: List[TeamMemberInput] = []
    retouch_artists: List[TeamMemberInput] = []


class Surcharge(BaseModel):
    extra_hours: int = Field(default=0, ge=0)
    extra_people: int = Field(default=0, ge=0)
    extra_photos: int = Field(default=0, ge=0)
    extra_makeup: int = Field(default=0, ge=0)


class PartnerItem(BaseModel):
    included: bool = False
    actual_cost: Money = Decimal("0")


class PartnerCosts(BaseModel):
    clothing: List[Dict[str, Any]] = []
    printing: PartnerItem = PartnerItem()
    flower: PartnerItem = PartnerItem()
    total_cost: Money = Decimal("0")
    notes: List[str] = []


class ProjectFormData(BaseModel):
    customer_name: str = ""
    customer_phone: str = ""
    customer_email: Optional[str] = None
    package_id: EntityId = ""
    package_name: str = ""
    package_price: Money = Decimal("0")
    discount: Money = Decimal("0")
    payment_status: PaymentStatus = PaymentStatus.UNPAID
    status: ProjectStatus = ProjectStatus.CONFIRMED
    shoot_date: str = ""
    shoot_time: Optional[str] = None
    shoot_location: Optional[str] = None
    notes: Optional[str] = None
    team: TeamInput = TeamInput()
    surcharge: Surcharge = Surcharge()
    partners: PartnerCosts = PartnerCosts()

    @field_validator("customer_name", "customer_phone")
    def validate_required(cls, v):
        if not v or not v.strip():
            raise ValueError("Vui lòng nhập thông tin khách hàng")
        return v.strip()

    @field_validator("shoot_date")
    def validate_shoot_date(cls, v):
        if not v:
            raise ValueError("Vui lòng chọn ngày chụp")
        return v

    @field_validator("package_price", "discount")
    def validate_non_negative(cls, v):
        if v < 0:
            raise ValueError("Giá trị không được âm")
        return v

    @model_validator(mode="after")
    def validate_main_photographer(self):
        if not self.team.main_photographer.employee_id:
            raise ValueError("Vui lòng chọn Photographer chính!")
        return self
