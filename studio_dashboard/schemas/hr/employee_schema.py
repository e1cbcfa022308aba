from pydantic import BaseModel, ConfigDict, field_validator
from typing import List, Optional
from datetime import datetime
from decimal import Decimal

from studio_dashboard.schemas.common.pagination import EntityId, Money


class BankAccount(BaseModel):
    bank_name: str = ""
    account_number: str = ""
    account_holder: str = ""

    model_config = ConfigDict(extra="allow")


class EmergencyContact(BaseModel):
    name: str = ""
    phone: str = ""
    relationship: str = ""

    model_config = ConfigDict(extra="allow")


class DefaultRates(BaseModel):
    main_photo: Money = Decimal("500000")
    assist_photo: Money = Decimal("300000")
    retouch: Money = Decimal("50000")
    makeup: Money = Decimal("400000")

    model_config = ConfigDict(extra="allow")

    @field_validator("main_photo", "assist_photo", "retouch", "makeup", mode="before")
    def coerce_rate(cls, v):
        # Empty inputs fall back to zero instead of failing the whole record
        if v in (None, ""):
            return Decimal("0")
        return v


class EmployeeBase(BaseModel):
    name: str
    role: str = ""
    skills: List[str] = []
    phone: Optional[str] = None
    email: Optional[str] = None
    address: Optional[str] = None
    base_salary: Money = Decimal("0")
    notes: Optional[str] = None
    bank_account: BankAccount = BankAccount()
    emergency_contact: EmergencyContact = EmergencyContact()
    default_rates: DefaultRates = DefaultRates()
    start_date: Optional[str] = None
    is_active: bool = True
    avatar: Optional[str] = None

    model_config = ConfigDict(extra="allow")

    @field_validator("base_salary", mode="before")
    def coerce_salary(cls, v):
        if v in (None, ""):
            return Decimal("0")
        return v


class EmployeeCreate(EmployeeBase):
    @field_validator("name")
    def validate_name(cls, v):
        if not v or not v.strip():
            raise ValueError("Vui lòng nhập tên nhân viên")
        return v.strip()

    @field_validator("role")
    def validate_role(cls, v):
        if not v or not v.strip():
            raise ValueError("Vui lòng chọn vai trò")
        return v

    @field_validator("base_salary")
    def validate_non_negative(cls, v):
        if v < 0:
            raise ValueError("Lương cơ bản không được âm")
        return v


class Employee(EmployeeBase):
    id: EntityId
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
