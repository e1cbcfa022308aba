import re
from pydantic import BaseModel, ConfigDict, field_validator
from typing import List, Optional, Union
from datetime import datetime
from decimal import Decimal
from enum import Enum

from studio_dashboard.schemas.common.pagination import EntityId, Money
from studio_dashboard.schemas.hr.employee_schema import Employee

MONTH_PATTERN = re.compile(r"^\d{4}-(0[1-9]|1[0-2])$")


class SalaryStatus(str, Enum):
    PENDING = "pending"
    PAID = "paid"
    CANCELLED = "cancelled"


class SalaryProjectLine(BaseModel):
    project_id: Optional[EntityId] = None
    project_name: str = ""
    salary: Money = Decimal("0")

    model_config = ConfigDict(extra="allow")


class SalaryCreate(BaseModel):
    employee_id: EntityId
    month: str
    base_salary: Money = Decimal("0")
    bonus: Money = Decimal("0")
    deduction: Money = Decimal("0")
    total_amount: Money = Decimal("0")
    projects_detail: List[SalaryProjectLine] = []
    notes: str = ""
    status: SalaryStatus = SalaryStatus.PENDING

    @field_validator("employee_id")
    def validate_employee(cls, v):
        if v in (None, ""):
            raise ValueError("Vui lòng chọn nhân viên")
        return v

    @field_validator("month")
    def validate_month(cls, v):
        if not MONTH_PATTERN.match(v or ""):
            raise ValueError("Tháng phải có dạng YYYY-MM")
        return v

    @field_validator("base_salary", "bonus", "deduction")
    def validate_non_negative(cls, v):
        if v < 0:
            raise ValueError("Giá trị không được âm")
        return v


class SalaryPayment(BaseModel):
    id: EntityId
    # Embedded record on list responses, a bare id on some create responses
    employee: Optional[Union[Employee, EntityId]] = None
    month: str
    base_salary: Money = Decimal("0")
    bonus: Money = Decimal("0")
    deduction: Money = Decimal("0")
    total_amount: Money = Decimal("0")
    payment_date: Optional[str] = None
    status: SalaryStatus = SalaryStatus.PENDING
    notes: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(extra="allow")

    @property
    def employee_name(self) -> str:
        if isinstance(self.employee, Employee):
            return self.employee.name
        return ""
