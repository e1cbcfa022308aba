from pydantic import BaseModel, ConfigDict, field_validator, model_validator
from typing import Any, Dict, List, Optional
from datetime import date, datetime
from decimal import Decimal
from enum import Enum

from studio_dashboard.schemas.common.pagination import EntityId, Money


class TransactionType(str, Enum):
    INCOME = "income"
    EXPENSE = "expense"


class PaymentMethod(str, Enum):
    CASH = "cash"
    BANK_TRANSFER = "bank_transfer"
    CREDIT_CARD = "credit_card"


TRANSACTION_CATEGORIES: Dict[TransactionType, List[str]] = {
    TransactionType.INCOME: ["project_payment", "deposit", "other_income"],
    TransactionType.EXPENSE: [
        "salary",
        "marketing",
        "office",
        "equipment",
        "partner_payment",
        "other_expense",
    ],
}


class TransactionCreate(BaseModel):
    type: TransactionType = TransactionType.INCOME
    category: str = ""
    amount: Money = Decimal("0")
    description: str = ""
    transaction_date: date
    payment_method: PaymentMethod = PaymentMethod.CASH
    notes: str = ""
    project_id: Optional[EntityId] = None

    @field_validator("amount")
    def validate_amount(cls, v):
        if v <= 0:
            raise ValueError("Số tiền phải lớn hơn 0")
        return v

    @model_validator(mode="after")
    def validate_category(self):
        if self.category not in TRANSACTION_CATEGORIES[self.type]:
            raise ValueError("Vui lòng chọn danh mục")
        return self


class Transaction(BaseModel):
    id: EntityId
    type: TransactionType
    category: str = ""
    amount: Money = Decimal("0")
    description: str = ""
    transaction_date: Optional[str] = None
    payment_method: Optional[str] = None
    project: Optional[Any] = None
    created_by: Optional[Any] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(extra="allow")


class FinanceSummary(BaseModel):
    total_income: Money = Decimal("0")
    total_expense: Money = Decimal("0")
    profit: Money = Decimal("0")
    profit_margin: float = 0.0
