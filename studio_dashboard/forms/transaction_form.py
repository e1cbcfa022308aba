from datetime import date
from typing import Any, Dict, List

from studio_dashboard.calculations.pricing import to_decimal
from studio_dashboard.forms.base_form import EntityForm
from studio_dashboard.schemas.finance.transaction_schema import (
    TRANSACTION_CATEGORIES,
    PaymentMethod,
    TransactionCreate,
    TransactionType,
)


class TransactionForm(EntityForm):
    payload_schema = TransactionCreate
    created_message = "Thêm giao dịch thành công!"
    updated_message = "Cập nhật giao dịch thành công!"
    failure_message = "Có lỗi xảy ra"

    def defaults(self) -> Dict[str, Any]:
        return {
            "type": TransactionType.INCOME.value,
            "category": "",
            "amount": 0,
            "description": "",
            "transaction_date": date.today().isoformat(),
            "payment_method": PaymentMethod.CASH.value,
            "notes": "",
        }

    @property
    def category_options(self) -> List[str]:
        try:
            return TRANSACTION_CATEGORIES[TransactionType(self.data.get("type"))]
        except ValueError:
            return []

    def handle_change(self, field: str, value: Any):
        if field == "amount":
            value = to_decimal(value)
        super().handle_change(field, value)

    def on_change(self, field: str, value: Any):
        if field == "type":
            self.data = {**self.data, "category": ""}
