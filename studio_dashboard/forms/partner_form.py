from typing import Any, Dict, List

from studio_dashboard.calculations.pricing import to_decimal
from studio_dashboard.forms.base_form import EntityForm
from studio_dashboard.schemas.studio.partner_schema import BILLED_COST, PartnerCreate


class PartnerForm(EntityForm):
    payload_schema = PartnerCreate
    created_message = "Thêm đối tác thành công!"
    updated_message = "Cập nhật đối tác thành công!"
    failure_message = "Có lỗi xảy ra khi lưu đối tác"

    def defaults(self) -> Dict[str, Any]:
        return {
            "name": "",
            "type": "other",
            "contact_info": {"contact_person": "", "phone": "", "email": "", "address": ""},
            "services": [],
            "cost": 0,
            "rating": 5,
            "notes": "",
            "is_active": True,
        }

    def handle_change(self, field: str, value: Any):
        if field == "cost" and value != BILLED_COST:
            value = to_decimal(value)
        elif field == "rating":
            value = int(to_decimal(value))
        super().handle_change(field, value)

    def set_services(self, services: List[str]):
        self.handle_change("services", [s.strip() for s in services if s and s.strip()])
