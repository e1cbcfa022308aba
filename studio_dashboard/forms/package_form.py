from decimal import Decimal
from typing import Any, Dict

from pydantic import BaseModel

from studio_dashboard.calculations.pricing import to_decimal
from studio_dashboard.core.config import PricingRules
from studio_dashboard.forms.base_form import EntityForm
from studio_dashboard.schemas.studio.package_schema import PackageCreate
from studio_dashboard.services.base_service import ResourceService
from studio_dashboard.services.notification.notification_service import ToastNotifier


class PackageForm(EntityForm):
    """Package modal.

    The operator types staff pay in dong under ``services``; the backend keeps
    it in thousands inside ``details``.
    """

    payload_schema = PackageCreate
    created_message = "Thêm gói chụp thành công!"
    updated_message = "Cập nhật gói chụp thành công!"
    failure_message = "Có lỗi xảy ra khi lưu gói chụp"

    def __init__(self, service: ResourceService, notifier: ToastNotifier, rules: PricingRules,
                 entity: Any = None, on_success=None):
        self.rules = rules
        super().__init__(service, notifier, entity=entity, on_success=on_success)

    def defaults(self) -> Dict[str, Any]:
        return {
            "name": "",
            "price": 0,
            "category": "wedding",
            "description": "",
            "services": {
                "photographer_main": 500000,
                "photographer_assistant": 300000,
                "makeup": 400000,
                "retouch_per_photo": 50000,
                "retouch_photos": 100,
                "shooting_time": "",
                "location": "",
            },
            "notes": "",
            "is_active": True,
        }

    def from_entity(self, entity: Any) -> Dict[str, Any]:
        data = super().from_entity(entity)
        values = entity.model_dump(mode="json") if isinstance(entity, BaseModel) else dict(entity)
        details = values.get("details") or {}
        unit = self.rules.package_rate_unit
        services = dict(data["services"])
        for field, detail_key in (("photographer_main", "photo"), ("photographer_assistant", "assistant"),
                                  ("makeup", "makeup"), ("retouch_per_photo", "retouch")):
            if details.get(detail_key) not in (None, ""):
                raw = str(details[detail_key]).rstrip("kK")
                services[field] = to_decimal(raw) * unit
        if details.get("time"):
            services["shooting_time"] = details["time"]
        if details.get("location"):
            services["location"] = details["location"]
        if details.get("retouch_photos"):
            services["retouch_photos"] = details["retouch_photos"]
        data["services"] = services
        return data

    def handle_change(self, field: str, value: Any):
        if field == "price" or (field.startswith("services.") and field not in ("services.shooting_time", "services.location")):
            value = to_decimal(value)
        super().handle_change(field, value)

    def _in_thousands(self, amount: Any) -> Decimal:
        return to_decimal(amount) / self.rules.package_rate_unit

    def payload_data(self) -> Dict[str, Any]:
        services = self.data.get("services") or {}
        candidate = {
            **{k: v for k, v in self.data.items() if k != "services"},
            "details": {
                "photo": self._in_thousands(services.get("photographer_main")),
                "assistant": self._in_thousands(services.get("photographer_assistant")),
                "makeup": self._in_thousands(services.get("makeup")),
                "retouch": self._in_thousands(services.get("retouch_per_photo")),
                "time": services.get("shooting_time") or None,
                "location": services.get("location") or None,
                "retouch_photos": int(to_decimal(services.get("retouch_photos"))) or None,
                "extra_services": [],
            },
            "includes": [],
        }
        return candidate
