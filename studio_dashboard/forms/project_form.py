import logging
from datetime import date
from typing import Any, Dict, Iterable, List, Optional

from pydantic import BaseModel

from studio_dashboard.calculations.pricing import (
    apply_bonuses,
    apply_package_salaries,
    financial_summary,
    package_salaries,
    price_split,
    surcharge_bonuses,
    to_decimal,
)
from studio_dashboard.core.config import PricingRules
from studio_dashboard.forms.base_form import EntityForm
from studio_dashboard.schemas.common.pagination import EntityId
from studio_dashboard.schemas.hr.employee_schema import Employee
from studio_dashboard.schemas.studio.package_schema import Package
from studio_dashboard.schemas.studio.pricing_schema import QuoteResponse
from studio_dashboard.schemas.studio.project_schema import (
    PartnerCosts,
    ProjectFormData,
    ProjectStatus,
    Surcharge,
    TeamInput,
)
from studio_dashboard.services.studio.project_service import ProjectService
from studio_dashboard.services.notification.notification_service import ToastNotifier

logger = logging.getLogger(__name__)

CUSTOM_PACKAGE = "custom"
PHOTO_ROLES = {"Photo/Retouch", "Photographer"}
MAKEUP_ROLES = {"Makeup Artist", "Makeup"}
RETOUCH_ROLES = {"Photo/Retouch", "Retouch", "Retoucher"}
TEAM_GROUPS = ("assistants", "makeup_artists", "retouch_artists")

# Backend names of the team groups
TEAM_GROUP_KEYS = {
    "assistants": "assist_photographers",
    "makeup_artists": "makeup_artists",
    "retouch_artists": "retouch_artists",
}


def _has_skill(employee: Employee, *skills: str) -> bool:
    # Employees without any skill listed can fill any slot of their role
    return not employee.skills or any(s in employee.skills for s in skills)


def photographers(employees: Iterable[Employee]) -> List[Employee]:
    return [e for e in employees if e.role in PHOTO_ROLES and _has_skill(e, "Chụp chính")]


def assistants(employees: Iterable[Employee]) -> List[Employee]:
    return [e for e in employees if e.role in PHOTO_ROLES and _has_skill(e, "Chụp phụ", "Chụp chính")]


def makeup_artists(employees: Iterable[Employee]) -> List[Employee]:
    return [e for e in employees if e.role in MAKEUP_ROLES]


def retouch_artists(employees: Iterable[Employee]) -> List[Employee]:
    return [e for e in employees if e.role in RETOUCH_ROLES and _has_skill(e, "Retouch")]


def _member(employee_id: Any = "", salary: Any = 0, bonus: Any = 0) -> Dict[str, Any]:
    return {"employee_id": employee_id or "", "salary": salary or 0, "bonus": bonus or 0}


class ProjectForm(EntityForm):
    """Project modal with its live quote.

    Picking a package fills the staff pay, surcharge counts drive the bonus
    of every member of each role group, and ``quote()`` recomputes the
    deposit split and the profit summary from the current working copy.
    """

    payload_schema = ProjectFormData
    created_message = "Tạo dự án mới thành công!"
    updated_message = "Cập nhật dự án thành công!"
    failure_message = "Có lỗi xảy ra khi lưu dự án"

    def __init__(self, service: ProjectService, notifier: ToastNotifier, rules: PricingRules,
                 packages: Optional[List[Package]] = None, entity: Any = None, on_success=None):
        self.rules = rules
        self.packages = packages or []
        super().__init__(service, notifier, entity=entity, on_success=on_success)

    def defaults(self) -> Dict[str, Any]:
        return {
            "customer_name": "",
            "customer_phone": "",
            "customer_email": "",
            "package_id": "",
            "package_name": "",
            "package_price": 0,
            "discount": 0,
            "payment_status": "unpaid",
            "status": ProjectStatus.CONFIRMED.value,
            "shoot_date": date.today().isoformat(),
            "shoot_time": "",
            "shoot_location": "",
            "notes": "",
            "team": {
                "main_photographer": _member(),
                "assistants": [],
                "makeup_artists": [],
                "retouch_artists": [],
            },
            "surcharge": {"extra_hours": 0, "extra_people": 0, "extra_photos": 0, "extra_makeup": 0},
            "partners": PartnerCosts().model_dump(mode="json"),
        }

    def from_entity(self, entity: Any) -> Dict[str, Any]:
        values = entity.model_dump(mode="json") if isinstance(entity, BaseModel) else dict(entity)
        team = values.get("team") or {}

        def members(key: str) -> List[Dict[str, Any]]:
            return [_member(m.get("employee"), m.get("salary"), m.get("bonus")) for m in team.get(key) or []]

        main = team.get("main_photographer") or {}
        data = self.defaults()
        data.update({
            "customer_name": values.get("customer_name") or "",
            "customer_phone": values.get("customer_phone") or "",
            "customer_email": values.get("customer_email") or "",
            "package_id": values.get("package_type") or "",
            "package_name": values.get("package_name") or "",
            "package_price": values.get("package_price") or 0,
            "discount": values.get("package_discount") or 0,
            "payment_status": (values.get("payment") or {}).get("status") or "unpaid",
            "status": values.get("status") or ProjectStatus.CONFIRMED.value,
            "shoot_date": values.get("shoot_date") or data["shoot_date"],
            "shoot_time": values.get("shoot_time") or "",
            "shoot_location": values.get("location") or "",
            "notes": values.get("notes") or "",
            "team": {
                "main_photographer": _member(main.get("employee"), main.get("salary"), main.get("bonus")),
                "assistants": members("assist_photographers"),
                "makeup_artists": members("makeup_artists"),
                "retouch_artists": members("retouch_artists"),
            },
        })
        if isinstance(values.get("partners"), dict):
            data["partners"] = {**data["partners"], **values["partners"]}
        return data

    # ---------- Dependent fields ----------

    def handle_change(self, field: str, value: Any):
        if field in ("package_price", "discount") or field.endswith((".salary", ".bonus")) \
                or field == "partners.total_cost":
            value = to_decimal(value)
        elif field.startswith("surcharge."):
            value = max(int(to_decimal(value)), 0)
        super().handle_change(field, value)

    def on_change(self, field: str, value: Any):
        if field.startswith("surcharge."):
            self._apply_surcharge_bonuses()

    def _team(self) -> TeamInput:
        return TeamInput.model_validate(self.data["team"])

    def _store_team(self, team: TeamInput):
        self.data = {**self.data, "team": team.model_dump(mode="json")}

    def _has_surcharge(self) -> bool:
        return any(self.data["surcharge"].values())

    def _apply_surcharge_bonuses(self):
        bonuses = surcharge_bonuses(Surcharge.model_validate(self.data["surcharge"]), self.rules)
        self._store_team(apply_bonuses(self._team(), bonuses))

    def _selected_package(self) -> Optional[Package]:
        package_id = str(self.data.get("package_id") or "")
        for package in self.packages:
            if str(package.id) == package_id:
                return package
        return None

    def _apply_package_salaries(self):
        package = self._selected_package()
        if package is not None:
            self._store_team(apply_package_salaries(self._team(), package_salaries(package.details, self.rules)))

    def select_package(self, package_id: EntityId):
        if package_id == CUSTOM_PACKAGE or not package_id:
            self.data = {**self.data, "package_id": "", "package_name": "", "package_price": 0}
            return
        self.data = {**self.data, "package_id": package_id}
        package = self._selected_package()
        if package is None:
            logger.warning(f"Unknown package {package_id} selected")
            return
        self.data = {**self.data, "package_name": package.name, "package_price": to_decimal(package.price)}
        self._apply_package_salaries()

    def recalculate(self):
        """Re-derive staff pay and surcharge bonuses after a bulk change"""
        self._apply_package_salaries()
        if self._has_surcharge():
            self._apply_surcharge_bonuses()

    def set_main_photographer(self, employee_id: EntityId):
        self.handle_change("team.main_photographer.employee_id", employee_id)
        self._apply_package_salaries()
        if self._has_surcharge():
            self._apply_surcharge_bonuses()

    def add_member(self, group: str, employee_id: EntityId = ""):
        if group not in TEAM_GROUPS:
            raise ValueError(f"Unknown team group: {group}")
        members = list(self.data["team"][group]) + [_member(employee_id)]
        self.handle_change(f"team.{group}", members)
        self._apply_package_salaries()
        if self._has_surcharge():
            self._apply_surcharge_bonuses()

    def remove_member(self, group: str, index: int):
        members = [m for i, m in enumerate(self.data["team"][group]) if i != index]
        self.handle_change(f"team.{group}", members)

    def update_member(self, group: str, index: int, field: str, value: Any):
        self.handle_change(f"team.{group}.{index}.{field}", value)

    # ---------- Quote ----------

    def quote(self) -> QuoteResponse:
        split = price_split(self.data.get("package_price"), self.data.get("discount"), self.rules)
        surcharge = Surcharge.model_validate(self.data["surcharge"])
        team = self._team()
        partners = PartnerCosts.model_validate(self.data["partners"])
        return QuoteResponse(
            split=split,
            bonuses=surcharge_bonuses(surcharge, self.rules),
            team=team,
            summary=financial_summary(split.final_price, surcharge, team, partners, self.rules),
        )

    # ---------- Submit ----------

    def to_payload(self, model: ProjectFormData) -> Dict[str, Any]:
        split = price_split(model.package_price, model.discount, self.rules)

        def assignments(members) -> List[Dict[str, Any]]:
            return [
                {"employee": m.employee_id, "salary": m.salary, "bonus": m.bonus, "notes": m.notes}
                for m in members
            ]

        main = model.team.main_photographer
        payload = {
            "customer_name": model.customer_name,
            "customer_phone": model.customer_phone,
            "customer_email": model.customer_email or None,
            "package_type": model.package_id or None,
            "package_name": model.package_name,
            "package_price": model.package_price,
            "package_discount": model.discount,
            "shoot_date": model.shoot_date,
            "shoot_time": model.shoot_time or None,
            "location": model.shoot_location or None,
            "notes": model.notes or None,
            # New projects start as pending, later transitions happen from the list
            "status": model.status.value if self.is_edit else ProjectStatus.PENDING.value,
            "team": {
                "main_photographer": {
                    "employee": main.employee_id,
                    "salary": main.salary,
                    "bonus": main.bonus,
                    "notes": main.notes,
                },
                **{TEAM_GROUP_KEYS[g]: assignments(getattr(model.team, g)) for g in TEAM_GROUPS},
            },
            "payment": {
                "status": model.payment_status.value,
                "deposit": split.deposit,
                "final": split.final_price,
                "paid": 0,
                "payment_history": [],
            },
            "partners": model.partners.model_dump(mode="json") if model.partners.total_cost else None,
            "additional_packages": [],
        }
        for member in payload["team"]["retouch_artists"]:
            member["quantity"] = 0
        return payload
