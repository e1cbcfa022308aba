from datetime import date
from decimal import Decimal
from typing import Any, Dict, List, Optional

from studio_dashboard.calculations.pricing import salary_total, to_decimal
from studio_dashboard.forms.base_form import EntityForm
from studio_dashboard.schemas.common.pagination import EntityId
from studio_dashboard.schemas.hr.employee_schema import Employee
from studio_dashboard.schemas.hr.salary_schema import SalaryCreate, SalaryStatus
from studio_dashboard.schemas.studio.project_schema import Project
from studio_dashboard.services.hr.salary_service import SalaryService
from studio_dashboard.services.notification.notification_service import ToastNotifier

AMOUNT_FIELDS = {"base_salary", "bonus", "deduction"}


class SalaryForm(EntityForm):
    """Salary calculator: base pay, per-project pay, bonus and deduction"""

    payload_schema = SalaryCreate
    created_message = "Tạo bảng lương thành công!"
    updated_message = "Cập nhật bảng lương thành công!"
    failure_message = "Có lỗi xảy ra khi tạo bảng lương"

    def __init__(self, service: Optional[SalaryService], notifier: ToastNotifier,
                 employees: Optional[List[Employee]] = None, projects: Optional[List[Project]] = None,
                 entity: Any = None, on_success=None):
        self.employees = employees or []
        self.projects = projects or []
        super().__init__(service, notifier, entity=entity, on_success=on_success)

    def defaults(self) -> Dict[str, Any]:
        return {
            "employee_id": "",
            "month": date.today().strftime("%Y-%m"),
            "base_salary": 0,
            "projects": [],
            "bonus": 0,
            "deduction": 0,
            "notes": "",
        }

    @property
    def total(self) -> Decimal:
        return salary_total(
            self.data.get("base_salary"),
            [line.get("salary") for line in self.data.get("projects") or []],
            self.data.get("bonus"),
            self.data.get("deduction"),
        )

    def handle_change(self, field: str, value: Any):
        if field in AMOUNT_FIELDS:
            value = to_decimal(value)
        super().handle_change(field, value)

    def select_employee(self, employee_id: EntityId):
        employee = next((e for e in self.employees if str(e.id) == str(employee_id)), None)
        if employee is None:
            self.handle_change("employee_id", employee_id)
            return
        self.data = {**self.data, "employee_id": employee.id, "base_salary": employee.base_salary}

    def add_project_line(self):
        lines = list(self.data["projects"]) + [{"project_id": "", "project_name": "", "salary": 0}]
        self.data = {**self.data, "projects": lines}

    def remove_project_line(self, index: int):
        self.data = {**self.data, "projects": [p for i, p in enumerate(self.data["projects"]) if i != index]}

    def update_project_line(self, index: int, field: str, value: Any):
        if field == "salary":
            value = to_decimal(value)
        line = {**self.data["projects"][index], field: value}
        if field == "project_id":
            project = next((p for p in self.projects if str(p.id) == str(value)), None)
            if project is not None:
                line["project_name"] = project.customer_name
        lines = list(self.data["projects"])
        lines[index] = line
        self.data = {**self.data, "projects": lines}

    def payload_data(self) -> Dict[str, Any]:
        return {
            "employee_id": self.data.get("employee_id"),
            "month": self.data.get("month"),
            "base_salary": self.data.get("base_salary"),
            "bonus": self.data.get("bonus"),
            "deduction": self.data.get("deduction"),
            "total_amount": self.total,
            "projects_detail": self.data.get("projects") or [],
            "notes": self.data.get("notes") or "",
            "status": SalaryStatus.PENDING.value,
        }
