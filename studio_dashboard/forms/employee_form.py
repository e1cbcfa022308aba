from typing import Any, Dict, List

from studio_dashboard.calculations.pricing import to_decimal
from studio_dashboard.forms.base_form import EntityForm
from studio_dashboard.schemas.hr.employee_schema import EmployeeCreate

ROLE_SKILLS: Dict[str, List[str]] = {
    "Photo/Retouch": ["Chụp chính", "Chụp phụ", "Retouch"],
    "Makeup Artist": ["Makeup", "Làm tóc", "Styling"],
    "Sales": ["Sales", "Tư vấn khách hàng", "Quản lý dự án"],
    "Manager": ["Quản lý dự án", "Quản lý nhân sự"],
    "Content": ["Viết content", "Quản lý social"],
    "Designer": ["Thiết kế", "Chỉnh sửa video"],
}

NUMERIC_FIELDS = {
    "base_salary",
    "default_rates.main_photo",
    "default_rates.assist_photo",
    "default_rates.retouch",
    "default_rates.makeup",
}


class EmployeeForm(EntityForm):
    payload_schema = EmployeeCreate
    created_message = "Thêm nhân viên thành công!"
    updated_message = "Cập nhật nhân viên thành công!"
    failure_message = "Có lỗi xảy ra khi lưu nhân viên"

    def defaults(self) -> Dict[str, Any]:
        return {
            "name": "",
            "role": "",
            "skills": [],
            "phone": "",
            "email": "",
            "address": "",
            "base_salary": 0,
            "bank_account": {"bank_name": "", "account_number": "", "account_holder": ""},
            "emergency_contact": {"name": "", "phone": "", "relationship": ""},
            "default_rates": {
                "main_photo": 500000,
                "assist_photo": 300000,
                "retouch": 50000,
                "makeup": 400000,
            },
            "notes": "",
            "is_active": True,
        }

    @property
    def available_skills(self) -> List[str]:
        return ROLE_SKILLS.get(self.data.get("role") or "", [])

    def handle_change(self, field: str, value: Any):
        if field in NUMERIC_FIELDS:
            value = to_decimal(value)
        super().handle_change(field, value)

    def on_change(self, field: str, value: Any):
        if field == "role":
            # Skills belong to a role, start over
            self.data = {**self.data, "skills": []}

    def toggle_skill(self, skill: str):
        skills = list(self.data.get("skills") or [])
        if skill in skills:
            skills.remove(skill)
        else:
            skills.append(skill)
        self.data = {**self.data, "skills": skills}
