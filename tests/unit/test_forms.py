import asyncio
from decimal import Decimal

import pytest
from pydantic import ValidationError as PydanticValidationError

from studio_dashboard.core.config import PricingRules
from studio_dashboard.core.exceptions import BackendError, ValidationError
from studio_dashboard.forms.base_form import map_validation_errors, set_path
from studio_dashboard.forms.employee_form import EmployeeForm
from studio_dashboard.forms.package_form import PackageForm
from studio_dashboard.forms.partner_form import PartnerForm
from studio_dashboard.forms.project_form import ProjectForm, photographers, retouch_artists
from studio_dashboard.forms.salary_form import SalaryForm
from studio_dashboard.forms.transaction_form import TransactionForm
from studio_dashboard.schemas.hr.employee_schema import Employee
from studio_dashboard.schemas.studio.package_schema import Package
from studio_dashboard.schemas.studio.project_schema import Project
from tests.conftest import EMPLOYEES, PACKAGES, PROJECTS

RULES = PricingRules()


class RecordingService:
    endpoint = "records"

    def __init__(self, fail=None, delay=0.0):
        self.created = []
        self.updated = []
        self.fail = fail
        self.delay = delay

    async def create(self, payload):
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.fail:
            raise self.fail
        self.created.append(payload)
        return {"id": 10, **payload}

    async def update(self, entity_id, payload):
        self.updated.append((entity_id, payload))
        return {"id": entity_id, **payload}


def _packages():
    return [Package.model_validate(p) for p in PACKAGES]


def test_set_path_copies_branches():
    data = {"team": {"assistants": [{"bonus": 0}, {"bonus": 0}]}, "other": {"x": 1}}

    updated = set_path(data, ["team", "assistants", "1", "bonus"], 5)

    assert updated["team"]["assistants"][1]["bonus"] == 5
    assert data["team"]["assistants"][1]["bonus"] == 0
    assert updated["other"] is data["other"]


@pytest.mark.asyncio
class TestEntityForm:
    async def test_validation_error_is_mapped_and_toasted(self, notifier):
        service = RecordingService()
        form = EmployeeForm(service, notifier)

        with pytest.raises(ValidationError) as exc_info:
            await form.submit()

        assert exc_info.value.status_code == 422
        assert form.errors["name"] == "Vui lòng nhập tên nhân viên"
        assert notifier.pending()[-1]["type"] == "error"
        assert service.created == []

    async def test_create_toasts_and_calls_on_success(self, notifier):
        refreshed = []

        async def on_success():
            refreshed.append(True)

        service = RecordingService()
        form = EmployeeForm(service, notifier, on_success=on_success)
        form.handle_change("name", "Phan Thanh Tâm")
        form.handle_change("role", "Photo/Retouch")
        form.handle_change("base_salary", "7000000")

        result = await form.submit()

        assert result["id"] == 10
        assert service.created[0]["base_salary"] == 7000000
        assert refreshed == [True]
        toast = notifier.pending()[-1]
        assert (toast["type"], toast["message"]) == ("success", "Thêm nhân viên thành công!")

    async def test_edit_uses_update(self, notifier):
        service = RecordingService()
        employee = Employee.model_validate(EMPLOYEES[0])
        form = EmployeeForm(service, notifier, entity=employee)

        assert form.is_edit
        assert form.data["name"] == "Nguyễn Văn An"
        await form.submit()

        assert service.updated[0][0] == 1
        assert service.created == []

    async def test_reentrant_submit_is_ignored(self, notifier):
        service = RecordingService(delay=0.01)
        form = PartnerForm(service, notifier)
        form.handle_change("name", "Studio Hoa")

        first, second = await asyncio.gather(form.submit(), form.submit())

        assert second is None
        assert first["name"] == "Studio Hoa"
        assert len(service.created) == 1

    async def test_backend_failure_toasts_and_reraises(self, notifier):
        form = PartnerForm(RecordingService(fail=BackendError(400, "Tên đã tồn tại")), notifier)
        form.handle_change("name", "Studio Hoa")

        with pytest.raises(BackendError):
            await form.submit()

        assert form.is_loading is False
        assert notifier.pending()[-1]["message"] == "Tên đã tồn tại"


class TestEmployeeForm:
    def test_role_change_resets_skills(self, notifier):
        form = EmployeeForm(None, notifier)
        form.handle_change("role", "Photo/Retouch")
        form.toggle_skill("Chụp chính")
        assert form.data["skills"] == ["Chụp chính"]
        assert "Retouch" in form.available_skills

        form.handle_change("role", "Makeup Artist")

        assert form.data["skills"] == []
        form.toggle_skill("Makeup")
        form.toggle_skill("Makeup")
        assert form.data["skills"] == []


class TestPackageForm:
    def test_services_sent_in_thousands(self, notifier):
        form = PackageForm(None, notifier, RULES)
        form.handle_change("name", "Ngoại cảnh")
        form.handle_change("services.photographer_main", "600000")

        payload = form.to_payload(form.validate())

        assert payload["details"]["photo"] == 600
        assert payload["details"]["assistant"] == 300
        assert "services" not in payload

    def test_edit_reads_thousands_back(self, notifier):
        form = PackageForm(None, notifier, RULES, entity=_packages()[0])

        assert form.data["services"]["photographer_main"] == Decimal("500000")
        assert form.data["services"]["retouch_per_photo"] == Decimal("50000")
        assert form.data["services"]["shooting_time"] == "8h"


class TestPartnerForm:
    def test_billed_cost_kept(self, notifier):
        form = PartnerForm(None, notifier)
        form.handle_change("name", "Hoa Xinh")
        form.handle_change("cost", "Theo bill")
        form.handle_change("rating", "4")
        form.set_services([" Hoa cưới ", "", "Hoa bàn"])

        payload = form.to_payload(form.validate())

        assert payload["cost"] == "Theo bill"
        assert payload["rating"] == 4
        assert payload["services"] == ["Hoa cưới", "Hoa bàn"]

    def test_rating_out_of_range(self, notifier):
        form = PartnerForm(None, notifier)
        form.handle_change("name", "Hoa Xinh")
        form.handle_change("rating", 9)

        with pytest.raises(ValidationError):
            form.validate()
        assert "rating" in form.errors


class TestProjectForm:
    def _form(self, notifier, service=None, **kwargs):
        return ProjectForm(service, notifier, RULES, packages=_packages(), **kwargs)

    def test_employee_pickers(self):
        employees = [Employee.model_validate(e) for e in EMPLOYEES]
        assert [e.id for e in photographers(employees)] == [1]
        assert [e.id for e in retouch_artists(employees)] == [1]

    def test_select_package_fills_price_and_salaries(self, notifier):
        form = self._form(notifier)
        form.set_main_photographer(1)
        form.add_member("assistants", 3)

        form.select_package(1)

        assert form.data["package_price"] == Decimal("15000000")
        assert form.data["package_name"] == "Cưới Premium"
        assert form.data["team"]["main_photographer"]["salary"] == 500000
        assert form.data["team"]["assistants"][0]["salary"] == 300000

    def test_custom_package_resets(self, notifier):
        form = self._form(notifier)
        form.select_package(1)
        form.select_package("custom")
        assert form.data["package_id"] == ""
        assert form.data["package_price"] == 0

    def test_surcharge_sets_group_bonuses(self, notifier):
        form = self._form(notifier)
        form.set_main_photographer(1)
        form.add_member("assistants", 3)
        form.add_member("assistants", 4)

        form.handle_change("surcharge.extra_hours", "2")

        team = form.data["team"]
        assert team["main_photographer"]["bonus"] == 600000
        assert [m["bonus"] for m in team["assistants"]] == [400000, 400000]

        # Members added later pick up the current bonus
        form.add_member("makeup_artists", 2)
        assert form.data["team"]["makeup_artists"][0]["bonus"] == 400000

    def test_edit_and_remove_team_rows(self, notifier):
        form = self._form(notifier)
        form.add_member("assistants", 3)
        form.add_member("assistants", 4)

        form.update_member("assistants", 1, "salary", "250000")
        form.remove_member("assistants", 0)

        assert form.data["team"]["assistants"] == [{"employee_id": 4, "salary": Decimal("250000"), "bonus": 0}]

    def test_unknown_team_group(self, notifier):
        with pytest.raises(ValueError):
            self._form(notifier).add_member("drivers", 1)

    def test_negative_surcharge_clamped(self, notifier):
        form = self._form(notifier)
        form.handle_change("surcharge.extra_people", -3)
        assert form.data["surcharge"]["extra_people"] == 0

    def test_quote(self, notifier):
        form = self._form(notifier)
        form.set_main_photographer(1)
        form.select_package(1)
        form.handle_change("discount", 1000000)
        form.handle_change("surcharge.extra_hours", 1)

        quote = form.quote()

        assert quote.split.final_price == Decimal("14000000")
        assert quote.split.deposit == Decimal("8400000")
        assert quote.summary.total_revenue == Decimal("15000000")
        assert quote.summary.total_labor_costs == Decimal("800000")

    def test_main_photographer_required(self, notifier):
        form = self._form(notifier)
        form.handle_change("customer_name", "Khách A")
        form.handle_change("customer_phone", "0909")

        with pytest.raises(ValidationError) as exc_info:
            form.validate()

        assert exc_info.value.detail == "Vui lòng chọn Photographer chính!"
        assert form.errors == {"form": "Vui lòng chọn Photographer chính!"}

    async def test_new_project_payload(self, notifier):
        service = RecordingService()
        form = self._form(notifier, service)
        form.handle_change("customer_name", " Khách A ")
        form.handle_change("customer_phone", "0909")
        form.set_main_photographer(1)
        form.add_member("retouch_artists", 1)
        form.select_package(1)

        await form.submit()

        payload = service.created[0]
        assert payload["status"] == "pending"
        assert payload["customer_name"] == "Khách A"
        assert payload["package_type"] == 1
        assert payload["payment"]["deposit"] == Decimal("9000000")
        assert payload["team"]["main_photographer"]["employee"] == 1
        assert payload["team"]["retouch_artists"][0]["quantity"] == 0
        assert payload["partners"] is None

    def test_edit_round_trip(self, notifier):
        project = Project.model_validate(PROJECTS[0])
        form = self._form(notifier, entity=project)

        assert form.data["customer_name"] == "Phạm Minh Châu"
        assert form.data["team"]["main_photographer"]["employee_id"] == 1
        assert form.data["team"]["makeup_artists"][0]["salary"] == 400000
        assert form.data["payment_status"] == "deposit_paid"


class TestSalaryForm:
    def test_total_and_payload(self, notifier):
        employees = [Employee.model_validate(e) for e in EMPLOYEES]
        projects = [Project.model_validate(p) for p in PROJECTS]
        form = SalaryForm(None, notifier, employees=employees, projects=projects)

        form.select_employee(2)
        form.add_project_line()
        form.update_project_line(0, "project_id", 1)
        form.update_project_line(0, "salary", "500000")
        form.handle_change("bonus", 200000)
        form.handle_change("deduction", 100000)

        assert form.data["base_salary"] == Decimal("6000000")
        assert form.data["projects"][0]["project_name"] == "Phạm Minh Châu"
        assert form.total == Decimal("6600000")

        payload = form.to_payload(form.validate())
        assert payload["total_amount"] == 6600000
        assert payload["status"] == "pending"
        assert payload["projects_detail"][0]["salary"] == 500000

    def test_remove_line(self, notifier):
        form = SalaryForm(None, notifier)
        form.add_project_line()
        form.add_project_line()
        form.remove_project_line(0)
        assert len(form.data["projects"]) == 1

    def test_month_format(self, notifier):
        form = SalaryForm(None, notifier)
        form.handle_change("employee_id", 1)
        form.handle_change("month", "10/2026")
        with pytest.raises(ValidationError):
            form.validate()
        assert form.errors["month"] == "Tháng phải có dạng YYYY-MM"


class TestTransactionForm:
    def test_type_change_resets_category(self, notifier):
        form = TransactionForm(None, notifier)
        form.handle_change("category", "deposit")
        assert "deposit" in form.category_options

        form.handle_change("type", "expense")

        assert form.data["category"] == ""
        assert "salary" in form.category_options

    def test_amount_must_be_positive(self, notifier):
        form = TransactionForm(None, notifier)
        form.handle_change("category", "deposit")
        with pytest.raises(ValidationError):
            form.validate()
        assert form.errors["amount"] == "Số tiền phải lớn hơn 0"


def test_map_validation_errors_strips_prefix(notifier):
    form = EmployeeForm(None, notifier)
    with pytest.raises(PydanticValidationError) as exc_info:
        form.payload_schema.model_validate({"name": "", "role": ""})
    errors = map_validation_errors(exc_info.value)
    assert errors["name"] == "Vui lòng nhập tên nhân viên"
    assert errors["role"] == "Vui lòng chọn vai trò"
