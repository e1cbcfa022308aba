import logging
from typing import Any, Dict, Optional
from fastapi import APIRouter, Body, Depends, Query

from studio_dashboard.api.dependencies import get_context, get_current_user, require_permission
from studio_dashboard.calculations.pricing import to_decimal
from studio_dashboard.core.context import DashboardContext
from studio_dashboard.forms.salary_form import SalaryForm
from studio_dashboard.schemas.auth.user import User
from studio_dashboard.schemas.common.pagination import ListPageResponse, money_to_number
from studio_dashboard.schemas.hr.salary_schema import SalaryPayment
from studio_dashboard.utils.data_exporter import SUM_COLUMNS, DataExportService
from studio_dashboard.views.filters import SalaryFilters

router = APIRouter()
logger = logging.getLogger(__name__)


async def _build_form(form_data: Dict[str, Any], context: DashboardContext) -> SalaryForm:
    lines = form_data.get("projects") or []
    employees = await context.employees.list() if form_data.get("employee_id") else []
    projects = await context.projects.list() if lines else []
    form = SalaryForm(context.salaries, context.notifier, employees=employees, projects=projects,
                      on_success=context.salaries_page.reload_after_change)
    form.apply({k: v for k, v in form_data.items() if k not in ("employee_id", "projects")})

    if form_data.get("employee_id"):
        form.select_employee(form_data["employee_id"])
        # An explicit amount wins over the employee's base salary
        if "base_salary" in form_data:
            form.handle_change("base_salary", form_data["base_salary"])

    for index, line in enumerate(lines):
        form.add_project_line()
        for field in ("project_id", "project_name", "salary"):
            if field in line:
                form.update_project_line(index, field, line[field])
    return form


@router.get("/", response_model=ListPageResponse[SalaryPayment])
async def get_salaries(
    month: Optional[str] = Query(None, description="YYYY-MM"),
    status: Optional[str] = Query(None),
    search: Optional[str] = Query(None, description="Employee name"),
    context: DashboardContext = Depends(get_context),
    current_user: User = Depends(get_current_user)
):
    """Get salary payments for a month"""
    return await context.salaries_page.load(SalaryFilters(month=month, status=status, search=search))


@router.post("/preview", response_model=Dict[str, Any])
async def preview_salary(
    form_data: Dict[str, Any] = Body(...),
    context: DashboardContext = Depends(get_context),
    current_user: User = Depends(get_current_user)
):
    """Salary calculator: base salary + project pay + bonus - deduction"""
    form = await _build_form(form_data, context)
    return {
        "employee_id": form.data.get("employee_id"),
        "month": form.data.get("month"),
        "base_salary": money_to_number(to_decimal(form.data.get("base_salary"))),
        "projects": [
            {**line, "salary": money_to_number(to_decimal(line.get("salary")))}
            for line in form.data.get("projects") or []
        ],
        "bonus": money_to_number(to_decimal(form.data.get("bonus"))),
        "deduction": money_to_number(to_decimal(form.data.get("deduction"))),
        "total_amount": money_to_number(form.total),
    }


@router.post("/", response_model=Dict[str, Any])
async def create_salary(
    form_data: Dict[str, Any] = Body(...),
    context: DashboardContext = Depends(get_context),
    current_user: User = Depends(require_permission("salaries", "create"))
):
    """Create a pending salary payment"""
    form = await _build_form(form_data, context)
    return await form.submit()


@router.get("/export")
async def export_salaries(
    format: str = Query("excel", pattern="^(csv|excel)$"),
    month: Optional[str] = Query(None),
    status: Optional[str] = Query(None),
    search: Optional[str] = Query(None),
    context: DashboardContext = Depends(get_context),
    current_user: User = Depends(get_current_user)
):
    """Export the filtered salary list"""
    page = context.salaries_page
    snapshot = await page.load(SalaryFilters(month=month, status=status, search=search))
    return DataExportService(SUM_COLUMNS).export(snapshot["items"], "salaries", format)
