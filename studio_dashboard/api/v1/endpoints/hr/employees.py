import logging
from typing import Any, Dict, Optional
from fastapi import APIRouter, Body, Depends, Query

from studio_dashboard.api.dependencies import get_context, get_current_user, require_permission
from studio_dashboard.core.context import DashboardContext
from studio_dashboard.forms.employee_form import EmployeeForm
from studio_dashboard.schemas.auth.user import User
from studio_dashboard.schemas.common.pagination import ListPageResponse
from studio_dashboard.schemas.hr.employee_schema import Employee
from studio_dashboard.utils.data_exporter import SUM_COLUMNS, DataExportService
from studio_dashboard.views.filters import ACTIVE_STATUS_PATTERN, EmployeeFilters

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/", response_model=ListPageResponse[Employee])
async def get_employees(
    search: Optional[str] = Query(None),
    role: Optional[str] = Query(None),
    status: Optional[str] = Query(None, pattern=ACTIVE_STATUS_PATTERN, description="active, inactive or all"),
    context: DashboardContext = Depends(get_context),
    current_user: User = Depends(get_current_user)
):
    """Get all employees with filtering"""
    return await context.employees_page.load(EmployeeFilters(search=search, role=role, status=status))


@router.post("/", response_model=Dict[str, Any])
async def create_employee(
    form_data: Dict[str, Any] = Body(...),
    context: DashboardContext = Depends(get_context),
    current_user: User = Depends(require_permission("employees", "create"))
):
    """Create a new employee"""
    form = EmployeeForm(context.employees, context.notifier,
                        on_success=context.employees_page.reload_after_change)
    form.apply(form_data)
    return await form.submit()


@router.get("/export")
async def export_employees(
    format: str = Query("excel", pattern="^(csv|excel)$"),
    search: Optional[str] = Query(None),
    role: Optional[str] = Query(None),
    status: Optional[str] = Query(None, pattern=ACTIVE_STATUS_PATTERN),
    context: DashboardContext = Depends(get_context),
    current_user: User = Depends(get_current_user)
):
    """Export the filtered employee list"""
    page = context.employees_page
    snapshot = await page.load(EmployeeFilters(search=search, role=role, status=status))
    return DataExportService(SUM_COLUMNS).export(snapshot["items"], "employees", format)


@router.put("/{employee_id}", response_model=Dict[str, Any])
async def update_employee(
    employee_id: str,
    form_data: Dict[str, Any] = Body(...),
    context: DashboardContext = Depends(get_context),
    current_user: User = Depends(require_permission("employees", "edit"))
):
    """Update employee"""
    employee = await context.employees_page.lookup(employee_id)
    form = EmployeeForm(context.employees, context.notifier, entity=employee,
                        on_success=context.employees_page.reload_after_change)
    form.apply(form_data)
    return await form.submit()


@router.post("/{employee_id}/activate", response_model=Dict[str, Any])
async def activate_employee(
    employee_id: str,
    context: DashboardContext = Depends(get_context),
    current_user: User = Depends(get_current_user)
):
    """Bring a former employee back"""
    return await context.employees_page.activate(employee_id, current_user)


@router.post("/{employee_id}/deactivate", response_model=Dict[str, Any])
async def deactivate_employee(
    employee_id: str,
    context: DashboardContext = Depends(get_context),
    current_user: User = Depends(get_current_user)
):
    """Mark an employee as no longer working (soft delete)"""
    return await context.employees_page.deactivate(employee_id, current_user)


@router.delete("/{employee_id}", response_model=Dict[str, Any])
async def delete_employee(
    employee_id: str,
    context: DashboardContext = Depends(get_context),
    current_user: User = Depends(get_current_user)
):
    """Delete employee"""
    return await context.employees_page.delete(employee_id, current_user)
