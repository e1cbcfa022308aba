import logging
from typing import Any, Dict, Optional
from fastapi import APIRouter, Body, Depends, Query

from studio_dashboard.api.dependencies import get_context, get_current_user, require_permission
from studio_dashboard.core.context import DashboardContext
from studio_dashboard.forms.project_form import ProjectForm
from studio_dashboard.schemas.auth.user import User
from studio_dashboard.schemas.common.pagination import ListPageResponse
from studio_dashboard.schemas.studio.pricing_schema import QuoteRequest, QuoteResponse
from studio_dashboard.schemas.studio.project_schema import Project
from studio_dashboard.utils.data_exporter import SUM_COLUMNS, DataExportService
from studio_dashboard.views.filters import ProjectFilters

router = APIRouter()
logger = logging.getLogger(__name__)


def _form(context: DashboardContext, entity: Any = None, packages=None) -> ProjectForm:
    page = context.projects_page
    return ProjectForm(
        context.projects,
        context.notifier,
        context.settings.PRICING,
        packages=packages,
        entity=entity,
        on_success=page.reload_after_change,
    )


@router.get("/", response_model=ListPageResponse[Project])
async def get_projects(
    search: Optional[str] = Query(None),
    status: Optional[str] = Query(None),
    context: DashboardContext = Depends(get_context),
    current_user: User = Depends(get_current_user)
):
    """Get projects, filtered by customer search and status"""
    return await context.projects_page.load(ProjectFilters(search=search, status=status))


@router.post("/", response_model=Dict[str, Any])
async def create_project(
    form_data: Dict[str, Any] = Body(...),
    context: DashboardContext = Depends(get_context),
    current_user: User = Depends(require_permission("projects", "create"))
):
    """Create a new project from the modal working copy"""
    form = _form(context)
    form.apply(form_data)
    return await form.submit()


@router.post("/quote", response_model=QuoteResponse)
async def quote_project(
    quote_request: QuoteRequest,
    context: DashboardContext = Depends(get_context),
    current_user: User = Depends(get_current_user)
):
    """Deposit split, staff bonuses and profit summary for a draft project"""
    packages = await context.packages.list() if quote_request.package_id else []
    form = _form(context, packages=packages)
    form.apply(quote_request.model_dump(mode="json", exclude={"package_id"}))
    if quote_request.package_id:
        form.select_package(quote_request.package_id)
    form.recalculate()
    return form.quote()


@router.get("/export")
async def export_projects(
    format: str = Query("excel", pattern="^(csv|excel)$"),
    search: Optional[str] = Query(None),
    status: Optional[str] = Query(None),
    context: DashboardContext = Depends(get_context),
    current_user: User = Depends(get_current_user)
):
    """Export the filtered project list"""
    page = context.projects_page
    snapshot = await page.load(ProjectFilters(search=search, status=status))
    return DataExportService(SUM_COLUMNS).export(snapshot["items"], "projects", format)


@router.put("/{project_id}", response_model=Dict[str, Any])
async def update_project(
    project_id: str,
    form_data: Dict[str, Any] = Body(...),
    context: DashboardContext = Depends(get_context),
    current_user: User = Depends(require_permission("projects", "edit"))
):
    """Update a project"""
    project = await context.projects_page.lookup(project_id)
    form = _form(context, entity=project)
    form.apply(form_data)
    return await form.submit()


@router.post("/{project_id}/confirm", response_model=Dict[str, Any])
async def confirm_project(
    project_id: str,
    context: DashboardContext = Depends(get_context),
    current_user: User = Depends(get_current_user)
):
    """Move a pending project to confirmed"""
    return await context.projects_page.confirm(project_id, current_user)


@router.delete("/{project_id}", response_model=Dict[str, Any])
async def delete_project(
    project_id: str,
    context: DashboardContext = Depends(get_context),
    current_user: User = Depends(get_current_user)
):
    """Delete a project"""
    return await context.projects_page.delete(project_id, current_user)
