import logging
from decimal import Decimal
from typing import Any, Dict, Optional
from fastapi import APIRouter, Body, Depends, Query

from studio_dashboard.api.dependencies import get_context, get_current_user, require_permission
from studio_dashboard.core.context import DashboardContext
from studio_dashboard.forms.package_form import PackageForm
from studio_dashboard.schemas.auth.user import User
from studio_dashboard.schemas.common.pagination import ListPageResponse
from studio_dashboard.schemas.studio.package_schema import Package
from studio_dashboard.views.filters import ACTIVE_STATUS_PATTERN, PackageFilters

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/", response_model=ListPageResponse[Package])
async def get_packages(
    search: Optional[str] = Query(None),
    category: Optional[str] = Query(None),
    min_price: Optional[Decimal] = Query(None, ge=0),
    max_price: Optional[Decimal] = Query(None, ge=0),
    status: Optional[str] = Query(None, pattern=ACTIVE_STATUS_PATTERN),
    context: DashboardContext = Depends(get_context),
    current_user: User = Depends(get_current_user)
):
    """Get packages with filtering"""
    filters = PackageFilters(search=search, category=category, min_price=min_price,
                             max_price=max_price, status=status)
    return await context.packages_page.load(filters)


@router.get("/{package_id}", response_model=Package)
async def get_package(
    package_id: str,
    context: DashboardContext = Depends(get_context),
    current_user: User = Depends(get_current_user)
):
    """Get package by ID"""
    return await context.packages_page.lookup(package_id)


@router.post("/", response_model=Dict[str, Any])
async def create_package(
    form_data: Dict[str, Any] = Body(...),
    context: DashboardContext = Depends(get_context),
    current_user: User = Depends(require_permission("packages", "create"))
):
    """Create a new package"""
    form = PackageForm(context.packages, context.notifier, context.settings.PRICING,
                       on_success=context.packages_page.reload_after_change)
    form.apply(form_data)
    return await form.submit()


@router.put("/{package_id}", response_model=Dict[str, Any])
async def update_package(
    package_id: str,
    form_data: Dict[str, Any] = Body(...),
    context: DashboardContext = Depends(get_context),
    current_user: User = Depends(require_permission("packages", "edit"))
):
    """Update package"""
    package = await context.packages_page.lookup(package_id)
    form = PackageForm(context.packages, context.notifier, context.settings.PRICING, entity=package,
                       on_success=context.packages_page.reload_after_change)
    form.apply(form_data)
    return await form.submit()
