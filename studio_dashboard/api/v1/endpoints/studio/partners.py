import logging
from typing import Any, Dict, Optional
from fastapi import APIRouter, Body, Depends, Query

from studio_dashboard.api.dependencies import get_context, get_current_user, require_permission
from studio_dashboard.core.context import DashboardContext
from studio_dashboard.forms.partner_form import PartnerForm
from studio_dashboard.schemas.auth.user import User
from studio_dashboard.schemas.common.pagination import ListPageResponse
from studio_dashboard.schemas.studio.partner_schema import Partner
from studio_dashboard.views.filters import PartnerFilters

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/", response_model=ListPageResponse[Partner])
async def get_partners(
    search: Optional[str] = Query(None, description="Searched by the backend"),
    type: Optional[str] = Query(None),
    context: DashboardContext = Depends(get_context),
    current_user: User = Depends(get_current_user)
):
    """Get partners"""
    return await context.partners_page.load(PartnerFilters(search=search, type=type))


@router.post("/", response_model=Dict[str, Any])
async def create_partner(
    form_data: Dict[str, Any] = Body(...),
    context: DashboardContext = Depends(get_context),
    current_user: User = Depends(require_permission("partners", "create"))
):
    """Create a new partner"""
    form = PartnerForm(context.partners, context.notifier,
                       on_success=context.partners_page.reload_after_change)
    form.apply(form_data)
    return await form.submit()


@router.put("/{partner_id}", response_model=Dict[str, Any])
async def update_partner(
    partner_id: str,
    form_data: Dict[str, Any] = Body(...),
    context: DashboardContext = Depends(get_context),
    current_user: User = Depends(require_permission("partners", "edit"))
):
    """Update partner"""
    partner = await context.partners_page.lookup(partner_id)
    form = PartnerForm(context.partners, context.notifier, entity=partner,
                       on_success=context.partners_page.reload_after_change)
    form.apply(form_data)
    return await form.submit()
