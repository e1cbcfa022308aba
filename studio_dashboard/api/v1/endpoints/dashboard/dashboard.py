import logging
from fastapi import APIRouter, Depends

from studio_dashboard.api.dependencies import get_context, get_current_user
from studio_dashboard.core.context import DashboardContext
from studio_dashboard.schemas.auth.user import User
from studio_dashboard.schemas.dashboard.dashboard_schema import DashboardStats

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/stats", response_model=DashboardStats)
async def get_dashboard_stats(
    context: DashboardContext = Depends(get_context),
    current_user: User = Depends(get_current_user)
):
    """Get the overview cards of the dashboard home"""
    return await context.dashboard.get_dashboard_stats()
