import logging
from typing import Any, Dict, List
from fastapi import APIRouter, Depends

from studio_dashboard.api.dependencies import get_context
from studio_dashboard.core.context import DashboardContext

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/", response_model=List[Dict[str, Any]])
async def get_notifications(context: DashboardContext = Depends(get_context)):
    """Toasts raised since the last call"""
    return context.notifier.drain()
