import logging
from datetime import datetime
from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, Query, status

from studio_dashboard.api.dependencies import get_context, get_current_user
from studio_dashboard.core.context import DashboardContext
from studio_dashboard.schemas.auth.user import User
from studio_dashboard.schemas.dashboard.dashboard_schema import CalendarEvent

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/events", response_model=List[CalendarEvent])
async def get_calendar_events(
    start: Optional[datetime] = Query(None),
    end: Optional[datetime] = Query(None),
    context: DashboardContext = Depends(get_context),
    current_user: User = Depends(get_current_user)
):
    """Project shoots as calendar events, colored by status"""
    # Shoot times are studio local time
    start = start.replace(tzinfo=None) if start else None
    end = end.replace(tzinfo=None) if end else None
    if start and end and end <= start:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="end must be after start"
        )
    projects = await context.projects.list()
    return context.calendar.build_events(projects, start, end)
