from pydantic import BaseModel
from typing import Any, Dict, Optional
from datetime import datetime
from decimal import Decimal

from studio_dashboard.schemas.common.pagination import EntityId, Money


class DashboardStats(BaseModel):
    total_projects: int = 0
    active_projects: int = 0
    total_employees: int = 0
    total_packages: int = 0
    total_revenue: Money = Decimal("0")
    total_expenses: Money = Decimal("0")
    monthly_profit: Money = Decimal("0")
    pending_salaries: int = 0
    projects_by_status: Dict[str, int] = {}


class CalendarEvent(BaseModel):
    id: EntityId
    title: str
    start: datetime
    end: datetime
    color: str
    status: str
    team_size: int = 0
    resource: Optional[Dict[str, Any]] = None
