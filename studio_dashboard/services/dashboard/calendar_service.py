import logging
from datetime import date, datetime, time, timedelta
from typing import Dict, Iterable, List, Optional

from studio_dashboard.schemas.dashboard.dashboard_schema import CalendarEvent
from studio_dashboard.schemas.studio.project_schema import Project, ProjectStatus

logger = logging.getLogger(__name__)

STATUS_COLORS: Dict[str, str] = {
    ProjectStatus.PENDING.value: "#9e9e9e",
    ProjectStatus.CONFIRMED.value: "#2196f3",
    ProjectStatus.SHOOTING.value: "#ff9800",
    ProjectStatus.RETOUCHING.value: "#9c27b0",
    ProjectStatus.DELIVERED.value: "#4caf50",
    ProjectStatus.COMPLETED.value: "#00bcd4",
    ProjectStatus.CANCELLED.value: "#f44336",
}
FALLBACK_COLOR = "#757575"


def _parse_start(shoot_date: Optional[str], shoot_time: Optional[str]) -> datetime:
    day = date.fromisoformat((shoot_date or "")[:10])
    clock = time(0, 0)
    if shoot_time:
        hours, _, minutes = shoot_time.partition(":")
        clock = time(int(hours), int(minutes[:2] or 0))
    return datetime.combine(day, clock)


class CalendarService:
    def __init__(self, event_hours: int = 2):
        self.event_duration = timedelta(hours=event_hours)

    def to_event(self, project: Project) -> CalendarEvent:
        start = _parse_start(project.shoot_date, project.shoot_time)
        status = project.status.value
        return CalendarEvent(
            id=project.id,
            title=f"{project.customer_name} - {project.package_name or ''}".rstrip(" -"),
            start=start,
            end=start + self.event_duration,
            color=STATUS_COLORS.get(status, FALLBACK_COLOR),
            status=status,
            team_size=project.team.size,
            resource=project.model_dump(mode="json"),
        )

    def build_events(
        self,
        projects: Iterable[Project],
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> List[CalendarEvent]:
        """Events for the projects shooting inside ``[start, end)``, sorted by start"""
        events = []
        for project in projects:
            try:
                event = self.to_event(project)
            except ValueError as e:
                logger.warning(f"⚠️ Skipping project {project.id} with unusable shoot date: {e}")
                continue
            if start and event.start < start:
                continue
            if end and event.start >= end:
                continue
            events.append(event)
        events.sort(key=lambda e: e.start)
        return events
