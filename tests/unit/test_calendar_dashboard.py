from datetime import datetime, timedelta
from decimal import Decimal

import pytest

from studio_dashboard.core.exceptions import AuthenticationRequired, BackendError
from studio_dashboard.schemas.hr.employee_schema import Employee
from studio_dashboard.schemas.hr.salary_schema import SalaryPayment
from studio_dashboard.schemas.studio.project_schema import Project
from studio_dashboard.services.dashboard.calendar_service import STATUS_COLORS, CalendarService
from studio_dashboard.services.dashboard.dashboard_service import DashboardService
from tests.conftest import EMPLOYEES, PROJECTS, SALARIES


def _projects():
    return [Project.model_validate(p) for p in PROJECTS]


class TestCalendar:
    def test_two_hour_events(self):
        event = CalendarService().to_event(_projects()[0])

        assert event.start == datetime(2026, 10, 20, 8, 30)
        assert event.end - event.start == timedelta(hours=2)
        assert event.color == STATUS_COLORS["pending"]
        assert event.title == "Phạm Minh Châu - Cưới Premium"
        assert event.team_size == 2

    def test_missing_time_starts_at_midnight(self):
        event = CalendarService(event_hours=3).to_event(_projects()[2])

        assert event.start == datetime(2026, 9, 1)
        assert event.end == datetime(2026, 9, 1, 3)

    def test_bad_dates_skipped_and_range_applied(self):
        projects = _projects() + [Project(id=9, customer_name="Không ngày", shoot_date="sắp tới")]
        service = CalendarService()

        events = service.build_events(projects, start=datetime(2026, 10, 1), end=datetime(2026, 11, 1))

        assert [e.id for e in events] == [1, 2]


class ListStub:
    def __init__(self, endpoint, items=None, error=None):
        self.endpoint = endpoint
        self.items = items or []
        self.error = error

    async def list(self, params=None):
        if self.error:
            raise self.error
        return self.items


@pytest.mark.asyncio
class TestDashboardStats:
    async def test_stats(self):
        service = DashboardService(
            ListStub("projects", _projects()),
            ListStub("employees", [Employee.model_validate(e) for e in EMPLOYEES]),
            ListStub("salaries", [SalaryPayment.model_validate(s) for s in SALARIES]),
            ListStub("packages", []),
        )

        stats = await service.get_dashboard_stats()

        assert stats.total_projects == 3
        assert stats.active_projects == 2
        assert stats.total_employees == 3
        assert stats.total_revenue == Decimal("28000000")
        assert stats.total_expenses == Decimal("23000000")
        assert stats.monthly_profit == Decimal("5000000")
        assert stats.pending_salaries == 1
        assert stats.projects_by_status == {"pending": 1, "confirmed": 1, "completed": 1}

    async def test_failing_resource_counts_as_empty(self):
        service = DashboardService(
            ListStub("projects", _projects()),
            ListStub("employees", error=BackendError(500, "Lỗi máy chủ")),
            ListStub("salaries", []),
            ListStub("packages", []),
        )

        stats = await service.get_dashboard_stats()

        assert stats.total_projects == 3
        assert stats.total_employees == 0

    async def test_lost_session_propagates(self):
        service = DashboardService(
            ListStub("projects", error=AuthenticationRequired()),
            ListStub("employees", []),
            ListStub("salaries", []),
            ListStub("packages", []),
        )

        with pytest.raises(AuthenticationRequired):
            await service.get_dashboard_stats()
