import asyncio
import logging
from collections import Counter
from decimal import Decimal
from typing import List

from studio_dashboard.core.exceptions import AuthenticationRequired
from studio_dashboard.schemas.dashboard.dashboard_schema import DashboardStats
from studio_dashboard.schemas.hr.salary_schema import SalaryStatus
from studio_dashboard.schemas.studio.project_schema import ProjectStatus
from studio_dashboard.services.base_service import ResourceService
from studio_dashboard.services.hr.employee_service import EmployeeService
from studio_dashboard.services.hr.salary_service import SalaryService
from studio_dashboard.services.studio.package_service import PackageService
from studio_dashboard.services.studio.project_service import ProjectService

logger = logging.getLogger(__name__)

ACTIVE_PROJECT_STATUSES = {
    ProjectStatus.PENDING,
    ProjectStatus.CONFIRMED,
    ProjectStatus.SHOOTING,
    ProjectStatus.RETOUCHING,
}


class DashboardService:
    def __init__(self, projects: ProjectService, employees: EmployeeService,
                 salaries: SalaryService, packages: PackageService):
        self.projects = projects
        self.employees = employees
        self.salaries = salaries
        self.packages = packages

    async def _safe_list(self, service: ResourceService) -> List:
        try:
            return await service.list()
        except AuthenticationRequired:
            raise
        except Exception as e:
            logger.error(f"Error loading {service.endpoint} for dashboard: {str(e)}")
            return []

    async def get_dashboard_stats(self) -> DashboardStats:
        """Get the overview numbers, a resource that fails to load counts as empty"""
        projects, employees, salaries, packages = await asyncio.gather(
            self._safe_list(self.projects),
            self._safe_list(self.employees),
            self._safe_list(self.salaries),
            self._safe_list(self.packages),
        )

        revenue = sum((p.package_price for p in projects), Decimal("0"))
        expenses = sum((s.total_amount for s in salaries), Decimal("0"))
        by_status = Counter(p.status.value for p in projects)

        stats = DashboardStats(
            total_projects=len(projects),
            active_projects=sum(1 for p in projects if p.status in ACTIVE_PROJECT_STATUSES),
            total_employees=len(employees),
            total_packages=len(packages),
            total_revenue=revenue,
            total_expenses=expenses,
            monthly_profit=revenue - expenses,
            pending_salaries=sum(1 for s in salaries if s.status == SalaryStatus.PENDING),
            projects_by_status=dict(by_status),
        )
        logger.info(f"📊 Dashboard stats: {stats.total_projects} projects, {stats.total_employees} employees")
        return stats
