import logging
from typing import Optional

import httpx

from studio_dashboard.client.http_client import ApiClient
from studio_dashboard.client.token_store import LocalStorage, TokenStore
from studio_dashboard.core.config import Settings
from studio_dashboard.services.dashboard.calendar_service import CalendarService
from studio_dashboard.services.dashboard.dashboard_service import DashboardService
from studio_dashboard.services.finance.transaction_service import FinanceService
from studio_dashboard.services.hr.employee_service import EmployeeService
from studio_dashboard.services.hr.salary_service import SalaryService
from studio_dashboard.services.notification.notification_service import ToastNotifier
from studio_dashboard.services.studio.package_service import PackageService
from studio_dashboard.services.studio.partner_service import PartnerService
from studio_dashboard.services.studio.project_service import ProjectService
from studio_dashboard.stores.auth_store import AuthStore
from studio_dashboard.stores.navigation import NavigationStore
from studio_dashboard.views.pages import (
    EmployeesPage,
    FinancePage,
    PackagesPage,
    PartnersPage,
    ProjectsPage,
    SalariesPage,
)

logger = logging.getLogger(__name__)


class DashboardContext:
    """Everything one dashboard session owns.

    Built by ``init()`` and released by ``teardown()``; the FastAPI lifespan
    keeps one instance on ``app.state.context``.
    """

    def __init__(self, settings: Settings, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.settings = settings
        self.transport = transport
        self.api: Optional[ApiClient] = None

    async def init(self) -> "DashboardContext":
        settings = self.settings
        self.storage = LocalStorage(settings.STORAGE_PATH)
        self.token_store = TokenStore(self.storage)
        self.navigation = NavigationStore()
        self.notifier = ToastNotifier()
        self.api = ApiClient(
            settings.API_URL,
            self.token_store,
            on_unauthorized=self._on_session_lost,
            timeout=settings.HTTP_TIMEOUT,
            transport=self.transport,
            login_path=settings.LOGIN_PATH,
        )
        self.auth = AuthStore(self.api, self.token_store, self.storage, self.navigation, settings.LOGIN_PATH)

        # Resource services
        self.projects = ProjectService(self.api)
        self.employees = EmployeeService(self.api)
        self.packages = PackageService(self.api)
        self.partners = PartnerService(self.api)
        self.salaries = SalaryService(self.api)
        self.finance = FinanceService(self.api, enabled=settings.FINANCE_API_ENABLED)

        # Page states
        self.projects_page = ProjectsPage(self.projects, self.notifier)
        self.employees_page = EmployeesPage(self.employees, self.notifier)
        self.packages_page = PackagesPage(self.packages, self.notifier)
        self.partners_page = PartnersPage(self.partners, self.notifier)
        self.salaries_page = SalariesPage(self.salaries, self.notifier)
        self.finance_page = FinancePage(self.finance, self.notifier)

        self.calendar = CalendarService(settings.CALENDAR_EVENT_HOURS)
        self.dashboard = DashboardService(self.projects, self.employees, self.salaries, self.packages)

        self.auth.hydrate()
        await self.auth.fetch_user()
        logger.info(f"🚀 Dashboard context ready (backend {settings.API_URL}, "
                    f"authenticated={self.auth.is_authenticated})")
        return self

    def _on_session_lost(self, login_path: str):
        """The backend refused both tokens, forget the user and go to login"""
        self.auth.set_user(None)
        self.navigation.navigate(login_path)

    async def teardown(self):
        if self.api is not None:
            await self.api.aclose()
            self.api = None
        logger.info("🛑 Dashboard context closed")

    async def __aenter__(self) -> "DashboardContext":
        return await self.init()

    async def __aexit__(self, exc_type, exc, tb):
        await self.teardown()
