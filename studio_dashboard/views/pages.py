import logging
from decimal import Decimal
from typing import Any, Dict, Generic, List, Optional, Type, TypeVar

from fastapi import HTTPException

from studio_dashboard.auth.permissions import RoleChecker
from studio_dashboard.core.exceptions import AuthenticationRequired, NotFoundError
from studio_dashboard.schemas.auth.user import User
from studio_dashboard.schemas.common.pagination import EntityId, money_to_number
from studio_dashboard.schemas.hr.salary_schema import SalaryStatus
from studio_dashboard.schemas.studio.project_schema import Project, ProjectStatus
from studio_dashboard.services.base_service import ResourceService
from studio_dashboard.services.finance.transaction_service import FinanceService
from studio_dashboard.services.hr.employee_service import EmployeeService
from studio_dashboard.services.notification.notification_service import ToastNotifier
from studio_dashboard.services.studio.project_service import ProjectService
from studio_dashboard.views.filters import (
    EmployeeFilters,
    FilterSet,
    PackageFilters,
    PartnerFilters,
    ProjectFilters,
    SalaryFilters,
    TransactionFilters,
)
from studio_dashboard.views.list_view import ListView, count_by

logger = logging.getLogger(__name__)

S = TypeVar("S", bound=ResourceService)


def _role_of(user: Optional[User]) -> RoleChecker:
    return RoleChecker(user.role if user else None)


class ListPage(Generic[S]):
    """State of one collection page: the list, its filters and its actions.

    Every successful mutation is followed by a full refetch.
    """

    resource: str = ""
    filters_class: Type[FilterSet] = FilterSet

    def __init__(self, service: S, notifier: ToastNotifier):
        self.service: S = service
        self.notifier = notifier
        self.view = ListView(service, self.filters_class())

    async def load(self, filters: Optional[FilterSet] = None) -> Dict[str, Any]:
        """Apply ``filters`` and refetch, returning the snapshot of this fetch"""
        filters = filters if filters is not None else self.view.filters
        try:
            items, filtered = await self.view.query(filters)
        except AuthenticationRequired:
            raise
        except HTTPException as e:
            logger.error(f"Failed to fetch {self.resource}: {e.detail}")
            raise
        return self._response(items, filtered, filters)

    async def reload_after_change(self):
        try:
            await self.view.refresh()
        except AuthenticationRequired:
            raise
        except HTTPException as e:
            # The change itself went through, only the refetch failed
            logger.error(f"Failed to refetch {self.resource}: {e.detail}")

    def stats(self, items: List[Any], filtered: List[Any]) -> Dict[str, Any]:
        return {}

    def _response(self, items: List[Any], filtered: List[Any], filters: FilterSet) -> Dict[str, Any]:
        return {
            "total": len(items),
            "count": len(filtered),
            "active_filters": filters.active_count(),
            "items": filtered,
            "stats": self.stats(items, filtered),
        }

    def find(self, entity_id: EntityId):
        for item in self.view.items:
            if str(item.id) == str(entity_id):
                return item
        return None

    async def lookup(self, entity_id: EntityId):
        """Record from the loaded list, fetched from the backend when absent"""
        item = self.find(entity_id)
        if item is not None:
            return item
        try:
            return await self.service.get(entity_id)
        except AuthenticationRequired:
            raise
        except HTTPException as e:
            if e.status_code == 404:
                raise NotFoundError(f"{self.resource.capitalize()} record {entity_id} not found")
            raise

    async def _run_action(self, action, success_message: str, failure_message: str):
        try:
            result = await action()
        except AuthenticationRequired:
            raise
        except HTTPException as e:
            logger.error(f"{failure_message} ({e.detail})")
            self.notifier.error(failure_message)
            raise
        self.notifier.success(success_message)
        await self.reload_after_change()
        return result


class ProjectsPage(ListPage[ProjectService]):
    resource = "projects"
    filters_class = ProjectFilters

    async def confirm(self, project_id: EntityId, user: Optional[User]):
        _role_of(user).require("projects", "confirm")
        project: Project = await self.lookup(project_id)
        return await self._run_action(
            lambda: self.service.confirm(project),
            "Đã xác nhận dự án thành công!",
            "Không thể xác nhận dự án. Vui lòng thử lại.",
        )

    async def delete(self, project_id: EntityId, user: Optional[User]):
        _role_of(user).require("projects", "delete")
        return await self._run_action(
            lambda: self.service.delete(project_id),
            "Đã xóa dự án thành công!",
            "Không thể xóa dự án. Vui lòng thử lại.",
        )

    def stats(self, items, filtered) -> Dict[str, Any]:
        by_status = count_by(items, "status")
        return {
            "total": len(items),
            "pending": by_status.get(ProjectStatus.PENDING.value, 0),
            "in_progress": by_status.get(ProjectStatus.SHOOTING.value, 0)
            + by_status.get(ProjectStatus.RETOUCHING.value, 0),
            "completed": by_status.get(ProjectStatus.COMPLETED.value, 0),
        }


class EmployeesPage(ListPage[EmployeeService]):
    resource = "employees"
    filters_class = EmployeeFilters

    async def activate(self, employee_id: EntityId, user: Optional[User]):
        _role_of(user).require("employees", "activate")
        return await self._run_action(
            lambda: self.service.activate(employee_id),
            "Đã kích hoạt lại nhân viên!",
            "Không thể cập nhật trạng thái. Vui lòng thử lại.",
        )

    async def deactivate(self, employee_id: EntityId, user: Optional[User]):
        _role_of(user).require("employees", "deactivate")
        return await self._run_action(
            lambda: self.service.deactivate(employee_id),
            "Đã cho nhân viên nghỉ việc!",
            "Không thể cập nhật trạng thái. Vui lòng thử lại.",
        )

    async def delete(self, employee_id: EntityId, user: Optional[User]):
        _role_of(user).require("employees", "delete")
        return await self._run_action(
            lambda: self.service.delete(employee_id),
            "Đã xóa nhân viên thành công!",
            "Không thể xóa nhân viên. Vui lòng thử lại.",
        )

    def stats(self, items, filtered) -> Dict[str, Any]:
        active = sum(1 for e in items if e.is_active)
        return {
            "total": len(items),
            "active": active,
            "inactive": len(items) - active,
            "by_role": count_by(items, "role"),
        }


class PackagesPage(ListPage[ResourceService]):
    resource = "packages"
    filters_class = PackageFilters

    def stats(self, items, filtered) -> Dict[str, Any]:
        return {
            "total": len(items),
            "active": sum(1 for p in items if p.is_active),
            "by_category": count_by(items, "category"),
        }


class PartnersPage(ListPage[ResourceService]):
    resource = "partners"
    filters_class = PartnerFilters

    def stats(self, items, filtered) -> Dict[str, Any]:
        return {
            "total": len(items),
            "active": sum(1 for p in items if p.is_active),
            "by_type": count_by(items, "type"),
        }


class SalariesPage(ListPage[ResourceService]):
    resource = "salaries"
    filters_class = SalaryFilters

    def stats(self, items, filtered) -> Dict[str, Any]:
        pending = sum((s.total_amount for s in filtered if s.status == SalaryStatus.PENDING), Decimal("0"))
        paid = sum((s.total_amount for s in filtered if s.status == SalaryStatus.PAID), Decimal("0"))
        total = sum((s.total_amount for s in filtered), Decimal("0"))
        return {
            "total_pending": money_to_number(pending),
            "total_paid": money_to_number(paid),
            "grand_total": money_to_number(total),
        }


class FinancePage(ListPage[FinanceService]):
    resource = "finance"
    filters_class = TransactionFilters

    def stats(self, items, filtered) -> Dict[str, Any]:
        return self.service.summarize(filtered).model_dump(mode="json")
