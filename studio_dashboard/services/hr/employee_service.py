import logging
from typing import Any, Dict

from studio_dashboard.schemas.common.pagination import EntityId
from studio_dashboard.schemas.hr.employee_schema import Employee
from studio_dashboard.services.base_service import ResourceService

logger = logging.getLogger(__name__)


class EmployeeService(ResourceService[Employee]):
    endpoint = "employees"
    model = Employee

    async def activate(self, employee_id: EntityId) -> Dict[str, Any]:
        data = await self.api.patch(f"{self.item_path(employee_id)}/activate")
        logger.info(f"Employee activated: {employee_id}")
        return data

    async def deactivate(self, employee_id: EntityId) -> Dict[str, Any]:
        data = await self.api.patch(f"{self.item_path(employee_id)}/deactivate")
        logger.info(f"Employee deactivated: {employee_id}")
        return data
