import logging
from typing import Any, Dict

from studio_dashboard.core.exceptions import ValidationError
from studio_dashboard.schemas.studio.project_schema import Project, ProjectStatus
from studio_dashboard.services.base_service import ResourceService

logger = logging.getLogger(__name__)


class ProjectService(ResourceService[Project]):
    endpoint = "projects"
    model = Project

    async def confirm(self, project: Project) -> Dict[str, Any]:
        """Move a pending project to confirmed, the only transition the dashboard offers"""
        if project.status != ProjectStatus.PENDING:
            raise ValidationError(
                detail=f"Project {project.project_code or project.id} is {project.status.value}, only pending projects can be confirmed"
            )
        data = await self.patch(project.id, {"status": ProjectStatus.CONFIRMED.value})
        logger.info(f"Project confirmed: {project.project_code or project.id}")
        return data
