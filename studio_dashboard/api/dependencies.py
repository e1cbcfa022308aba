import logging
from fastapi import Depends, Request

from studio_dashboard.auth.permissions import RoleChecker
from studio_dashboard.core.context import DashboardContext
from studio_dashboard.core.exceptions import AuthenticationRequired
from studio_dashboard.schemas.auth.user import User

logger = logging.getLogger(__name__)


def get_context(request: Request) -> DashboardContext:
    """The dashboard session created by the app lifespan"""
    return request.app.state.context


async def get_current_user(context: DashboardContext = Depends(get_context)) -> User:
    """Get current authenticated user"""
    auth = context.auth
    if not auth.is_authenticated or auth.user is None:
        login_path = context.settings.LOGIN_PATH
        context.navigation.navigate(login_path)
        raise AuthenticationRequired("Authentication required", redirect_to=login_path)
    return auth.user


def require_permission(resource: str, action: str):
    """
    Dependency factory for role gated routes

    Usage:
        @router.delete("/{project_id}", dependencies=[Depends(require_permission("projects", "delete"))])
    """
    async def permission_dependency(current_user: User = Depends(get_current_user)) -> User:
        RoleChecker(current_user.role).require(resource, action)
        return current_user

    return permission_dependency
