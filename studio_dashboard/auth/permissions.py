# studio_dashboard/auth/permissions.py
# Role gates of the dashboard actions. They only hide what the backend
# would refuse anyway, the backend stays the authority.

from typing import Dict, FrozenSet, Optional, Tuple, Union
import logging

from studio_dashboard.core.exceptions import PermissionDenied
from studio_dashboard.schemas.auth.user import UserRole

logger = logging.getLogger(__name__)

ADMIN = frozenset({UserRole.ADMIN})
MANAGERS = frozenset({UserRole.ADMIN, UserRole.MANAGER})
SELLERS = frozenset({UserRole.ADMIN, UserRole.MANAGER, UserRole.SALES})

ROLE_RULES: Dict[Tuple[str, str], FrozenSet[UserRole]] = {
    ("projects", "create"): SELLERS,
    ("projects", "edit"): SELLERS,
    ("projects", "confirm"): MANAGERS,
    ("projects", "delete"): ADMIN,
    ("employees", "create"): MANAGERS,
    ("employees", "edit"): MANAGERS,
    ("employees", "activate"): MANAGERS,
    ("employees", "deactivate"): MANAGERS,
    ("employees", "delete"): ADMIN,
    ("packages", "create"): MANAGERS,
    ("packages", "edit"): MANAGERS,
    ("partners", "create"): MANAGERS,
    ("partners", "edit"): MANAGERS,
    ("salaries", "create"): MANAGERS,
    ("finance", "create"): MANAGERS,
}


class RoleChecker:
    """
    Check what the signed-in role may do on a resource
    """

    def __init__(self, role: Optional[Union[UserRole, str]]):
        try:
            self.role = UserRole(role) if role else None
        except ValueError:
            logger.warning(f"Unknown role '{role}', treating as no role")
            self.role = None

    def can(self, resource: str, action: str) -> bool:
        """
        Examples:
            can("projects", "confirm")  # admin or manager
        """
        allowed = ROLE_RULES.get((resource, action))
        if allowed is None:
            # Reading and anything without a gate is open to every role
            return self.role is not None
        granted = self.role in allowed
        logger.debug(f"Permission {'granted' if granted else 'denied'}: {resource}:{action} for {self.role}")
        return granted

    def cannot(self, resource: str, action: str) -> bool:
        return not self.can(resource, action)

    def require(self, resource: str, action: str, custom_message: Optional[str] = None):
        """
        Require permission or raise PermissionDenied
        """
        if self.cannot(resource, action):
            message = custom_message or f"Insufficient permissions to {action} {resource}"
            logger.warning(f"Permission check failed: {message}")
            raise PermissionDenied(message)
