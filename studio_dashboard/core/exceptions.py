from typing import Any, Dict, Optional
from fastapi import HTTPException, status

class BaseAppException(HTTPException):
    def __init__(self, status_code: int, detail: str, headers: Optional[Dict[str, str]] = None):
        super().__init__(status_code=status_code, detail=detail, headers=headers)

class ValidationError(BaseAppException):
    def __init__(self, detail: str = "Validation error", errors: Optional[Dict[str, str]] = None):
        super().__init__(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=detail)
        self.errors = errors or {}

class NotFoundError(BaseAppException):
    def __init__(self, detail: str = "Resource not found"):
        super().__init__(status_code=status.HTTP_404_NOT_FOUND, detail=detail)

class PermissionDenied(BaseAppException):
    def __init__(self, detail: str = "Insufficient permissions"):
        super().__init__(status_code=status.HTTP_403_FORBIDDEN, detail=detail)

class BackendError(BaseAppException):
    """Non-2xx answer from the studio backend"""
    def __init__(self, status_code: int, detail: str = "An error occurred", errors: Any = None):
        super().__init__(status_code=status_code, detail=detail)
        self.errors = errors

class NetworkError(BaseAppException):
    def __init__(self, detail: str = "Network error"):
        super().__init__(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=detail)

class AuthenticationRequired(BaseAppException):
    def __init__(self, detail: str = "Authentication required", redirect_to: str = "/login"):
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=detail,
            headers={"WWW-Authenticate": "Bearer"},
        )
        self.redirect_to = redirect_to
