import logging
from typing import Any, Dict, Optional

from fastapi import HTTPException

from studio_dashboard.core.exceptions import ValidationError
from studio_dashboard.forms.base_form import EntityForm
from studio_dashboard.schemas.auth.login import AuthResponse, RegisterRequest
from studio_dashboard.services.notification.notification_service import ToastNotifier
from studio_dashboard.stores.auth_store import AuthStore

logger = logging.getLogger(__name__)

DASHBOARD_PATH = "/dashboard"


class RegisterForm(EntityForm):
    payload_schema = RegisterRequest
    created_message = "Đăng ký thành công!"
    failure_message = "Đăng ký thất bại"

    def __init__(self, auth_store: AuthStore, notifier: ToastNotifier, min_password_length: int = 6):
        self.auth_store = auth_store
        self.min_password_length = min_password_length
        super().__init__(None, notifier)

    def defaults(self) -> Dict[str, Any]:
        return {
            "username": "",
            "email": "",
            "full_name": "",
            "password": "",
            "confirm_password": "",
            "role": "employee",
        }

    def validate(self):
        model = super().validate()
        if len(model.password) < self.min_password_length:
            message = f"Mật khẩu phải có ít nhất {self.min_password_length} ký tự"
            self.errors = {"password": message}
            self.notifier.error(message)
            raise ValidationError(detail=message, errors=self.errors)
        return model

    async def submit(self) -> Optional[AuthResponse]:
        if self.is_loading:
            return None
        request = self.validate()
        self.is_loading = True
        try:
            response = await self.auth_store.register(request)
        except HTTPException as e:
            self.notifier.error(str(e.detail) or self.failure_message)
            raise
        finally:
            self.is_loading = False

        if response.success:
            self.notifier.success(self.created_message)
            self.auth_store.navigation.navigate(DASHBOARD_PATH)
        else:
            self.notifier.error(response.message or self.failure_message)
        return response
