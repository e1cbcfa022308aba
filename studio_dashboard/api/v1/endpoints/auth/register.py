import logging
from typing import Any, Dict
from fastapi import APIRouter, Body, Depends

from studio_dashboard.api.dependencies import get_context
from studio_dashboard.core.context import DashboardContext
from studio_dashboard.forms.register_form import RegisterForm
from studio_dashboard.schemas.auth.login import AuthResponse

router = APIRouter()
logger = logging.getLogger(__name__)


@router.post("/register", response_model=AuthResponse)
async def register(
    form_data: Dict[str, Any] = Body(...),
    context: DashboardContext = Depends(get_context)
):
    """Create an account and sign in with the returned token"""
    form = RegisterForm(context.auth, context.notifier, context.settings.PASSWORD_MIN_LENGTH)
    form.apply(form_data)
    return await form.submit()
