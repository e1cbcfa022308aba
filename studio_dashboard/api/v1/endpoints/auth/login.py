import logging
from fastapi import APIRouter, Depends, HTTPException, status

from studio_dashboard.api.dependencies import get_context, get_current_user
from studio_dashboard.core.context import DashboardContext
from studio_dashboard.schemas.auth.login import AuthStateResponse, LoginRequest
from studio_dashboard.schemas.auth.user import User
from studio_dashboard.stores.auth_store import USER_LOAD_FAILED

router = APIRouter()
logger = logging.getLogger(__name__)


def _state(context: DashboardContext) -> AuthStateResponse:
    state = context.auth.state
    return AuthStateResponse(
        user=state.user,
        is_authenticated=state.is_authenticated,
        is_loading=state.is_loading,
        error=state.error,
    )


@router.post("/login", response_model=AuthStateResponse)
async def login(
    login_data: LoginRequest,
    context: DashboardContext = Depends(get_context)
):
    """Sign in against the backend and load the profile"""
    try:
        await context.auth.login(login_data.username, login_data.password)
    except HTTPException as e:
        context.notifier.error(str(e.detail) or "Đăng nhập thất bại")
        raise

    if not context.auth.is_authenticated:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=context.auth.state.error or USER_LOAD_FAILED
        )
    context.notifier.success("Đăng nhập thành công!")
    context.navigation.navigate("/dashboard")
    return _state(context)


@router.post("/logout", response_model=AuthStateResponse)
async def logout(context: DashboardContext = Depends(get_context)):
    """Drop the session"""
    context.auth.logout()
    return _state(context)


@router.get("/me", response_model=User)
async def get_me(current_user: User = Depends(get_current_user)):
    """Get current user info"""
    return current_user


@router.get("/session", response_model=AuthStateResponse)
async def get_session(context: DashboardContext = Depends(get_context)):
    """Current auth state, readable without a session"""
    return _state(context)
