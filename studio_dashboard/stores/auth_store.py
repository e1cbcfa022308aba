import logging
from dataclasses import dataclass
from typing import Optional

from fastapi import HTTPException
from pydantic import ValidationError as PydanticValidationError

from studio_dashboard.client.http_client import ApiClient
from studio_dashboard.client.token_store import AUTH_STORAGE_KEY, LocalStorage, TokenStore
from studio_dashboard.schemas.auth.login import AuthResponse, LoginRequest, RegisterRequest
from studio_dashboard.schemas.auth.token import AuthTokens
from studio_dashboard.schemas.auth.user import User
from studio_dashboard.stores.navigation import NavigationStore

logger = logging.getLogger(__name__)

USER_LOAD_FAILED = "Không thể tải thông tin người dùng"


@dataclass
class AuthState:
    user: Optional[User] = None
    is_authenticated: bool = False
    is_loading: bool = False
    error: Optional[str] = None


class AuthStore:
    """Session state of the dashboard operator.

    Only ``user`` is persisted under ``auth-storage``; whether the session is
    authenticated is always re-derived through ``fetch_user()``.
    """

    def __init__(self, api: ApiClient, token_store: TokenStore, storage: LocalStorage,
                 navigation: NavigationStore, login_path: str = "/login"):
        self.api = api
        self.token_store = token_store
        self.storage = storage
        self.navigation = navigation
        self.login_path = login_path
        self.state = AuthState()

    @property
    def user(self) -> Optional[User]:
        return self.state.user

    @property
    def is_authenticated(self) -> bool:
        return self.state.is_authenticated

    def _set(self, **changes):
        for key, value in changes.items():
            setattr(self.state, key, value)
        if "user" in changes:
            self._persist()

    def _persist(self):
        snapshot = {
            "state": {"user": self.state.user.model_dump(mode="json") if self.state.user else None},
            "version": 0,
        }
        self.storage.set_json(AUTH_STORAGE_KEY, snapshot)

    def hydrate(self):
        raw = self.storage.get_json(AUTH_STORAGE_KEY)
        user_data = None
        if isinstance(raw, dict):
            state = raw.get("state")
            if isinstance(state, dict):
                user_data = state.get("user")
        user = None
        if user_data:
            try:
                user = User.model_validate(user_data)
            except PydanticValidationError:
                logger.warning("⚠️ Discarding malformed persisted user")
        self.state = AuthState(user=user)

    async def login(self, username: str, password: str):
        self._set(is_loading=True, error=None)
        try:
            tokens = await self.api.login(LoginRequest(username=username, password=password))
            self.token_store.set_tokens(tokens)
            await self.fetch_user()
            if not self.state.is_authenticated:
                logger.warning(f"⚠️ Tokens issued for {username} but the profile could not be loaded")
                self._set(error=USER_LOAD_FAILED, is_loading=False)
                return
            self._set(is_loading=False)
            logger.info(f"✅ Logged in as {username}")
        except HTTPException as e:
            self._set(error=str(e.detail), is_loading=False, is_authenticated=False)
            raise
        except PydanticValidationError as e:
            self._set(error=e.errors()[0]["msg"], is_loading=False, is_authenticated=False)
            raise

    async def register(self, request: RegisterRequest) -> AuthResponse:
        self._set(is_loading=True, error=None)
        try:
            data = await self.api.post("/auth/register", request.to_backend(), recover_session=False)
            response = AuthResponse.model_validate(data)
        except HTTPException as e:
            self._set(error=str(e.detail), is_loading=False)
            raise
        except PydanticValidationError as e:
            logger.error(f"❌ Malformed register response: {e}")
            self._set(error="Đăng ký thất bại", is_loading=False)
            raise
        if response.success and response.token:
            self.token_store.set_tokens(AuthTokens(access=response.token, refresh=response.token))
            self._set(user=response.user, is_authenticated=response.user is not None)
            logger.info(f"✅ Registered {request.username}")
        self._set(is_loading=False)
        return response

    async def fetch_user(self):
        if not self.token_store.get_access_token():
            self._set(user=None, is_authenticated=False)
            return

        self._set(is_loading=True)
        try:
            data = await self.api.get("/auth/me")
            user = User.model_validate(data)
        except (HTTPException, PydanticValidationError) as e:
            # Any failure here means the stored session is unusable
            logger.error(f"Failed to fetch user: {e}")
            self.token_store.clear_tokens()
            self._set(user=None, is_authenticated=False, is_loading=False)
            return
        self._set(user=user, is_authenticated=True, is_loading=False)

    def logout(self):
        self.token_store.clear_tokens()
        self._set(user=None, is_authenticated=False, error=None)
        logger.info("👋 Logged out")
        self.navigation.navigate(self.login_path)

    def set_user(self, user: Optional[User]):
        self._set(user=user, is_authenticated=user is not None)

    def clear_error(self):
        self._set(error=None)
