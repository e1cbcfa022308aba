import pytest

from studio_dashboard.client.token_store import ACCESS_TOKEN_KEY, AUTH_STORAGE_KEY
from studio_dashboard.core.exceptions import BackendError
from studio_dashboard.schemas.auth.login import RegisterRequest
from studio_dashboard.stores.auth_store import AuthStore
from studio_dashboard.stores.navigation import NavigationStore
from tests.conftest import PASSWORD, USERS


@pytest.fixture
def navigation() -> NavigationStore:
    return NavigationStore()


@pytest.fixture
def auth(api, token_store, navigation) -> AuthStore:
    return AuthStore(api, token_store, token_store.storage, navigation)


class TestHydrate:
    def test_restores_user_but_not_authentication(self, auth, token_store):
        token_store.storage.set_json(AUTH_STORAGE_KEY, {"state": {"user": USERS["admin"]}, "version": 0})

        auth.hydrate()

        assert auth.user.username == "admin"
        assert auth.is_authenticated is False

    def test_malformed_snapshot_is_ignored(self, auth, token_store):
        token_store.storage.set_item(AUTH_STORAGE_KEY, "not json")
        auth.hydrate()
        assert auth.user is None

        token_store.storage.set_json(AUTH_STORAGE_KEY, {"state": {"user": {"id": 1}}, "version": 0})
        auth.hydrate()
        assert auth.user is None


@pytest.mark.asyncio
class TestSession:
    async def test_fetch_user_without_token_makes_no_request(self, auth, backend):
        await auth.fetch_user()

        assert auth.is_authenticated is False
        assert backend.requests == []

    async def test_login_success(self, auth, token_store):
        await auth.login("admin", PASSWORD)

        assert auth.is_authenticated is True
        assert auth.user.role.value == "admin"
        assert auth.state.is_loading is False
        snapshot = token_store.storage.get_json(AUTH_STORAGE_KEY)
        assert snapshot == {"state": {"user": auth.user.model_dump(mode="json")}, "version": 0}
        # Only the user is persisted
        assert "is_authenticated" not in snapshot["state"]

    async def test_login_failure_records_error(self, auth):
        with pytest.raises(BackendError):
            await auth.login("admin", "wrong-password")

        assert auth.is_authenticated is False
        assert auth.state.error == "Sai tên đăng nhập hoặc mật khẩu"
        assert auth.state.is_loading is False

        auth.clear_error()
        assert auth.state.error is None

    async def test_login_with_unloadable_profile_records_error(self, auth, backend, token_store):
        backend.fail("/auth/me", 500)

        await auth.login("admin", PASSWORD)

        assert auth.is_authenticated is False
        assert auth.state.error == "Không thể tải thông tin người dùng"
        assert auth.state.is_loading is False
        assert not token_store.has_token()

    async def test_fetch_user_with_dead_token_clears_session(self, auth, token_store, navigation_log):
        token_store.storage.set_item(ACCESS_TOKEN_KEY, "revoked")

        await auth.fetch_user()

        assert auth.is_authenticated is False
        assert auth.user is None
        assert not token_store.has_token()
        assert navigation_log == ["/login"]

    async def test_logout(self, auth, token_store, navigation):
        await auth.login("manager", PASSWORD)

        auth.logout()

        assert not token_store.has_token()
        assert auth.is_authenticated is False
        assert navigation.current_path == "/login"
        assert token_store.storage.get_json(AUTH_STORAGE_KEY)["state"]["user"] is None

    async def test_register_stores_token_twice(self, auth, token_store):
        request = RegisterRequest(
            username="newbie",
            email="newbie@studio.vn",
            full_name="Người Mới",
            password="matkhau1",
            confirm_password="matkhau1",
        )

        response = await auth.register(request)

        assert response.success is True
        assert token_store.get_access_token() == response.token
        assert token_store.get_refresh_token() == response.token
        assert auth.user.username == "newbie"
        assert auth.is_authenticated is True

    async def test_register_duplicate(self, auth, token_store):
        request = RegisterRequest(
            username="admin",
            full_name="Trùng",
            password="matkhau1",
            confirm_password="matkhau1",
        )

        with pytest.raises(BackendError) as exc_info:
            await auth.register(request)

        assert exc_info.value.detail == "Tên đăng nhập đã tồn tại"
        assert auth.state.error == "Tên đăng nhập đã tồn tại"
        assert not token_store.has_token()
