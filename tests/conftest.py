import asyncio
import copy
import json
from typing import Any, AsyncGenerator, Dict, List, Optional

import httpx
import pytest
from httpx import ASGITransport, AsyncClient

from studio_dashboard.client.http_client import ApiClient
from studio_dashboard.client.token_store import LocalStorage, TokenStore
from studio_dashboard.core.config import Settings
from studio_dashboard.main import create_app
from studio_dashboard.services.notification.notification_service import ToastNotifier

BACKEND_URL = "http://backend.test/api"
PASSWORD = "secret123"

USERS = {
    "admin": {"id": 1, "username": "admin", "full_name": "Quản trị", "role": "admin", "email": "admin@studio.vn"},
    "manager": {"id": 2, "username": "manager", "full_name": "Quản lý", "role": "manager"},
    "sales": {"id": 3, "username": "sales", "full_name": "Kinh doanh", "role": "sales"},
    "staff": {"id": 4, "username": "staff", "full_name": "Nhân viên", "role": "employee"},
}

EMPLOYEES = [
    {"id": 1, "name": "Nguyễn Văn An", "role": "Photo/Retouch", "skills": ["Chụp chính", "Retouch"],
     "phone": "0901000001", "email": "an@studio.vn", "base_salary": 8000000, "is_active": True},
    {"id": 2, "name": "Trần Thị Bình", "role": "Makeup Artist", "skills": ["Makeup"],
     "phone": "0901000002", "base_salary": 6000000, "is_active": True},
    {"id": 3, "name": "Lê Văn Cường", "role": "Photo/Retouch", "skills": ["Chụp phụ"],
     "phone": "0901000003", "base_salary": 5000000, "is_active": False},
]

PROJECTS = [
    {"id": 1, "project_code": "PRJ001", "customer_name": "Phạm Minh Châu", "customer_phone": "0912000001",
     "package_type": 1, "package_name": "Cưới Premium", "package_price": 15000000, "status": "pending",
     "shoot_date": "2026-10-20", "shoot_time": "08:30", "location": "Đà Lạt",
     "team": {"main_photographer": {"employee": 1, "salary": 500000, "bonus": 0},
              "makeup_artists": [{"employee": 2, "salary": 400000, "bonus": 0}]},
     "payment": {"status": "deposit_paid", "deposit": 9000000, "final": 15000000}},
    {"id": 2, "project_code": "PRJ002", "customer_name": "Hoàng Gia Bảo", "customer_phone": "0912000002",
     "package_name": "Gia đình", "package_price": 8000000, "status": "confirmed",
     "shoot_date": "2026-10-25", "shoot_time": "14:00"},
    {"id": 3, "project_code": "PRJ003", "customer_name": "Đỗ Thu Hà", "customer_phone": "0912000003",
     "package_name": "Chân dung", "package_price": 5000000, "status": "completed",
     "shoot_date": "2026-09-01"},
]

PACKAGES = [
    {"id": 1, "name": "Cưới Premium", "category": "wedding", "price": 15000000, "description": "Trọn gói cưới",
     "details": {"photo": 500, "assistant": 300, "makeup": 400, "retouch": "50k", "time": "8h"},
     "is_active": True},
    {"id": 2, "name": "Chân dung", "category": "portrait", "price": 3000000, "is_active": False},
]

PARTNERS = [
    {"id": 1, "name": "Hoa Tươi Xinh", "type": "flower", "cost": "Theo bill", "rating": 4,
     "contact_info": {"contact_person": "Chị Lan", "phone": "0988000001"}, "services": ["Hoa cưới"]},
    {"id": 2, "name": "In Ấn Nhanh", "type": "printing", "cost": 1200000, "rating": 5},
]

SALARIES = [
    {"id": 1, "employee": EMPLOYEES[0], "month": "2026-10", "base_salary": 8000000, "bonus": 1000000,
     "deduction": 0, "total_amount": 9000000, "status": "pending"},
    {"id": 2, "employee": EMPLOYEES[1], "month": "2026-10", "base_salary": 6000000,
     "total_amount": 6000000, "status": "paid"},
    {"id": 3, "employee": EMPLOYEES[0], "month": "2026-09", "base_salary": 8000000,
     "total_amount": 8000000, "status": "paid"},
]


class FakeBackend:
    """In-memory studio backend served through httpx.MockTransport"""

    def __init__(self):
        self.records: Dict[str, List[Dict[str, Any]]] = {
            "employees": copy.deepcopy(EMPLOYEES),
            "projects": copy.deepcopy(PROJECTS),
            "packages": copy.deepcopy(PACKAGES),
            "partners": copy.deepcopy(PARTNERS),
            "salaries": copy.deepcopy(SALARIES),
            "finance/transactions": [],
        }
        self.tokens: Dict[str, str] = {}
        self.refresh_tokens: Dict[str, str] = {}
        self.requests: List[httpx.Request] = []
        self.failures: Dict[str, int] = {}
        self.refresh_delay = 0.0
        self._issued = 0

    # ---------- helpers for tests ----------

    def issue_token(self, username: str) -> str:
        self._issued += 1
        token = f"token-{username}-{self._issued}"
        self.tokens[token] = username
        return token

    def expire_tokens(self):
        self.tokens.clear()

    def fail(self, path: str, status_code: int = 500):
        self.failures[path] = status_code

    def calls(self, method: str, path: str) -> List[httpx.Request]:
        return [r for r in self.requests if r.method == method and r.url.path == "/api" + path]

    # ---------- transport ----------

    async def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        await asyncio.sleep(0)
        path = request.url.path[len("/api"):]
        if path in self.failures:
            return httpx.Response(self.failures[path], json={"detail": "Lỗi máy chủ"})

        body = json.loads(request.content) if request.content else None

        if path == "/auth/login":
            return self._login(body)
        if path == "/auth/register":
            return self._register(body)
        if path == "/auth/token/refresh/":
            return await self._refresh(body)

        user = self._user_for(request)
        if user is None:
            return httpx.Response(401, json={"detail": "Token không hợp lệ"})
        if path == "/auth/me":
            return httpx.Response(200, json=user)
        return self._resource(request.method, path, body, request.url.params)

    def _login(self, body: Dict[str, Any]) -> httpx.Response:
        user = USERS.get(body.get("username"))
        if user is None or body.get("password") != PASSWORD:
            return httpx.Response(401, json={"detail": "Sai tên đăng nhập hoặc mật khẩu"})
        token = self.issue_token(user["username"])
        self.refresh_tokens[token] = user["username"]
        return httpx.Response(200, json={"success": True, "token": token, "user": user})

    def _register(self, body: Dict[str, Any]) -> httpx.Response:
        if body.get("username") in USERS:
            return httpx.Response(400, json={"success": False, "message": "Tên đăng nhập đã tồn tại"})
        user = {"id": 99, "username": body["username"], "full_name": body.get("full_name"),
                "email": body.get("email"), "role": body.get("role", "employee")}
        USERS_REGISTERED[body["username"]] = user
        token = self.issue_token(body["username"])
        self.refresh_tokens[token] = body["username"]
        return httpx.Response(201, json={"success": True, "token": token, "user": user})

    async def _refresh(self, body: Dict[str, Any]) -> httpx.Response:
        if self.refresh_delay:
            await asyncio.sleep(self.refresh_delay)
        username = self.refresh_tokens.get((body or {}).get("refresh"))
        if username is None:
            return httpx.Response(401, json={"detail": "Refresh token expired"})
        return httpx.Response(200, json={"access": self.issue_token(username)})

    def _user_for(self, request: httpx.Request) -> Optional[Dict[str, Any]]:
        header = request.headers.get("Authorization", "")
        username = self.tokens.get(header[len("Bearer "):]) if header.startswith("Bearer ") else None
        if username is None:
            return None
        return USERS.get(username) or USERS_REGISTERED.get(username)

    def _find(self, resource: str, record_id: str) -> Optional[Dict[str, Any]]:
        for record in self.records.get(resource, []):
            if str(record["id"]) == record_id:
                return record
        return None

    def _resource(self, method: str, path: str, body: Any, params) -> httpx.Response:
        parts = path.strip("/").split("/")
        if parts[0] == "finance":
            parts = ["finance/transactions"] + parts[2:]
        resource = parts[0]
        if resource not in self.records:
            return httpx.Response(404, json={"detail": "Not Found"})
        records = self.records[resource]

        if len(parts) == 1:
            if method == "GET":
                items = self._query(resource, records, params)
                if resource in ("salaries", "finance/transactions"):
                    return httpx.Response(200, json={"results": items})
                return httpx.Response(200, json={"total": len(items), "items": items})
            if method == "POST":
                record = {**body, "id": max((r["id"] for r in records), default=0) + 1}
                records.append(record)
                return httpx.Response(201, json=record)

        record = self._find(resource, parts[1])
        if record is None:
            return httpx.Response(404, json={"detail": f"{resource} not found"})

        if len(parts) == 3 and method == "PATCH" and parts[2] in ("activate", "deactivate"):
            record["is_active"] = parts[2] == "activate"
            return httpx.Response(200, json=record)
        if method == "GET":
            return httpx.Response(200, json=record)
        if method == "PUT":
            record.update(body)
            return httpx.Response(200, json=record)
        if method == "PATCH":
            record.update(body)
            return httpx.Response(200, json=record)
        if method == "DELETE":
            records.remove(record)
            return httpx.Response(204)
        return httpx.Response(405, json={"detail": "Method Not Allowed"})

    @staticmethod
    def _query(resource: str, records: List[Dict[str, Any]], params) -> List[Dict[str, Any]]:
        items = list(records)
        if resource == "salaries":
            if params.get("month"):
                items = [r for r in items if r.get("month") == params["month"]]
            if params.get("status"):
                items = [r for r in items if r.get("status") == params["status"]]
        if resource == "partners" and params.get("search"):
            needle = params["search"].lower()
            items = [r for r in items if needle in r["name"].lower()]
        if resource == "finance/transactions" and params.get("type"):
            items = [r for r in items if r.get("type") == params["type"]]
        return items


USERS_REGISTERED: Dict[str, Dict[str, Any]] = {}


@pytest.fixture
def backend() -> FakeBackend:
    USERS_REGISTERED.clear()
    return FakeBackend()


@pytest.fixture
def transport(backend) -> httpx.MockTransport:
    return httpx.MockTransport(backend)


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        API_URL=BACKEND_URL,
        STORAGE_PATH=None,
        LOG_DIR=str(tmp_path / "logs"),
        EXPORT_DIR=str(tmp_path / "exports"),
    )


@pytest.fixture
def token_store() -> TokenStore:
    return TokenStore(LocalStorage())


@pytest.fixture
def navigation_log() -> List[str]:
    return []


@pytest.fixture
async def api(token_store, transport, navigation_log) -> AsyncGenerator[ApiClient, None]:
    client = ApiClient(BACKEND_URL, token_store, on_unauthorized=navigation_log.append, transport=transport)
    yield client
    await client.aclose()


@pytest.fixture
def notifier() -> ToastNotifier:
    return ToastNotifier()


@pytest.fixture
def app(settings, transport):
    return create_app(settings, transport=transport)


@pytest.fixture
async def client(app) -> AsyncGenerator[AsyncClient, None]:
    """Gateway client with the app lifespan running"""
    async with app.router.lifespan_context(app):
        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
            yield ac


async def login_as(client: AsyncClient, username: str) -> httpx.Response:
    return await client.post("/api/v1/auth/login", json={"username": username, "password": PASSWORD})


@pytest.fixture
async def admin_client(client) -> AsyncClient:
    response = await login_as(client, "admin")
    assert response.status_code == 200
    return client
