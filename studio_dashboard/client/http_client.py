import asyncio
import json
import logging
from decimal import Decimal
from typing import Any, Callable, Dict, Optional, Union
from urllib.parse import urlencode

import httpx

from studio_dashboard.client.token_store import TokenStore
from studio_dashboard.core.exceptions import AuthenticationRequired, BackendError, NetworkError
from studio_dashboard.schemas.auth.login import LoginRequest
from studio_dashboard.schemas.auth.token import AuthTokens
from studio_dashboard.schemas.common.pagination import money_to_number

logger = logging.getLogger(__name__)

REFRESH_ENDPOINT = "/auth/token/refresh/"
DEFAULT_ERROR_MESSAGE = "An error occurred"

JSONType = Union[Dict[str, Any], list]


def _json_default(value: Any) -> Any:
    if isinstance(value, Decimal):
        return money_to_number(value)
    return str(value)


def build_query_string(params: Optional[Dict[str, Any]]) -> str:
    """Encode ``params`` as ``?a=b``, skipping None and empty values."""
    if not params:
        return ""
    cleaned = [(key, str(value).lower() if isinstance(value, bool) else str(value))
               for key, value in params.items()
               if value is not None and value != ""]
    if not cleaned:
        return ""
    return "?" + urlencode(cleaned)


def _message_from_detail(detail: Any) -> Optional[str]:
    if not detail:
        return None
    if isinstance(detail, str):
        return detail
    if isinstance(detail, list):
        # FastAPI style validation items
        parts = []
        for item in detail:
            if isinstance(item, dict):
                parts.append(str(item.get("msg") or item))
            else:
                parts.append(str(item))
        return "; ".join(parts)
    return str(detail)


def extract_error(response: httpx.Response) -> BackendError:
    """Build a BackendError from a non-2xx response.

    JSON bodies give ``detail`` or ``message``; anything else falls back to
    the raw text, then the reason phrase, then a generic message.
    """
    text = response.text
    errors = None
    try:
        data = json.loads(text)
    except ValueError:
        message = text or response.reason_phrase or DEFAULT_ERROR_MESSAGE
    else:
        message = None
        if isinstance(data, dict):
            message = _message_from_detail(data.get("detail")) or _message_from_detail(data.get("message"))
            errors = data.get("errors") or data
        else:
            errors = data
        message = message or DEFAULT_ERROR_MESSAGE
    logger.error(f"❌ Backend error {response.status_code} on {response.request.method} "
                 f"{response.request.url.path}: {message}")
    return BackendError(status_code=response.status_code, detail=message, errors=errors)


class ApiClient:
    """Async JSON client for the studio backend.

    A 401 triggers one token refresh shared by every request that failed with
    the same token, then a single retry. When the session cannot be recovered
    the tokens are wiped and ``on_unauthorized`` receives the login path.
    """

    def __init__(
        self,
        base_url: str,
        token_store: TokenStore,
        on_unauthorized: Optional[Callable[[str], Any]] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        login_path: str = "/login",
    ):
        self.base_url = base_url.rstrip("/")
        self.token_store = token_store
        self.on_unauthorized = on_unauthorized
        self.login_path = login_path
        self._client = httpx.AsyncClient(
            timeout=httpx.Timeout(timeout),
            transport=transport,
            headers={"Content-Type": "application/json", "Accept": "application/json"},
        )
        self._refresh_lock = asyncio.Lock()
        self.refresh_count = 0

    def _url(self, endpoint: str) -> str:
        if not endpoint.startswith("/"):
            endpoint = "/" + endpoint
        return f"{self.base_url}{endpoint}"

    async def _send(self, method: str, endpoint: str, data: Any, params: Optional[Dict[str, Any]],
                    token: Optional[str]) -> httpx.Response:
        headers = {}
        if token:
            headers["Authorization"] = f"Bearer {token}"
        url = self._url(endpoint) + build_query_string(params)
        content = json.dumps(data, default=_json_default) if data is not None else None
        try:
            return await self._client.request(method, url, content=content, headers=headers)
        except httpx.RequestError as e:
            logger.error(f"❌ Network error on {method} {endpoint}: {e}")
            raise NetworkError() from e

    async def request(
        self,
        method: str,
        endpoint: str,
        data: Any = None,
        params: Optional[Dict[str, Any]] = None,
        token: Optional[str] = None,
        recover_session: bool = True,
    ) -> JSONType:
        used_token = token or self.token_store.get_access_token()
        response = await self._send(method, endpoint, data, params, used_token)

        if response.status_code == 401 and recover_session:
            new_token = await self._recover_session(used_token)
            retry = await self._send(method, endpoint, data, params, new_token)
            if not retry.is_success:
                raise extract_error(retry)
            return self._parse(retry)

        if not response.is_success:
            raise extract_error(response)

        return self._parse(response)

    def _parse(self, response: httpx.Response) -> JSONType:
        if response.status_code == 204 or not response.content:
            return {}
        try:
            return response.json()
        except ValueError as e:
            logger.error(f"❌ Non-JSON success body from {response.request.url.path}")
            raise BackendError(status_code=502, detail="Invalid response from server") from e

    async def _recover_session(self, failed_token: Optional[str]) -> str:
        async with self._refresh_lock:
            current = self.token_store.get_access_token()
            if current and current != failed_token:
                # Another request refreshed while this one waited
                return current

            refresh_token = self.token_store.get_refresh_token()
            if refresh_token:
                tokens = await self._refresh_access_token(refresh_token)
                if tokens:
                    self.token_store.set_tokens(tokens)
                    logger.info("🔄 Access token refreshed")
                    return tokens.access

        self._session_lost()
        raise AuthenticationRequired("Authentication required", redirect_to=self.login_path)

    async def _refresh_access_token(self, refresh_token: str) -> Optional[AuthTokens]:
        self.refresh_count += 1
        try:
            response = await self._client.post(
                self._url(REFRESH_ENDPOINT),
                content=json.dumps({"refresh": refresh_token}),
            )
        except httpx.RequestError as e:
            logger.warning(f"⚠️ Token refresh failed: {e}")
            return None
        if not response.is_success:
            logger.warning(f"⚠️ Token refresh rejected with {response.status_code}")
            return None
        try:
            data = response.json()
        except ValueError:
            return None
        access = data.get("access") or data.get("token") if isinstance(data, dict) else None
        if not access:
            return None
        return AuthTokens(access=access, refresh=refresh_token)

    def _session_lost(self):
        logger.warning("🔒 Session lost, clearing tokens")
        self.token_store.clear_tokens()
        if self.on_unauthorized:
            self.on_unauthorized(self.login_path)

    async def get(self, endpoint: str, params: Optional[Dict[str, Any]] = None, **kwargs) -> JSONType:
        return await self.request("GET", endpoint, params=params, **kwargs)

    async def post(self, endpoint: str, data: Any = None, **kwargs) -> JSONType:
        return await self.request("POST", endpoint, data=data, **kwargs)

    async def put(self, endpoint: str, data: Any = None, **kwargs) -> JSONType:
        return await self.request("PUT", endpoint, data=data, **kwargs)

    async def patch(self, endpoint: str, data: Any = None, **kwargs) -> JSONType:
        return await self.request("PATCH", endpoint, data=data, **kwargs)

    async def delete(self, endpoint: str, **kwargs) -> JSONType:
        return await self.request("DELETE", endpoint, **kwargs)

    async def login(self, credentials: LoginRequest) -> AuthTokens:
        response = await self.post("/auth/login", credentials.model_dump(), recover_session=False)
        token = response.get("token") if isinstance(response, dict) else None
        if not token:
            message = response.get("message") if isinstance(response, dict) else None
            raise BackendError(status_code=401, detail=message or "Login failed")
        # The backend issues one token, it doubles as the refresh token
        tokens = AuthTokens(access=token, refresh=token)
        self.token_store.set_tokens(tokens)
        return tokens

    async def logout(self):
        self.token_store.clear_tokens()

    async def aclose(self):
        await self._client.aclose()
