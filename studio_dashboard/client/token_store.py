import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional, Union

from studio_dashboard.schemas.auth.token import AuthTokens

logger = logging.getLogger(__name__)

ACCESS_TOKEN_KEY = "access_token"
LEGACY_TOKEN_KEY = "token"
REFRESH_TOKEN_KEY = "refresh_token"
AUTH_STORAGE_KEY = "auth-storage"


class LocalStorage:
    """String key/value storage persisted as a single JSON document.

    With no path the values only live in memory, which is what the tests use.
    """

    def __init__(self, path: Optional[Union[str, Path]] = None):
        self.path = Path(path) if path else None
        self._data: Dict[str, str] = {}
        self._load()

    def _load(self):
        if not self.path or not self.path.exists():
            return
        try:
            raw = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            logger.warning(f"⚠️ Ignoring unreadable storage file {self.path}: {e}")
            return
        if isinstance(raw, dict):
            self._data = {str(k): str(v) for k, v in raw.items()}

    def _flush(self):
        if not self.path:
            return
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(self._data, ensure_ascii=False), encoding="utf-8")

    def get_item(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set_item(self, key: str, value: str):
        self._data[key] = value
        self._flush()

    def remove_item(self, key: str):
        if self._data.pop(key, None) is not None:
            self._flush()

    def clear(self):
        self._data = {}
        self._flush()

    def keys(self):
        return list(self._data.keys())

    def get_json(self, key: str) -> Optional[Any]:
        value = self.get_item(key)
        if value is None:
            return None
        try:
            return json.loads(value)
        except ValueError:
            logger.warning(f"⚠️ Storage key '{key}' does not hold JSON")
            return None

    def set_json(self, key: str, value: Any):
        self.set_item(key, json.dumps(value, ensure_ascii=False, default=str))


class TokenStore:
    def __init__(self, storage: LocalStorage):
        self.storage = storage

    def get_access_token(self) -> Optional[str]:
        return self.storage.get_item(ACCESS_TOKEN_KEY) or self.storage.get_item(LEGACY_TOKEN_KEY) or None

    def get_refresh_token(self) -> Optional[str]:
        return self.storage.get_item(REFRESH_TOKEN_KEY) or None

    def set_tokens(self, tokens: AuthTokens):
        # Older pages read the bare "token" key, keep both in sync
        self.storage.set_item(ACCESS_TOKEN_KEY, tokens.access)
        self.storage.set_item(LEGACY_TOKEN_KEY, tokens.access)
        self.storage.set_item(REFRESH_TOKEN_KEY, tokens.refresh)

    def clear_tokens(self):
        for key in (ACCESS_TOKEN_KEY, LEGACY_TOKEN_KEY, REFRESH_TOKEN_KEY):
            self.storage.remove_item(key)

    def has_token(self) -> bool:
        return self.get_access_token() is not None
