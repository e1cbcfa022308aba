import logging
from collections import deque
from datetime import datetime
from typing import Any, Deque, Dict, List

logger = logging.getLogger(__name__)

MAX_PENDING_TOASTS = 50


class ToastNotifier:
    """Service for operator-facing toast messages.

    Toasts are logged and queued until the UI drains them.
    """

    def __init__(self, maxlen: int = MAX_PENDING_TOASTS):
        self._queue: Deque[Dict[str, Any]] = deque(maxlen=maxlen)

    def _push(self, level: str, message: str):
        self._queue.append({
            "type": level,
            "message": message,
            "timestamp": datetime.now().isoformat(),
        })

    def success(self, message: str):
        logger.info(f"✅ {message}")
        self._push("success", message)

    def info(self, message: str):
        logger.info(f"ℹ️ {message}")
        self._push("info", message)

    def warning(self, message: str):
        logger.warning(f"⚠️ {message}")
        self._push("warning", message)

    def error(self, message: str):
        logger.error(f"❌ {message}")
        self._push("error", message)

    def pending(self) -> List[Dict[str, Any]]:
        return list(self._queue)

    def drain(self) -> List[Dict[str, Any]]:
        """Return and forget every queued toast"""
        items = list(self._queue)
        self._queue.clear()
        return items
