import logging
from typing import List

logger = logging.getLogger(__name__)


class NavigationStore:
    """Where the operator would be sent in the browser dashboard."""

    def __init__(self, initial_path: str = "/dashboard"):
        self.current_path = initial_path
        self.history: List[str] = [initial_path]

    def navigate(self, path: str):
        logger.info(f"🧭 Navigating to {path}")
        self.current_path = path
        self.history.append(path)
