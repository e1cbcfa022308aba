import logging
import logging.config
import os
from datetime import datetime
from typing import Any, Dict, Optional

from studio_dashboard.core.config import Settings, settings as default_settings

# One folder per log stream under LOG_DIR
LOG_STREAMS = ("app", "access", "error", "backend")
MAX_LOG_BYTES = 10485760  # 10MB


def _rotating_handler(log_dir: str, stream: str, level: str, formatter: str, date: str) -> Dict[str, Any]:
    return {
        "class": "logging.handlers.RotatingFileHandler",
        "level": level,
        "formatter": formatter,
        "filename": os.path.join(log_dir, stream, f"{stream}-{date}.log"),
        "maxBytes": MAX_LOG_BYTES,
        "backupCount": 10,
        "encoding": "utf-8",
    }


def setup_logging(settings: Optional[Settings] = None):
    """Setup dashboard logging configuration.

    Besides the app/error/access files, calls made to the studio backend
    (``studio_dashboard.client``) get their own stream so session problems
    can be traced without the route noise.
    """
    settings = settings or default_settings
    log_dir = settings.LOG_DIR
    for stream in LOG_STREAMS:
        os.makedirs(os.path.join(log_dir, stream), exist_ok=True)

    current_date = datetime.now().strftime("%Y-%m-%d")
    level = settings.LOG_LEVEL

    logging_config = {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "default": {
                "format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
                "datefmt": "%Y-%m-%d %H:%M:%S",
            },
            "detailed": {
                "format": "%(asctime)s - %(name)s - %(levelname)s - %(funcName)s:%(lineno)d - %(message)s",
                "datefmt": "%Y-%m-%d %H:%M:%S",
            },
            "access": {
                "format": "%(asctime)s - %(message)s",
                "datefmt": "%Y-%m-%d %H:%M:%S",
            },
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "level": level,
                "formatter": "default",
                "stream": "ext://sys.stdout",
            },
            "app_file": _rotating_handler(log_dir, "app", level, "detailed", current_date),
            "error_file": _rotating_handler(log_dir, "error", "ERROR", "detailed", current_date),
            "access_file": _rotating_handler(log_dir, "access", "INFO", "access", current_date),
            "backend_file": _rotating_handler(log_dir, "backend", level, "default", current_date),
        },
        "loggers": {
            "": {  # Root logger
                "level": level,
                "handlers": ["console", "app_file", "error_file"],
                "propagate": False,
            },
            "access": {
                "level": "INFO",
                "handlers": ["access_file"],
                "propagate": False,
            },
            "uvicorn.access": {
                "level": "INFO",
                "handlers": ["access_file"],
                "propagate": False,
            },
            "studio_dashboard.client": {
                "level": level,
                "handlers": ["backend_file"],
                "propagate": True,
            },
            "httpx": {
                "level": "WARNING",
                "handlers": ["backend_file"],
                "propagate": False,
            },
        },
    }

    logging.config.dictConfig(logging_config)

    logger = logging.getLogger(__name__)
    logger.info(f"📸 Studio Dashboard logging ready ({settings.ENVIRONMENT}, level {level})")
    logger.info(f"🔗 Backend calls to {settings.API_URL} logged under {log_dir}/backend/")
