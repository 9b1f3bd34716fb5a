"""Process-wide logging setup and named logger factory."""

from __future__ import annotations

import logging
import sys
from typing import Optional

from app.config import get_settings

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"
ROOT_LOGGER_NAME = "swapboard"


class LoggingConfig:
    """Configure the root logger once; later instances only adjust the level."""

    _configured = False

    def __init__(self, level: Optional[str] = None) -> None:
        self.level = (level or get_settings().log_level or "INFO").upper()
        self.configure()

    def configure(self) -> None:
        root = logging.getLogger()
        root.setLevel(self.level)
        if LoggingConfig._configured:
            return
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        root.addHandler(handler)
        # uvicorn installs its own handlers; let its records reach ours only
        for name in ("uvicorn", "uvicorn.error", "uvicorn.access"):
            logging.getLogger(name).handlers.clear()
            logging.getLogger(name).propagate = True
        LoggingConfig._configured = True


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Return a logger namespaced under the application logger."""
    if not name:
        return logging.getLogger(ROOT_LOGGER_NAME)
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")
