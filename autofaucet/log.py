"""Session-scoped logging in the ``[BrowsingSession-LEVEL]`` line format."""

from __future__ import annotations

import logging
import sys
from typing import Any, Optional

from .config import LOG_LEVEL
from .constants import LOG_FORMAT, LOG_LEVEL_TAGS, LOG_TIME_FORMAT
from .helpers import format_string

DEFAULT_SOURCE = "BrowsingSession"
SESSION_LOGGER_NAME = "autofaucet.session"


class SessionFormatter(logging.Formatter):
    """Render records as ``[BrowsingSession-<LEVEL>] [<time>] [<source>] <message>``."""

    def format(self, record: logging.LogRecord) -> str:
        message = record.getMessage()
        if record.exc_info:
            message = f"{message}\n{self.formatException(record.exc_info)}"
        return format_string(
            LOG_FORMAT,
            LOG_LEVEL_TAGS.get(record.levelname, record.levelname),
            self.formatTime(record, LOG_TIME_FORMAT),
            getattr(record, "source", DEFAULT_SOURCE),
            message,
        )


class SessionLogger(logging.LoggerAdapter):
    """Logger bound to one browsing session and one message source."""

    def process(self, msg: Any, kwargs: dict) -> tuple[Any, dict]:
        kwargs["extra"] = {**self.extra, **kwargs.get("extra", {})}
        return msg, kwargs

    @property
    def session_id(self) -> str:
        return self.extra["session_id"]

    def source(self, name: str) -> SessionLogger:
        """Return a sibling logger that tags its lines with ``name``."""
        return SessionLogger(self.logger, {**self.extra, "source": name})


def get_session_logger(session_id: str, level: Optional[str] = None) -> SessionLogger:
    """Bind the shared session logger to ``session_id``."""
    logger = logging.getLogger(SESSION_LOGGER_NAME)
    if not logger.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(SessionFormatter())
        logger.addHandler(handler)
        logger.setLevel(level or LOG_LEVEL)
    return SessionLogger(logger, {"session_id": session_id, "source": DEFAULT_SOURCE})
