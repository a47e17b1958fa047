"""Logging setup for Vidtube.

Every module logs through ``get_logger(__name__)``, so all application
records land under the ``vidtube`` logger tree. ``setup_logging`` attaches a
single stdout handler to that tree and can be called again (app reload,
tests) without stacking duplicate handlers.

View pipeline runs log through ``LogContext``, which prefixes each message
with the view and viewer it belongs to::

    [view=trending] [viewer=3] page 1/2 with 10 of 14 records
"""

import logging
import sys
from collections.abc import MutableMapping
from typing import Any, Literal

from vidtube.config import get_settings

APP_LOGGER = "vidtube"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Chatty dependencies that only matter when debugging them directly
QUIET_LOGGERS = (
    "uvicorn.access",
    "sqlalchemy.engine",
    "sqlalchemy.pool",
    "aiosqlite",
    "asyncpg",
    "asyncio",
)

_HANDLER_NAME = "vidtube-stdout"


def setup_logging(
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] | None = None
) -> logging.Logger:
    """Configure the ``vidtube`` logger tree.

    Args:
        level: Override log level (default: INFO in production, DEBUG otherwise)

    Returns:
        The configured application logger
    """
    if level is None:
        level = "INFO" if get_settings().is_production else "DEBUG"

    app_logger = logging.getLogger(APP_LOGGER)
    app_logger.setLevel(getattr(logging, level))

    if not any(h.get_name() == _HANDLER_NAME for h in app_logger.handlers):
        handler = logging.StreamHandler(sys.stdout)
        handler.set_name(_HANDLER_NAME)
        handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
        app_logger.addHandler(handler)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
    return app_logger


def get_logger(name: str) -> logging.Logger:
    """Get the logger for a module (pass ``__name__``)."""
    return logging.getLogger(name)


class LogContext(logging.LoggerAdapter):
    """Logger adapter that prefixes messages with ``[key=value]`` pairs.

    Context values are rendered with ``str``; ``None`` shows up as ``None``
    (an anonymous viewer, for instance).
    """

    def __init__(self, logger: logging.Logger, **context: Any) -> None:
        super().__init__(logger, context)
        self.context = context
        self.prefix = " ".join(f"[{k}={v}]" for k, v in context.items())

    def process(self, msg: Any, kwargs: MutableMapping[str, Any]) -> tuple[Any, MutableMapping[str, Any]]:
        return f"{self.prefix} {msg}" if self.prefix else msg, kwargs
