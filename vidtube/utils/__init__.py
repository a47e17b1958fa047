"""Utility modules for the Vidtube application."""

from vidtube.utils.logging import LogContext, get_logger, setup_logging
from vidtube.utils.metrics import MetricsMiddleware, metrics

__all__ = [
    # Logging
    "get_logger",
    "LogContext",
    "setup_logging",
    # Metrics
    "metrics",
    "MetricsMiddleware",
]
