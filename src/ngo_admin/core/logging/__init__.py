"""Logging module with structured logging and request tracking."""

from ngo_admin.core.logging.config import configure_logging
from ngo_admin.core.logging.middleware import RequestLoggingMiddleware


__all__ = [
    "RequestLoggingMiddleware",
    "configure_logging",
]
