"""Structured logging and request tracking."""

from repairdesk.core.logging.middleware import RequestIdMiddleware, RequestLoggingMiddleware
from repairdesk.core.logging.setup import configure_logging


__all__ = [
    "RequestIdMiddleware",
    "RequestLoggingMiddleware",
    "configure_logging",
]
