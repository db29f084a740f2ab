"""Middleware — Protocol-based, no inheritance required.

A middleware is any callable matching:
    def mw(next_handler: Handler) -> Handler

Built-in middleware:
    RequestLogger -- One access-log line per request
"""

from switchyard.middleware.builtin import RequestLogger, RequestLoggerConfig
from switchyard.middleware.protocol import Middleware
from switchyard.middleware.stack import MiddlewareStack, compose

__all__ = [
    "Middleware",
    "MiddlewareStack",
    "RequestLogger",
    "RequestLoggerConfig",
    "compose",
]
