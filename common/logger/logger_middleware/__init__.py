# common/logger/logger_middleware/__init__.py
from .logger_middleware import RequestLoggingMiddleware
from .middleware_types import RequestDetails, RequestLogEntry, RequestMetadata

__all__ = [
    "RequestLoggingMiddleware",
    "RequestDetails",
    "RequestLogEntry",
    "RequestMetadata",
]
