# common/logger/logger_middleware/logger_middleware.py
"""
Request logging middleware for FastAPI.

Every request gets an ``X-Request-ID`` (taken from the caller or generated),
which is bound into structlog's contextvars so service-level log lines carry
it too.

Usage:
    app.add_middleware(
        RequestLoggingMiddleware,
        slow_request_threshold_ms=500,
        log_query_params=False,
    )
"""

from typing import Callable, Awaitable, Optional
import time
import uuid

import structlog
from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

from common.context_vars import request_id_context_var
from ..logger import get_app_logger
from .middleware_types import RequestMetadata, RequestDetails, RequestLogEntry

REQUEST_ID_HEADER = "X-Request-ID"


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    Structured request logging.

    Level selection:
    - ERROR: 5xx responses
    - WARNING: slow requests or 4xx responses
    - INFO: everything else
    """

    def __init__(
        self,
        app: ASGIApp,
        *,
        log_details: bool = True,
        slow_request_threshold_ms: float = 1000.0,
        log_query_params: bool = True,
        log_client_info: bool = True,
        logger_name: Optional[str] = None,
    ):
        super().__init__(app)
        self.log_details = log_details
        self.slow_request_threshold_ms = slow_request_threshold_ms
        self.log_query_params = log_query_params
        self.log_client_info = log_client_info
        self.logger = get_app_logger(name=logger_name or __name__)

    async def dispatch(
        self,
        request: Request,
        call_next: Callable[[Request], Awaitable[Response]],
    ) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid.uuid4())
        request.state.request_id = request_id

        token = request_id_context_var.set(request_id)
        structlog.contextvars.bind_contextvars(request_id=request_id)
        start_time = time.perf_counter()

        try:
            response = await call_next(request)
        finally:
            duration_ms = (time.perf_counter() - start_time) * 1000
            structlog.contextvars.unbind_contextvars("request_id")
            request_id_context_var.reset(token)

        response.headers[REQUEST_ID_HEADER] = request_id

        log_entry = self._build_log_entry(
            request=request,
            response=response,
            duration_ms=duration_ms,
            request_id=request_id,
        )
        self._log_request(log_entry)
        return response

    def _build_log_entry(
        self,
        request: Request,
        response: Response,
        duration_ms: float,
        request_id: str,
    ) -> RequestLogEntry:
        metadata = RequestMetadata(
            method=request.method,
            path=request.url.path,
            status_code=response.status_code,
            duration_ms=round(duration_ms, 2),
        )

        details = None
        if self.log_details:
            details = RequestDetails(
                request_id=request_id,
                client_host=(
                    request.client.host
                    if self.log_client_info and request.client
                    else None
                ),
                user_agent=(
                    request.headers.get("user-agent") if self.log_client_info else None
                ),
                query_params=(
                    dict(request.query_params)
                    if self.log_query_params and request.query_params
                    else None
                ),
                path_params=request.path_params or None,
                content_length=int(response.headers.get("content-length", 0)) or None,
            )

        return RequestLogEntry(
            metadata=metadata,
            details=details,
            slow_threshold_ms=self.slow_request_threshold_ms,
        )

    def _log_request(self, log_entry: RequestLogEntry) -> None:
        log_data = log_entry.model_dump(mode="json", exclude_none=True)

        if log_entry.is_error:  # type: ignore[truthy-function]
            self.logger.error("Request failed with server error", **log_data)
        elif log_entry.is_slow:  # type: ignore[truthy-function]
            self.logger.warning(
                f"Slow request detected ({log_entry.metadata.duration_ms}ms)",
                **log_data,
            )
        elif log_entry.is_client_error:
            self.logger.warning("Request failed with client error", **log_data)
        else:
            self.logger.info("Request completed", **log_data)


__all__ = ["RequestLoggingMiddleware", "REQUEST_ID_HEADER"]
