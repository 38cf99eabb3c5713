# gatehouse/core/middleware.py
"""
Core middleware registration for the FastAPI application.

Request ids, timing and error-status logging. Liveness probes are not
logged.
"""
from __future__ import annotations

import time
import uuid
from typing import Callable

from fastapi import FastAPI, Request, Response
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

from gatehouse.core.logging import get_logger, request_id as request_id_ctx

logger = get_logger(__name__)

QUIET_PATHS = frozenset({"/health"})

# 401/403 responses here are flagged as security events
GUARDED_PREFIXES = ("/api/v1/gatekeeper/scan", "/api/v1/cron/")


class RequestIDMiddleware(BaseHTTPMiddleware):
    """
    Assigns each request an id, reusing the ``X-Request-ID`` a proxy sent.

    The id is stored in ``request.state.request_id`` and in the logging
    context, and is echoed back on the response.
    """

    def __init__(self, app: ASGIApp, header_name: str = "X-Request-ID"):
        super().__init__(app)
        self.header_name = header_name

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = request.headers.get(self.header_name) or str(uuid.uuid4())
        request.state.request_id = request_id
        token = request_id_ctx.set(request_id)
        try:
            response = await call_next(request)
        finally:
            request_id_ctx.reset(token)

        response.headers[self.header_name] = request_id
        return response


class TimingMiddleware(BaseHTTPMiddleware):
    """Adds ``X-Process-Time`` (seconds) and logs completed requests."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        start_time = time.perf_counter()
        response = await call_next(request)
        process_time = time.perf_counter() - start_time

        response.headers["X-Process-Time"] = f"{process_time:.4f}"

        if request.url.path not in QUIET_PATHS:
            logger.info(
                "Request completed",
                extra={
                    "request_id": getattr(request.state, "request_id", "unknown"),
                    "method": request.method,
                    "url": request.url.path,
                    "status_code": response.status_code,
                    "process_time": f"{process_time:.4f}s",
                },
            )

        return response


class ErrorLoggingMiddleware(BaseHTTPMiddleware):

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        response = await call_next(request)
        status_code = response.status_code
        if status_code < 400:
            return response

        path = request.url.path
        extra = {
            "request_id": getattr(request.state, "request_id", "unknown"),
            "method": request.method,
            "url": path,
            "status_code": status_code,
            "client_host": request.client.host if request.client else None,
        }
        if status_code >= 500:
            logger.error(f"Request failed with status {status_code}", extra=extra)
        elif status_code in (401, 403) and path.startswith(GUARDED_PREFIXES):
            extra["security_event"] = True
            logger.warning(f"Rejected call to guarded endpoint ({status_code})", extra=extra)
        else:
            logger.warning(f"Request returned error status {status_code}", extra=extra)

        return response


def register_middlewares(app: FastAPI) -> None:
    """
    Register all core middlewares to the FastAPI application.

    Starlette runs the last middleware added first, so execution order is:
        1. RequestIDMiddleware
        2. TimingMiddleware
        3. ErrorLoggingMiddleware
    """
    app.add_middleware(ErrorLoggingMiddleware)
    app.add_middleware(TimingMiddleware)
    app.add_middleware(RequestIDMiddleware)


__all__ = [
    "RequestIDMiddleware",
    "TimingMiddleware",
    "ErrorLoggingMiddleware",
    "register_middlewares",
]
