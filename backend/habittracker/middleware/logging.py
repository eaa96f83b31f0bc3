"""
Habit Tracker Backend — Request Logging Middleware
===================================================

What:  One access line per habit API call on the "habittracker.access"
       logger.
How:   Times the rest of the stack, then logs method, path, status,
       duration and request ID. Paths in `quiet_paths` (the health check by
       default) are passed through unlogged so uptime monitors do not flood
       the log.

Request bodies are never logged; habit payloads are user data.
"""

import logging
import time
from typing import Iterable

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp

from habittracker.middleware.request_id import request_id_var

logger = logging.getLogger("habittracker.access")

DEFAULT_QUIET_PATHS = ("/api/health",)


def level_for_status(status: int) -> int:
    """5xx → ERROR, 4xx → WARNING, everything else → INFO."""
    if status >= 500:
        return logging.ERROR
    if status >= 400:
        return logging.WARNING
    return logging.INFO


class RequestLoggingMiddleware(BaseHTTPMiddleware):

    def __init__(self, app: ASGIApp, quiet_paths: Iterable[str] = DEFAULT_QUIET_PATHS):
        super().__init__(app)
        self.quiet_paths = frozenset(quiet_paths)

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        if request.url.path in self.quiet_paths:
            return await call_next(request)

        started = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - started) * 1000

        rid = request_id_var.get("")
        logger.log(
            level_for_status(response.status_code),
            "%s %s -> %d in %.1fms [%s]",
            request.method,
            request.url.path,
            response.status_code,
            elapsed_ms,
            rid,
            extra={
                "request_id": rid,
                "status": response.status_code,
                "duration_ms": round(elapsed_ms, 2),
                "client_ip": request.client.host if request.client else "unknown",
            },
        )
        return response
