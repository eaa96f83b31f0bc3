"""
Habit Tracker Backend — Request ID Middleware
==============================================

What:  Correlates log lines and error bodies of one request through an ID
       echoed in the X-Request-ID response header.
How:   A client-supplied X-Request-ID is kept only when it is a short token
       of letters, digits, '.', '_' or '-'; anything else (too long, spaces,
       control characters) is replaced by a fresh 8-character ID. The ID is
       stored in a ContextVar read by log lines and error bodies.
"""

import re
import uuid
from contextvars import ContextVar
from typing import Optional

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

REQUEST_ID_HEADER = "X-Request-ID"
MAX_REQUEST_ID_LENGTH = 64

_REQUEST_ID_PATTERN = re.compile(r"[A-Za-z0-9._-]+")

request_id_var: ContextVar[str] = ContextVar("request_id", default="")


def new_request_id() -> str:
    return uuid.uuid4().hex[:8]


def accepted_request_id(value: Optional[str]) -> Optional[str]:
    """Return `value` if it is safe to log and echo back, else None."""
    if not value or len(value) > MAX_REQUEST_ID_LENGTH:
        return None
    if not _REQUEST_ID_PATTERN.fullmatch(value):
        return None
    return value


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Bind the habit request's ID to the context and the response header."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        rid = accepted_request_id(request.headers.get(REQUEST_ID_HEADER)) or new_request_id()
        request_id_var.set(rid)
        response = await call_next(request)
        response.headers[REQUEST_ID_HEADER] = rid
        return response
