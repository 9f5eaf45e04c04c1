"""
Middleware for assigning correlation IDs to incoming requests.

This module defines a Starlette `BaseHTTPMiddleware` subclass that injects a
request ID into a context variable for each request.  An `X-Request-ID` sent
by the caller is reused, otherwise a fresh UUID is generated.  The logging
filter below copies the value onto every log record so entries belonging to
the same badge request can be correlated.  The ID is also returned to clients
via the `X-Request-ID` response header.
"""
from __future__ import annotations

import contextvars
import logging
import uuid

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

REQUEST_ID_HEADER = "X-Request-ID"

# Context variable to hold the current request ID
request_id_ctx: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "request_id", default=None
)


class RequestIdMiddleware(BaseHTTPMiddleware):
    """Middleware that sets a request ID for each request."""

    async def dispatch(self, request: Request, call_next):  # type: ignore[override]
        rid = request.headers.get(REQUEST_ID_HEADER) or str(uuid.uuid4())
        token = request_id_ctx.set(rid)
        try:
            response = await call_next(request)
        finally:
            request_id_ctx.reset(token)
        response.headers.setdefault(REQUEST_ID_HEADER, rid)
        return response


class RequestIdFilter(logging.Filter):
    """Logging filter that adds ``request_id`` to every record."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = request_id_ctx.get() or "-"  # type: ignore[attr-defined]
        return True
