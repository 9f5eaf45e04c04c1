"""
HTTP rendering of badge pipeline errors.

Parameter and method problems are answered with a short plain-text 405.
Everything else is a 500 with a JSON body; backend failures pass the
backend's own error body through so callers can see why the report failed.
"""
from __future__ import annotations

import datetime as dt
import json
import logging

from fastapi import FastAPI, Request
from starlette.responses import JSONResponse, PlainTextResponse, Response

from pageviews.errors import (
    BadgeError,
    InvalidInput,
    MethodNotAllowed,
    UnexpectedError,
    UpstreamError,
)

logger = logging.getLogger(__name__)


def _timestamp() -> str:
    now = dt.datetime.now(dt.timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def error_response(exc: BadgeError) -> Response:
    if isinstance(exc, (InvalidInput, MethodNotAllowed)):
        return PlainTextResponse(exc.message, status_code=exc.status_code)
    if isinstance(exc, UpstreamError):
        return Response(
            json.dumps({"error": exc.body}, indent=4),
            status_code=exc.status_code,
            media_type="application/json",
        )
    return JSONResponse(
        {"error": exc.message, "timestamp": _timestamp()},
        status_code=exc.status_code,
    )


async def badge_error_handler(request: Request, exc: BadgeError) -> Response:
    return error_response(exc)


async def unhandled_error_handler(request: Request, exc: Exception) -> Response:
    logger.error("Unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
    return error_response(UnexpectedError(str(exc) or None))


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(BadgeError, badge_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(Exception, unhandled_error_handler)
