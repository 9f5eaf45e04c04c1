"""
Middleware to record simple per-request metrics.

Every handled HTTP request increments a counter keyed by its method and
response status.  The counters live in `api.routers.metrics.request_counts`
and are exposed via the `/api/metrics` endpoint.
"""
from __future__ import annotations

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

from api.routers.metrics import request_counts


class MetricsMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):  # type: ignore[override]
        response = await call_next(request)
        request_counts[f"{request.method.upper()} {response.status_code}"] += 1
        return response
