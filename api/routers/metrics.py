"""
Metrics endpoints and utilities.

This module exposes a simple metrics endpoint at `/api/metrics` returning
cumulative counters since the application started: requests per method and
status (recorded by a middleware) and badge cache outcomes (recorded by the
badge service).
"""
from __future__ import annotations

from collections import Counter
from fastapi import APIRouter


# Requests keyed by "METHOD status"
request_counts: Counter[str] = Counter()
# Badge outcomes: hit, miss, rendered, auth_error, upstream_error, ...
cache_counts: Counter[str] = Counter()

router = APIRouter(prefix="/api", tags=["metrics"])


@router.get("/metrics")
def metrics() -> dict[str, dict[str, int]]:
    """Return the cumulative request and cache counters."""
    return {"requests": dict(request_counts), "cache": dict(cache_counts)}
