"""
Service layer that answers badge requests.

`BadgeService.handle` is a cache-aside coordinator: a request whose identity
(method + full URL) is already cached is answered from the cache without
touching the backend.  On a miss the full pipeline runs (auth, query,
runReport, aggregation, formatting, rendering) and the rendered response is
handed to the request's background tasks to be stored.  Starlette runs those
tasks after the response is sent and keeps the request alive until they
finish, so the caller never waits for the cache write.

There is no coalescing of concurrent misses for the same key: both requests
render and both write, last write wins.
"""
from __future__ import annotations

import datetime as dt
import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterable, Protocol, Tuple

from starlette.responses import Response

from pageviews.cache import CachedResponse, ResponseCache, request_key
from pageviews.errors import (
    AuthError,
    BadgeError,
    InvalidInput,
    MethodNotAllowed,
    UnexpectedError,
    UpstreamError,
)
from pageviews.numbers import format_number
from pageviews.query import DEFAULT_START_DATE, MetricQuery, build_query, find_page_path
from pageviews.report import Report, aggregate_report
from pageviews.svg import render_badge
from ..routers.metrics import cache_counts
from .google_auth import TokenProvider

logger = logging.getLogger(__name__)

SVG_MEDIA_TYPE = "image/svg+xml"


class ReportSource(Protocol):
    async def run_report(self, query: MetricQuery, token: str) -> Report: ...


class TaskRunner(Protocol):
    """Anything that can run work after the response, e.g. `BackgroundTasks`."""

    def add_task(self, func: Callable[..., Any], *args: Any, **kwargs: Any) -> None: ...


def _utcnow() -> dt.datetime:
    return dt.datetime.now(dt.timezone.utc)


@dataclass
class BadgeService:
    cache: ResponseCache
    tokens: TokenProvider
    reports: ReportSource
    label: str = "readers"
    image_cache_seconds: int = 45 * 60
    start_date: str = DEFAULT_START_DATE
    clock: Callable[[], dt.datetime] = field(default=_utcnow)

    def badge_headers(self) -> Dict[str, str]:
        return {
            "Content-Type": SVG_MEDIA_TYPE,
            "Cache-Control": f"public, max-age={self.image_cache_seconds}",
            "Access-Control-Allow-Origin": "*",
        }

    async def handle(
        self,
        method: str,
        url: str,
        query_items: Iterable[Tuple[str, str]],
        tasks: TaskRunner,
    ) -> Response:
        """Answer one badge request.

        Raises a `BadgeError` subclass on failure; nothing is cached then.
        """
        if method.upper() != "GET":
            raise MethodNotAllowed()

        key = request_key(method, url)
        try:
            cached = await self.cache.get(key)
            if cached is not None:
                logger.debug("Badge cache hit for %s", key)
                cache_counts["hit"] += 1
                return cached.to_response()

            logger.debug("Badge cache miss for %s", key)
            cache_counts["miss"] += 1
            entry = await self.render(find_page_path(query_items))
        except InvalidInput:
            cache_counts["invalid_input"] += 1
            raise
        except AuthError:
            cache_counts["auth_error"] += 1
            raise
        except UpstreamError:
            cache_counts["upstream_error"] += 1
            raise
        except BadgeError:
            cache_counts["unexpected_error"] += 1
            raise
        except Exception as exc:
            logger.exception("Unexpected failure rendering badge for %s", key)
            cache_counts["unexpected_error"] += 1
            raise UnexpectedError(str(exc) or None) from exc

        cache_counts["rendered"] += 1
        tasks.add_task(self._store, key, entry)
        return entry.to_response()

    async def render(self, page_path: str) -> CachedResponse:
        """Run the backend pipeline for ``page_path`` and render the badge."""
        token = await self.tokens.get_token()
        if not token:
            raise AuthError()

        query = build_query(page_path, self.clock().date(), self.start_date)
        report = await self.reports.run_report(query, token)
        result = aggregate_report(report)
        logger.info(
            "Rendered badge for %r: %d views across %d paths",
            query.filter_value,
            result.total_count,
            len(result.dimension_values),
        )

        svg = render_badge(
            self.label, format_number(result.total_count), result.dimension_values
        )
        return CachedResponse(body=svg.encode("utf-8"), headers=self.badge_headers())

    async def _store(self, key: str, entry: CachedResponse) -> None:
        try:
            await self.cache.put(key, entry)
        except Exception:
            # response already sent
            logger.exception("Failed to cache badge for %s", key)
