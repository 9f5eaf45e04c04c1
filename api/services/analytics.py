"""
Client for the Google Analytics Data API ``runReport`` endpoint.

Requests go through :class:`CachingTransport`, an httpx transport that keeps
successful upstream responses for a fixed TTL.  The cache sits below the
badge cache: different badge URLs that normalise to the same report (for
example ``?page_path=Blog`` and ``?page_path=blog``) share one upstream call.
A request opts in by setting the ``cache_ttl`` request extension.
"""
from __future__ import annotations

import hashlib
import logging
import threading
from dataclasses import dataclass
from typing import Any, Optional, Tuple

import httpx
from cachetools import TTLCache

from pageviews.errors import UnexpectedError, UpstreamError
from pageviews.query import MetricQuery
from pageviews.report import Report, parse_report

logger = logging.getLogger(__name__)

CACHE_TTL_EXTENSION = "cache_ttl"
_FRAMING_HEADERS = {b"content-encoding", b"content-length", b"transfer-encoding"}


@dataclass(frozen=True)
class _StoredResponse:
    status_code: int
    headers: Tuple[Tuple[bytes, bytes], ...]
    content: bytes


class CachingTransport(httpx.AsyncBaseTransport):
    """Wrap another transport and cache 2xx responses per request.

    The cache key covers method, URL and body but not headers, so a rotated
    bearer token still hits.  Requests without a positive ``cache_ttl``
    extension pass straight through.
    """

    def __init__(
        self,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        maxsize: int = 256,
        ttl: float = 45 * 60,
    ) -> None:
        self._transport = transport or httpx.AsyncHTTPTransport()
        self._cache: TTLCache = TTLCache(maxsize=maxsize, ttl=ttl)
        self._lock = threading.Lock()

    @staticmethod
    def cache_key(request: httpx.Request) -> str:
        digest = hashlib.sha256(request.content).hexdigest()
        return f"{request.method} {request.url} {digest}"

    async def handle_async_request(self, request: httpx.Request) -> httpx.Response:
        ttl = request.extensions.get(CACHE_TTL_EXTENSION) or 0
        if ttl <= 0:
            return await self._transport.handle_async_request(request)

        key = self.cache_key(request)
        with self._lock:
            stored: Optional[_StoredResponse] = self._cache.get(key)
        if stored is not None:
            logger.debug("Upstream cache hit for %s", request.url)
            return httpx.Response(
                stored.status_code,
                headers=list(stored.headers),
                content=stored.content,
                request=request,
            )

        response = await self._transport.handle_async_request(request)
        try:
            content = await response.aread()
        finally:
            await response.aclose()
        # Body is stored decoded, so framing headers no longer apply.
        headers = tuple(
            (name, value)
            for name, value in response.headers.raw
            if name.lower() not in _FRAMING_HEADERS
        )
        stored = _StoredResponse(response.status_code, headers, content)
        if response.is_success:
            with self._lock:
                self._cache[key] = stored
        return httpx.Response(
            stored.status_code,
            headers=list(stored.headers),
            content=stored.content,
            request=request,
        )

    async def aclose(self) -> None:
        await self._transport.aclose()


class AnalyticsClient:
    """Issue page-view queries against one analytics property."""

    def __init__(
        self,
        run_report_url: str,
        call_cache_ttl: int = 45 * 60,
        timeout: Optional[float] = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        cache_maxsize: int = 256,
    ) -> None:
        self.run_report_url = run_report_url
        self.call_cache_ttl = call_cache_ttl
        self.transport = CachingTransport(
            transport, maxsize=cache_maxsize, ttl=max(call_cache_ttl, 1)
        )
        self._client = httpx.AsyncClient(transport=self.transport, timeout=timeout)

    async def run_report(self, query: MetricQuery, token: str) -> Report:
        """Run ``query`` and return the parsed report.

        Raises:
            UpstreamError: the backend answered with a non-2xx status.
            UnexpectedError: the body is not a JSON object.
        """
        response = await self._client.post(
            self.run_report_url,
            json=query.to_request_body(),
            headers={"Authorization": f"Bearer {token}"},
            extensions={CACHE_TTL_EXTENSION: self.call_cache_ttl},
        )
        if not response.is_success:
            logger.warning(
                "runReport failed with status %s for filter %r",
                response.status_code,
                query.filter_value,
            )
            raise UpstreamError(response.text, upstream_status=response.status_code)
        try:
            payload: Any = response.json()
        except ValueError as exc:
            raise UnexpectedError(f"analytics response is not JSON: {exc}") from exc
        return parse_report(payload)

    async def aclose(self) -> None:
        await self._client.aclose()
