"""
Tests for the runReport client and its upstream-call cache.

The backend is replaced by an `httpx.MockTransport`, so no network is used.
"""
import asyncio
import datetime as dt
import json
import os
import sys

import httpx
import pytest

current_dir = os.path.dirname(__file__)
project_root = os.path.abspath(os.path.join(current_dir, ".."))
if project_root not in sys.path:
    sys.path.insert(0, project_root)

from api.services.analytics import AnalyticsClient, CachingTransport  # noqa: E402
from pageviews.errors import UnexpectedError, UpstreamError  # noqa: E402
from pageviews.query import build_query  # noqa: E402

URL = "https://analytics.test/v1beta/properties/123:runReport"


class Backend:
    def __init__(self, status=200, payload=None, content=None):
        self.status = status
        self.payload = payload if payload is not None else {"rows": []}
        self.content = content
        self.requests = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.content is not None:
            return httpx.Response(self.status, content=self.content)
        return httpx.Response(self.status, json=self.payload)


def _query(path="post"):
    return build_query(path, dt.date(2025, 1, 1))


def _run(client, *queries, token="tok"):
    async def scenario():
        try:
            return [await client.run_report(q, token) for q in queries]
        finally:
            await client.aclose()

    return asyncio.run(scenario())


def test_posts_query_with_bearer_token():
    backend = Backend(payload={"rows": [{"dimensionValues": [{"value": "/post"}], "metricValues": [{"value": "4"}]}]})
    client = AnalyticsClient(URL, transport=httpx.MockTransport(backend))

    [report] = _run(client, _query())

    assert len(report.rows) == 1
    sent = backend.requests[0]
    assert sent.method == "POST"
    assert str(sent.url) == URL
    assert sent.headers["Authorization"] == "Bearer tok"
    body = json.loads(sent.content)
    assert body["dimensionFilter"]["filter"]["stringFilter"]["value"] == "post"
    assert body["dateRanges"] == [{"startDate": "2024-01-01", "endDate": "2025-01-02"}]


def test_identical_queries_share_one_upstream_call():
    backend = Backend()
    client = AnalyticsClient(URL, call_cache_ttl=60, transport=httpx.MockTransport(backend))

    _run(client, _query("Post"), _query(" post "), _query("other"))

    assert len(backend.requests) == 2


def test_cache_ignores_authorization_header():
    backend = Backend()
    transport = CachingTransport(httpx.MockTransport(backend), ttl=60)

    async def scenario():
        async with httpx.AsyncClient(transport=transport) as client:
            for token in ("a", "b"):
                await client.post(
                    URL,
                    json={"q": 1},
                    headers={"Authorization": f"Bearer {token}"},
                    extensions={"cache_ttl": 60},
                )

    asyncio.run(scenario())
    assert len(backend.requests) == 1


def test_requests_without_ttl_are_not_cached():
    backend = Backend()
    client = AnalyticsClient(URL, call_cache_ttl=0, transport=httpx.MockTransport(backend))

    _run(client, _query(), _query())

    assert len(backend.requests) == 2


def test_upstream_failure_is_raised_and_not_cached():
    backend = Backend(status=403, content=b'{"error": {"code": 403, "message": "denied"}}')
    client = AnalyticsClient(URL, transport=httpx.MockTransport(backend))

    async def scenario():
        try:
            for _ in range(2):
                with pytest.raises(UpstreamError) as info:
                    await client.run_report(_query(), "tok")
                assert info.value.upstream_status == 403
                assert "denied" in info.value.body
        finally:
            await client.aclose()

    asyncio.run(scenario())
    assert len(backend.requests) == 2


@pytest.mark.parametrize("content", [b"not json", b"[1, 2]"])
def test_malformed_payload_is_unexpected(content):
    client = AnalyticsClient(URL, transport=httpx.MockTransport(Backend(content=content)))
    with pytest.raises(UnexpectedError):
        _run(client, _query())
