import asyncio

from pageviews.cache import CachedResponse, TTLResponseCache, request_key


class FakeClock:
    def __init__(self) -> None:
        self.now = 1000.0

    def __call__(self) -> float:
        return self.now


def _entry(cache_control: str, body: bytes = b"<svg/>") -> CachedResponse:
    return CachedResponse(
        body=body,
        headers={"Content-Type": "image/svg+xml", "Cache-Control": cache_control},
    )


def test_max_age_parsing():
    assert _entry("public, max-age=2700").max_age == 2700
    assert _entry("max-age=60, public").max_age == 60
    assert _entry("public").max_age == 0
    assert _entry("no-store, max-age=60").max_age == 0
    assert CachedResponse(body=b"").max_age == 0


def test_request_key_includes_method_and_query():
    a = request_key("get", "http://h/?page_path=a")
    b = request_key("GET", "http://h/?page_path=b")
    assert a == "GET http://h/?page_path=a"
    assert a != b


def test_entries_expire_after_their_max_age():
    clock = FakeClock()
    cache = TTLResponseCache(maxsize=8, timer=clock)
    entry = _entry("public, max-age=60")

    async def scenario():
        await cache.put("k", entry)
        clock.now += 59
        first = await cache.get("k")
        clock.now += 2
        second = await cache.get("k")
        return first, second

    first, second = asyncio.run(scenario())
    assert first is entry
    assert second is None


def test_uncacheable_entries_are_not_stored_and_writes_overwrite():
    cache = TTLResponseCache(maxsize=8)

    async def scenario():
        await cache.put("k", _entry("no-store"))
        missing = await cache.get("k")
        await cache.put("k", _entry("max-age=60", b"old"))
        await cache.put("k", _entry("max-age=60", b"new"))
        return missing, await cache.get("k")

    missing, latest = asyncio.run(scenario())
    assert missing is None
    assert latest.body == b"new"
    assert len(cache) == 1


def test_to_response_replays_body_and_headers():
    response = _entry("public, max-age=60", b"<svg>1</svg>").to_response()
    assert response.status_code == 200
    assert response.body == b"<svg>1</svg>"
    assert response.headers["cache-control"] == "public, max-age=60"
    assert response.headers["content-type"] == "image/svg+xml"
