"""
Response cache used in front of the badge pipeline.

The orchestrator only depends on the :class:`ResponseCache` protocol so a
shared store (Redis, a CDN cache API, ...) can be swapped in.  The default
:class:`TTLResponseCache` keeps entries in process memory and honours the
``max-age`` each response advertises in its ``Cache-Control`` header, the way
an HTTP cache would.
"""
from __future__ import annotations

import re
import threading
import time
from dataclasses import dataclass, field
from typing import Callable, Dict, Optional, Protocol

from cachetools import TLRUCache
from starlette.responses import Response

_MAX_AGE = re.compile(r"(?:^|[,\s])max-age\s*=\s*(\d+)", re.IGNORECASE)
_NO_STORE = re.compile(r"(?:^|[,\s])(no-store|private)(?:$|[,\s])", re.IGNORECASE)


def request_key(method: str, url: str) -> str:
    """Identity of a request for caching: method plus the full URL."""
    return f"{method.upper()} {url}"


@dataclass(frozen=True)
class CachedResponse:
    body: bytes
    headers: Dict[str, str] = field(default_factory=dict)
    status_code: int = 200

    def header(self, name: str) -> Optional[str]:
        wanted = name.lower()
        for key, value in self.headers.items():
            if key.lower() == wanted:
                return value
        return None

    @property
    def max_age(self) -> int:
        """Seconds this response may be served from cache (0 = not cacheable)."""
        cache_control = self.header("cache-control") or ""
        if _NO_STORE.search(cache_control):
            return 0
        match = _MAX_AGE.search(cache_control)
        return int(match.group(1)) if match else 0

    def to_response(self) -> Response:
        return Response(
            content=self.body, status_code=self.status_code, headers=dict(self.headers)
        )


class ResponseCache(Protocol):
    async def get(self, key: str) -> Optional[CachedResponse]: ...
    async def put(self, key: str, entry: CachedResponse) -> None: ...


class TTLResponseCache:
    """In-memory response cache; entries expire after their own ``max-age``.

    Writes for the same key are last-write-wins.  Responses without a positive
    ``max-age`` are never stored.
    """

    def __init__(self, maxsize: int = 1024, timer: Callable[[], float] = time.monotonic):
        self._entries: TLRUCache = TLRUCache(
            maxsize=maxsize, ttu=self._expires_at, timer=timer
        )
        self._lock = threading.Lock()

    @staticmethod
    def _expires_at(_key: str, entry: CachedResponse, now: float) -> float:
        return now + entry.max_age

    async def get(self, key: str) -> Optional[CachedResponse]:
        with self._lock:
            return self._entries.get(key)

    async def put(self, key: str, entry: CachedResponse) -> None:
        if entry.max_age <= 0:
            return
        with self._lock:
            self._entries[key] = entry

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
