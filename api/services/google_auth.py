"""
OAuth bearer tokens for the Google Analytics Data API.

Tokens are minted from the service-account key in the settings using
google-auth.  The credentials object is kept between requests so a still
valid token is reused; refreshing is a blocking HTTP call and runs in the
threadpool.
"""
from __future__ import annotations

import logging
import threading
from typing import Any, Dict, Optional, Protocol, Sequence

import google.auth.transport.requests
from google.auth.exceptions import GoogleAuthError
from google.oauth2 import service_account
from starlette.concurrency import run_in_threadpool

from ..config import ANALYTICS_SCOPES
from ..credentials import load_service_account_info

logger = logging.getLogger(__name__)


class TokenProvider(Protocol):
    async def get_token(self) -> Optional[str]: ...


class ServiceAccountTokenProvider:
    """Token provider backed by a Google service-account key."""

    def __init__(
        self,
        encoded_credentials: str,
        scopes: Sequence[str] = tuple(ANALYTICS_SCOPES),
    ) -> None:
        self._encoded = encoded_credentials
        self._scopes = list(scopes)
        self._credentials: Optional[service_account.Credentials] = None
        self._lock = threading.Lock()

    def _load(self) -> service_account.Credentials:
        if self._credentials is None:
            try:
                info: Dict[str, Any] = load_service_account_info(self._encoded)
                self._credentials = service_account.Credentials.from_service_account_info(
                    info, scopes=self._scopes
                )
            except Exception as exc:
                raise GoogleAuthError(f"unusable service account key: {exc}") from exc
        return self._credentials

    def _refresh(self) -> Optional[str]:
        with self._lock:
            credentials = self._load()
            if not credentials.valid:
                logger.debug("Refreshing analytics access token")
                credentials.refresh(google.auth.transport.requests.Request())
            return credentials.token

    async def get_token(self) -> Optional[str]:
        """Return a bearer token, or None when one cannot be obtained."""
        try:
            return await run_in_threadpool(self._refresh)
        except (GoogleAuthError, ValueError) as exc:
            logger.warning("Could not obtain analytics access token: %s", exc)
            return None
