"""
FastAPI dependency functions.

The badge service and its collaborators (response cache, token provider,
analytics client) are process-wide and built lazily on first use.  Tests
replace them through `app.dependency_overrides[get_badge_service]`.
"""
from __future__ import annotations

from typing import Optional

from pageviews.cache import TTLResponseCache
from .config import Settings, settings
from .services.analytics import AnalyticsClient
from .services.badge import BadgeService
from .services.google_auth import ServiceAccountTokenProvider

_service: Optional[BadgeService] = None
_analytics: Optional[AnalyticsClient] = None


def build_badge_service(cfg: Settings, analytics: AnalyticsClient) -> BadgeService:
    return BadgeService(
        cache=TTLResponseCache(maxsize=cfg.cache_max_entries),
        tokens=ServiceAccountTokenProvider(cfg.service_account_credentials),
        reports=analytics,
        label=cfg.badge_label,
        image_cache_seconds=cfg.image_cache_seconds,
        start_date=cfg.analytics_start_date,
    )


def get_badge_service() -> BadgeService:
    global _service, _analytics
    if _service is None:
        _analytics = AnalyticsClient(
            settings.run_report_url,
            call_cache_ttl=settings.google_call_cache_ttl_seconds,
            timeout=settings.analytics_timeout_seconds,
            cache_maxsize=settings.cache_max_entries,
        )
        _service = build_badge_service(settings, _analytics)
    return _service


async def close_badge_service() -> None:
    """Release the analytics HTTP client; called on application shutdown."""
    global _service, _analytics
    if _analytics is not None:
        await _analytics.aclose()
    _service = None
    _analytics = None
