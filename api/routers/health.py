"""
Healthcheck endpoints.

`/api/health` returns 200 OK if the app is up.
`/api/health/details` reports whether the analytics settings look usable
without calling the backend.
"""
from __future__ import annotations

from fastapi import APIRouter, HTTPException, status

from ..config import settings
from ..credentials import load_service_account_info

router = APIRouter(prefix="/api", tags=["health"])


@router.get("/health")
def health():
    """Liveness probe."""
    return {"status": "ok"}


@router.get("/health/details")
def health_details():
    """Extended health with individual configuration flags."""
    try:
        info = load_service_account_info(settings.service_account_credentials)
        credentials_ok = bool(info.get("client_email")) and bool(info.get("private_key"))
    except ValueError:
        credentials_ok = False

    property_ok = bool(settings.ga_property_id.strip())
    payload = {
        "credentials": credentials_ok,
        "property": property_ok,
        "status": "ok" if (credentials_ok and property_ok) else "degraded",
    }
    if credentials_ok and property_ok:
        return payload
    raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=payload)
