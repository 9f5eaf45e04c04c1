"""
Configuration and settings for the page-view badge service.

The settings are loaded from environment variables using pydantic-settings.
Two secrets are required: the base64-encoded service-account key and the
Google Analytics property the reports are read from.
"""
from __future__ import annotations

from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from pageviews.query import DEFAULT_START_DATE

ANALYTICS_SCOPES = ["https://www.googleapis.com/auth/analytics.readonly"]


class Settings(BaseSettings):
    """Application settings loaded from environment variables or a .env file."""

    # Secrets
    service_account_credentials: str = Field(alias="SERVICE_ACCOUNT_CREDENTIALS")
    ga_property_id: str = Field(alias="GA_PROPERTY_ID")

    # Analytics Data API
    analytics_api_base: str = Field(
        default="https://analyticsdata.googleapis.com/v1beta",
        alias="ANALYTICS_API_BASE",
    )
    analytics_start_date: str = Field(
        default=DEFAULT_START_DATE, alias="ANALYTICS_START_DATE"
    )
    # Upper bound for a single runReport call; None waits indefinitely.
    analytics_timeout_seconds: Optional[float] = Field(
        default=30.0, alias="ANALYTICS_TIMEOUT_SECONDS"
    )

    # Cache lifetimes.  Both default to 45 minutes but are tuned independently.
    image_cache_seconds: int = Field(default=45 * 60, alias="IMAGE_CACHE_SECONDS")
    google_call_cache_ttl_seconds: int = Field(
        default=45 * 60, alias="GOOGLE_CALL_CACHE_TTL_SECONDS"
    )
    cache_max_entries: int = Field(default=1024, alias="CACHE_MAX_ENTRIES")

    badge_label: str = Field(default="readers", alias="BADGE_LABEL")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    @field_validator("log_level", mode="after")
    @classmethod
    def _normalize_log_level(cls, v: str) -> str:
        level = (v or "INFO").upper()
        valid = {"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG", "NOTSET"}
        if level not in valid:
            raise ValueError(f"LOG_LEVEL must be one of {sorted(valid)}")
        return level

    @property
    def property_resource(self) -> str:
        """Property id in ``properties/<id>`` form, as the API expects."""
        prop = self.ga_property_id.strip().strip("/")
        return prop if prop.startswith("properties/") else f"properties/{prop}"

    @property
    def run_report_url(self) -> str:
        return f"{self.analytics_api_base.rstrip('/')}/{self.property_resource}:runReport"


settings = Settings()
