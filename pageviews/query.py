"""
Query construction for the analytics ``runReport`` endpoint.

A :class:`MetricQuery` describes the single report this service ever asks
for: screen page views grouped by page path, filtered to paths containing the
requested fragment.
"""
from __future__ import annotations

import datetime as dt
from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterable, Optional, Tuple

from .errors import InvalidInput, MissingParameter

# Day the site started reporting; nothing older exists in the property.
DEFAULT_START_DATE = "2024-01-01"

PAGE_PATH_PARAM = "page_path"
PAGE_PATH_DIMENSION = "pagePath"
PAGE_VIEWS_METRIC = "screenPageViews"


class MatchType(str, Enum):
    EXACT = "EXACT"
    BEGINS_WITH = "BEGINS_WITH"
    ENDS_WITH = "ENDS_WITH"
    CONTAINS = "CONTAINS"


@dataclass(frozen=True)
class MetricQuery:
    start_date: str
    end_date: str
    filter_value: str
    dimension_name: str = PAGE_PATH_DIMENSION
    metric_name: str = PAGE_VIEWS_METRIC
    match_type: MatchType = MatchType.CONTAINS

    def to_request_body(self) -> dict[str, Any]:
        """Encode the query as a ``runReport`` JSON body."""
        return {
            "dateRanges": [
                {"startDate": self.start_date, "endDate": self.end_date}
            ],
            "dimensions": [{"name": self.dimension_name}],
            "dimensionFilter": {
                "filter": {
                    "fieldName": self.dimension_name,
                    "stringFilter": {
                        "matchType": self.match_type.value,
                        "value": self.filter_value,
                    },
                }
            },
            "metrics": [{"name": self.metric_name}],
        }


def tomorrow(today: dt.date) -> str:
    """Return the day after ``today`` as ``YYYY-MM-DD``.

    Ending the range a day late absorbs timezone skew at the backend so that
    today's traffic is always included.
    """
    return (today + dt.timedelta(days=1)).isoformat()


def normalize_page_path(page_path: Optional[str]) -> str:
    value = (page_path or "").strip().lower()
    if not value:
        raise InvalidInput("page_path must not be empty")
    return value


def build_query(
    page_path: Optional[str],
    today: dt.date,
    start_date: str = DEFAULT_START_DATE,
) -> MetricQuery:
    """Build the page-view query for ``page_path`` as of ``today`` (UTC)."""
    return MetricQuery(
        start_date=start_date,
        end_date=tomorrow(today),
        filter_value=normalize_page_path(page_path),
    )


def find_page_path(items: Iterable[Tuple[str, str]]) -> str:
    """Pick the ``page_path`` value out of raw query string pairs.

    Keys are compared after trimming and lower-casing so ``?Page_Path=`` is
    accepted too.  The first match wins.  Raises :class:`MissingParameter`
    when there is no usable value.
    """
    for key, value in items:
        if (key or "").strip().lower() == PAGE_PATH_PARAM:
            if value and value.strip():
                return value
            break
    raise MissingParameter()
