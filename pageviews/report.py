"""
Typed view of a ``runReport`` response and the aggregation over it.

The backend returns rows of dimension and metric cells, each cell an object
with a string ``value``.  Parsing is deliberately forgiving at the field
level: a row or cell that does not have the expected shape is dropped or read
as zero instead of failing the request.  Only a payload that is not a JSON
object at all is rejected.
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .errors import UnexpectedError

_DECIMAL = re.compile(r"[+-]?[0-9]+")


def _objects_only(value: Any) -> list:
    if not isinstance(value, list):
        return []
    return [item for item in value if isinstance(item, dict)]


class Cell(BaseModel):
    model_config = ConfigDict(extra="ignore")

    value: Optional[str] = None

    @field_validator("value", mode="before")
    @classmethod
    def _stringify(cls, v: Any) -> Optional[str]:
        if v is None or isinstance(v, str):
            return v
        if isinstance(v, (int, float)) and not isinstance(v, bool):
            return str(v)
        return None


class ReportRow(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    dimension_values: List[Cell] = Field(default_factory=list, alias="dimensionValues")
    metric_values: List[Cell] = Field(default_factory=list, alias="metricValues")

    @field_validator("dimension_values", "metric_values", mode="before")
    @classmethod
    def _cells(cls, v: Any) -> list:
        return _objects_only(v)


class Report(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    rows: List[ReportRow] = Field(default_factory=list)
    row_count: Optional[int] = Field(default=None, alias="rowCount")
    kind: Optional[str] = None

    @field_validator("rows", mode="before")
    @classmethod
    def _rows(cls, v: Any) -> list:
        return _objects_only(v)

    @field_validator("row_count", mode="before")
    @classmethod
    def _row_count(cls, v: Any) -> Optional[int]:
        return v if isinstance(v, int) and not isinstance(v, bool) else None

    @field_validator("kind", mode="before")
    @classmethod
    def _kind(cls, v: Any) -> Optional[str]:
        return v if isinstance(v, str) else None


@dataclass(frozen=True)
class AggregatedResult:
    total_count: int
    dimension_values: Tuple[str, ...] = ()


def parse_report(payload: Any) -> Report:
    """Validate a decoded JSON payload into a :class:`Report`."""
    if not isinstance(payload, dict):
        raise UnexpectedError(
            f"analytics response is not an object: {type(payload).__name__}"
        )
    try:
        return Report.model_validate(payload)
    except ValidationError as exc:  # pragma: no cover - validators are total
        raise UnexpectedError(f"malformed analytics response: {exc}") from exc


def parse_metric(value: Optional[str]) -> int:
    """Read a decimal metric cell; anything unparsable counts as zero."""
    if value is None:
        return 0
    text = value.strip()
    if not _DECIMAL.fullmatch(text):
        return 0
    return int(text, 10)


def aggregate_report(report: Report) -> AggregatedResult:
    """Sum every metric cell and collect every dimension value, in row order."""
    total = 0
    dimensions: List[str] = []
    for row in report.rows:
        total += sum(parse_metric(cell.value) for cell in row.metric_values)
        dimensions.extend(
            cell.value for cell in row.dimension_values if cell.value is not None
        )
    return AggregatedResult(total_count=total, dimension_values=tuple(dimensions))
