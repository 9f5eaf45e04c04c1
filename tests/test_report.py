"""
Tests for report parsing and aggregation.

Malformed rows and cells must degrade to zero/absent instead of failing the
request.
"""
import pytest

from pageviews.errors import UnexpectedError
from pageviews.report import aggregate_report, parse_metric, parse_report


def _row(paths, views):
    return {
        "dimensionValues": [{"value": p} for p in paths],
        "metricValues": [{"value": v} for v in views],
    }


def test_sums_all_rows_and_collects_paths_in_order():
    report = parse_report(
        {
            "rows": [_row(["/blog/post"], ["42"]), _row(["/blog/post-2"], ["8"])],
            "rowCount": 2,
            "kind": "analyticsData#runReport",
        }
    )
    result = aggregate_report(report)
    assert result.total_count == 50
    assert result.dimension_values == ("/blog/post", "/blog/post-2")


def test_empty_report_is_zero():
    for payload in ({}, {"rows": []}, {"rows": None}):
        result = aggregate_report(parse_report(payload))
        assert result.total_count == 0
        assert result.dimension_values == ()


def test_non_numeric_metric_counts_as_zero():
    report = parse_report({"rows": [_row(["/a"], ["abc"]), _row(["/b"], ["5", ""])]})
    assert aggregate_report(report).total_count == 5


def test_malformed_cells_and_rows_are_skipped():
    report = parse_report(
        {
            "rows": [
                "not-a-row",
                {"dimensionValues": "nope", "metricValues": [{"value": 3}, 7, {}]},
                {"dimensionValues": [{"value": None}, {"value": "/ok"}]},
            ]
        }
    )
    result = aggregate_report(report)
    assert result.total_count == 3
    assert result.dimension_values == ("/ok",)


def test_non_object_payload_is_unexpected():
    with pytest.raises(UnexpectedError):
        parse_report(["rows"])


@pytest.mark.parametrize(
    "cell, expected",
    [(" 12 ", 12), ("-3", -3), ("+4", 4), ("1_000", 0), ("５", 0), ("12abc", 0), ("1.5", 0), (None, 0)],
)
def test_parse_metric_accepts_only_plain_decimals(cell, expected):
    assert parse_metric(cell) == expected
