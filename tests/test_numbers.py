"""
Unit tests for the badge number formatter.
"""
import pytest

from pageviews.numbers import format_number


@pytest.mark.parametrize(
    "value, expected",
    [
        (0, "0"),
        (7, "7"),
        (999, "999"),
        (1000, "1K"),
        (1500, "1.5K"),
        (12345, "12.3K"),
        (-2500, "-2.5K"),
        (1_000_000, "1M"),
        (2_500_000, "2.5M"),
        (-42, "-42"),
        (1250, "1.3K"),
        (2250, "2.3K"),
        (-1250, "-1.3K"),
        (1_250_000, "1.3M"),
        (1049, "1.0K"),
    ],
)
def test_format_number(value, expected):
    assert format_number(value) == expected


def test_fractions_below_thousand_are_truncated():
    assert format_number(12.9) == "12"
    assert format_number(-12.9) == "-12"


def test_negative_is_prefixed_positive():
    for n in (1, 42, 999, 1000, 1049, 98_765, 1_000_001, 3_333_333_333):
        assert format_number(-n) == "-" + format_number(n)


def test_ties_round_up_not_to_even():
    assert format_number(1250) == "1.3K"
    assert format_number(3_450_000) == "3.5M"
    # 1.45 is stored just below the tie, so it stays down
    assert format_number(1450) == "1.4K"
