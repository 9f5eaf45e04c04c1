"""Human readable abbreviations for view counts."""
from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal

_THOUSAND = 1_000
_MILLION = 1_000_000
_ONE_DECIMAL = Decimal("0.1")


def _abbreviate(value: float, suffix: str) -> str:
    if value % 1 == 0:
        return f"{value:.0f}{suffix}"
    # exact ties go up (1.25 -> 1.3), not to the even neighbour
    rounded = Decimal(value).quantize(_ONE_DECIMAL, rounding=ROUND_HALF_UP)
    return f"{rounded}{suffix}"


def format_number(num: int | float) -> str:
    """Abbreviate ``num`` for display on a badge.

    Values below one thousand are shown as truncated integers, larger values
    are divided down to ``K`` or ``M`` with at most one decimal digit::

        >>> format_number(1500)
        '1.5K'
        >>> format_number(-42)
        '-42'
    """
    sign = "-" if num < 0 else ""
    magnitude = abs(num)

    if magnitude < _THOUSAND:
        return f"{sign}{int(magnitude)}"
    if magnitude < _MILLION:
        return sign + _abbreviate(magnitude / _THOUSAND, "K")
    return sign + _abbreviate(magnitude / _MILLION, "M")
