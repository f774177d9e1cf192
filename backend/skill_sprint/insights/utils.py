"""Small numeric and calendar helpers shared by the insight calculators."""

import math
import re
from datetime import date

# a calendar date, optionally followed by a time of day and UTC offset
_ISO_DATE_RE = re.compile(
    r"\d{4}-\d{2}-\d{2}"
    r"(?:[T ]\d{2}:\d{2}(?::\d{2}(?:\.\d+)?)?(?:Z|[+-]\d{2}:?\d{2})?)?"
)


def clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def round_half_up(value: float) -> int:
    """Round .5 away from zero for non-negative values (``round`` is banker's)."""
    return int(math.floor(value + 0.5))


def percent(part: int, whole: int) -> int:
    """Integer percentage, 0 when ``whole`` is 0."""
    if whole <= 0:
        return 0
    return round_half_up(part / whole * 100)


def parse_day(key: str) -> date | None:
    """Parse a ``YYYY-MM-DD`` key; None for anything else."""
    try:
        return date.fromisoformat(key[:10])
    except (TypeError, ValueError):
        return None


def parse_iso_date(value: str) -> date:
    """Date part of an ISO date or datetime string; ValueError on trailing junk."""
    if not _ISO_DATE_RE.fullmatch(value.strip()):
        raise ValueError(f"Not an ISO date: {value!r}")
    return date.fromisoformat(value.strip()[:10])
