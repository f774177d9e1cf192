"""Consecutive-day streaks and the per-day ritual / log series."""

from collections.abc import Iterable, Mapping
from datetime import date, timedelta

from skill_sprint.insights.utils import parse_day
from skill_sprint.schemas.state import DEFAULT_HABITS

CHART_WINDOW = 30


def calculate_streak(days: Iterable[date], today: date | None = None) -> dict:
    """Current and longest run of consecutive qualifying days.

    The current streak counts back from ``today``; it is 0 when today itself
    does not qualify.
    """
    qualifying = set(days)
    if not qualifying:
        return {"current": 0, "longest": 0}

    cursor = today or date.today()
    current = 0
    while cursor in qualifying:
        current += 1
        cursor -= timedelta(days=1)

    longest = 0
    run = 0
    previous: date | None = None
    for day in sorted(qualifying):
        if previous is not None and (day - previous).days == 1:
            run += 1
        else:
            run = 1
        longest = max(longest, run)
        previous = day

    return {"current": current, "longest": longest}


def ritual_days(ritual: Mapping[str, Mapping[str, bool]]) -> list[date]:
    """Days with at least one habit checked."""
    days = []
    for key, habits in ritual.items():
        day = parse_day(key)
        if day is not None and any(habits.values()):
            days.append(day)
    return days


def log_days(logs: Mapping[str, str]) -> list[date]:
    days = []
    for key, text in logs.items():
        day = parse_day(key)
        if day is not None and text and text.strip():
            days.append(day)
    return days


def ritual_day_stats(habits: Mapping[str, bool]) -> tuple[int, int]:
    """(completed, total) for one day.

    Total is the default habit set plus any extra habit recorded that day, so an
    untouched default habit counts as missed rather than absent.
    """
    names = set(DEFAULT_HABITS) | set(habits)
    completed = sum(1 for name in names if habits.get(name))
    return completed, len(names)


def build_ritual_chart(
    ritual: Mapping[str, Mapping[str, bool]], window: int = CHART_WINDOW
) -> list[dict]:
    """Last ``window`` recorded ritual days, ascending."""
    entries = []
    for key in sorted(ritual):
        day = parse_day(key)
        if day is None:
            continue
        completed, total = ritual_day_stats(ritual[key])
        entries.append({"date": day.isoformat(), "completed": completed, "total": total})
    return entries[-window:]


def build_log_chart(logs: Mapping[str, str], window: int = CHART_WINDOW) -> list[dict]:
    entries = []
    for key in sorted(logs):
        day = parse_day(key)
        text = (logs[key] or "").strip()
        if day is None or not text:
            continue
        entries.append({"date": day.isoformat(), "characters": len(text)})
    return entries[-window:]
