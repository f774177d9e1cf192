"""Tests for streaks and the ritual / log charts."""

from datetime import date, timedelta

from skill_sprint.insights import calculate_streak
from skill_sprint.insights.streaks import (
    build_log_chart,
    build_ritual_chart,
    log_days,
    ritual_day_stats,
    ritual_days,
)

TODAY = date(2026, 3, 16)


def _days_ago(*offsets):
    return [TODAY - timedelta(days=n) for n in offsets]


class TestCalculateStreak:
    def test_empty(self):
        assert calculate_streak([], today=TODAY) == {"current": 0, "longest": 0}

    def test_current_run_and_isolated_day(self):
        """Today plus the two days before, and a lone day further back."""
        assert calculate_streak(_days_ago(0, 1, 2, 5), today=TODAY) == {
            "current": 3,
            "longest": 3,
        }

    def test_today_missing_resets_current(self):
        result = calculate_streak(_days_ago(1, 2, 3), today=TODAY)
        assert result == {"current": 0, "longest": 3}

    def test_longest_can_be_in_the_past(self):
        result = calculate_streak(_days_ago(0, 10, 11, 12, 13), today=TODAY)
        assert result == {"current": 1, "longest": 4}

    def test_duplicates_are_ignored(self):
        result = calculate_streak(_days_ago(0, 0, 1, 1), today=TODAY)
        assert result == {"current": 2, "longest": 2}


class TestQualifyingDays:
    def test_ritual_needs_one_checked_habit(self):
        ritual = {
            "2026-03-14": {"review": False, "deep": False},
            "2026-03-15": {"review": True},
            "not-a-date": {"review": True},
        }
        assert ritual_days(ritual) == [date(2026, 3, 15)]

    def test_log_needs_text(self):
        logs = {"2026-03-14": "   ", "2026-03-15": "learned joins", "bad": "text"}
        assert log_days(logs) == [date(2026, 3, 15)]


class TestRitualStats:
    def test_default_habits_count_when_missing(self):
        assert ritual_day_stats({"review": True}) == (1, 4)

    def test_extra_habit_extends_total(self):
        assert ritual_day_stats({"review": True, "deep": True, "stretch": True}) == (3, 5)


class TestCharts:
    def test_ritual_chart_sorted(self):
        chart = build_ritual_chart(
            {
                "2026-03-15": {"review": True, "deep": True},
                "2026-03-14": {"micro": True},
            }
        )
        assert chart == [
            {"date": "2026-03-14", "completed": 1, "total": 4},
            {"date": "2026-03-15", "completed": 2, "total": 4},
        ]

    def test_ritual_chart_window(self):
        ritual = {
            (TODAY - timedelta(days=n)).isoformat(): {"review": True} for n in range(40)
        }
        chart = build_ritual_chart(ritual)
        assert len(chart) == 30
        assert chart[-1]["date"] == TODAY.isoformat()

    def test_log_chart_counts_characters(self):
        chart = build_log_chart({"2026-03-15": "  abc  ", "2026-03-14": ""})
        assert chart == [{"date": "2026-03-15", "characters": 3}]
