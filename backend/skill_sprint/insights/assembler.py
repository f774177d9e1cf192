"""Compose every calculator into the insights payload served at /api/insights."""

from datetime import date

from skill_sprint.insights.feasibility import score_feasibility
from skill_sprint.insights.goals import summarize_goals
from skill_sprint.insights.portfolio import summarize_portfolio
from skill_sprint.insights.streaks import (
    build_log_chart,
    build_ritual_chart,
    calculate_streak,
    log_days,
    ritual_days,
)
from skill_sprint.insights.summary import build_weekly_breakdown, summarize_progress
from skill_sprint.insights.trend import reconstruct_progress_trend
from skill_sprint.schemas.roadmap import Roadmap
from skill_sprint.schemas.state import StateSnapshot

PORTFOLIO_ITEM_LIMIT = 12


def build_insights(state: StateSnapshot, roadmap: Roadmap, today: date | None = None) -> dict:
    """Derive all analytics for one (state, roadmap) pair.

    Pure: the state is only read, and two calls with the same inputs and the
    same ``today`` return equal payloads.
    """
    today = today or date.today()

    summary = summarize_progress(roadmap, state.progress)
    progress_series = reconstruct_progress_trend(
        state.progress_history, state.progress, summary["totalTasks"], today=today
    )
    portfolio = state.portfolio.to_document()

    return {
        "summary": summary,
        "weekly": build_weekly_breakdown(roadmap, state.progress),
        "charts": {
            "progress": progress_series,
            "ritual": build_ritual_chart(state.ritual),
            "log": build_log_chart(state.logs),
        },
        "streaks": {
            "ritual": calculate_streak(ritual_days(state.ritual), today=today),
            "log": calculate_streak(log_days(state.logs), today=today),
        },
        "portfolio": {
            "username": portfolio["username"],
            "lastSync": portfolio["lastSync"],
            "items": portfolio["items"][:PORTFOLIO_ITEM_LIMIT],
            "summary": summarize_portfolio(state.portfolio.items),
        },
        "goals": summarize_goals(state.custom_goals),
        "feasibility": score_feasibility(
            done=summary["done"],
            total_tasks=summary["totalTasks"],
            total_weeks=roadmap.total_weeks,
            start_date=state.start_date,
            trend=progress_series,
            ritual=state.ritual,
            goals=state.custom_goals,
            today=today,
        ),
    }
