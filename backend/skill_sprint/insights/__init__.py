"""Analytics derived from the roadmap and the user's state.

Every function here is synchronous and side-effect free; empty or short
histories degrade to zero / neutral values instead of raising.
"""

from skill_sprint.insights.assembler import build_insights
from skill_sprint.insights.feasibility import score_feasibility
from skill_sprint.insights.goals import summarize_goals
from skill_sprint.insights.portfolio import summarize_portfolio
from skill_sprint.insights.streaks import calculate_streak
from skill_sprint.insights.summary import build_weekly_breakdown, summarize_progress
from skill_sprint.insights.trend import reconstruct_progress_trend

__all__ = [
    "build_insights",
    "build_weekly_breakdown",
    "calculate_streak",
    "reconstruct_progress_trend",
    "score_feasibility",
    "summarize_goals",
    "summarize_portfolio",
    "summarize_progress",
]
