"""Feasibility score: is the current pace likely to finish the roadmap?

The score is an advisory 0-100 heuristic combining four sub-scores:

    progress  0.45  done ratio vs. the ratio expected from elapsed weeks
    velocity  0.20  completions over the last trend points, scaled to the plan
    ritual    0.20  mean daily ritual completion over the last 30 recorded days
    goals     0.15  share of custom goals finished

Missing signals fall back to neutral values instead of zero, so an empty
state is never scored as failing.
"""

from collections.abc import Mapping, Sequence
from datetime import date

from skill_sprint.insights.streaks import CHART_WINDOW, ritual_day_stats
from skill_sprint.insights.utils import clamp, parse_day, round_half_up
from skill_sprint.schemas.state import Goal, GoalStatus

WEIGHTS = {"progress": 0.45, "velocity": 0.20, "ritual": 0.20, "goals": 0.15}

ON_TRACK_THRESHOLD = 80
CAUTION_THRESHOLD = 55

# Score offset for a plan with no expected progress yet
UNSTARTED_OFFSET = 0.35
MIN_EXPECTED = 0.05
MAX_PROGRESS_SCORE = 1.2
VELOCITY_POINTS = 4
NEUTRAL_VELOCITY = 0.5
NEUTRAL_RITUAL = 0.5
NEUTRAL_GOALS = 0.6
CATCH_UP_GAP = 0.12


def elapsed_weeks(start_date: date | None, today: date) -> int:
    """1-based week index of ``today`` since ``start_date``; 0 before the start."""
    if start_date is None:
        return 0
    days = (today - start_date).days
    return max(0, days // 7 + 1)


def progress_score(done_ratio: float, expected: float) -> float:
    if expected > 0:
        return clamp(done_ratio / max(expected, MIN_EXPECTED), 0.0, MAX_PROGRESS_SCORE)
    return clamp(done_ratio + UNSTARTED_OFFSET, 0.0, 1.0)


def velocity_score(
    trend: Sequence[Mapping], total_tasks: int, total_weeks: int, weeks_elapsed: int
) -> float:
    """Recent completions relative to the pace the roadmap needs."""
    if total_tasks <= 0:
        return NEUTRAL_VELOCITY
    recent = list(trend[-VELOCITY_POINTS:])
    velocity = max(0, recent[-1]["done"] - recent[0]["done"]) if recent else 0
    return clamp((velocity / total_tasks) * (total_weeks / max(weeks_elapsed, 1)), 0.0, 1.0)


def ritual_score(ritual: Mapping[str, Mapping[str, bool]], window: int = CHART_WINDOW) -> float:
    days = sorted(key for key in ritual if parse_day(key) is not None)[-window:]
    if not days:
        return NEUTRAL_RITUAL
    ratios = []
    for key in days:
        completed, total = ritual_day_stats(ritual[key])
        ratios.append(completed / total if total else 0.0)
    return sum(ratios) / len(ratios)


def goal_score(goals: Sequence[Goal]) -> float:
    if not goals:
        return NEUTRAL_GOALS
    done = sum(1 for goal in goals if goal.status == GoalStatus.DONE)
    return done / len(goals)


def feasibility_status(score: int) -> str:
    if score >= ON_TRACK_THRESHOLD:
        return "on_track"
    if score >= CAUTION_THRESHOLD:
        return "caution"
    return "at_risk"


def _summary_text(
    status: str, gap: float, start_date: date | None, today: date
) -> str:
    if status == "on_track":
        return "You are keeping pace with the roadmap. Keep shipping one visible output a day."
    if start_date is None:
        return "No start date yet. Pick one so your pace can be measured against the calendar."
    if start_date > today:
        return (
            f"The roadmap starts on {start_date.isoformat()}. "
            "Use the runway to set up your tools and daily ritual."
        )
    if status == "caution":
        if gap > 0:
            return (
                f"About {round_half_up(gap * 100)}% behind the expected pace. "
                "Trim this week's scope and close the oldest open task first."
            )
        return "Progress is steady, but momentum and rituals could be stronger."
    return "The current pace puts the roadmap at risk. Restart with one small win today and re-plan the week."


def _recommendations(gap: float, ritual: float, goals: float) -> list[str]:
    tips = []
    if gap > CATCH_UP_GAP:
        tips.append(
            f"Catch up: you are {round_half_up(gap * 100)}% behind plan. "
            "Block two deep-work sessions for the oldest open tasks this week."
        )
    if ritual < 0.5:
        tips.append("Consistency: complete at least two ritual habits every day, even on busy days.")
    if goals < 0.4:
        tips.append("Goals: pick one custom goal and split it into milestones you can finish this week.")
    if not tips:
        tips.append("Steady pace. Keep the daily ritual and log one visible output per day.")
    return tips


def score_feasibility(
    *,
    done: int,
    total_tasks: int,
    total_weeks: int,
    start_date: date | None,
    trend: Sequence[Mapping],
    ritual: Mapping[str, Mapping[str, bool]],
    goals: Sequence[Goal],
    today: date | None = None,
) -> dict:
    """Combine the sub-scores into ``{score, status, summary, recommendations, ...}``.

    Args:
        done: Tasks currently done.
        total_tasks: Tasks in the roadmap.
        total_weeks: Weeks in the roadmap.
        start_date: Roadmap start, if the user set one.
        trend: Output of ``reconstruct_progress_trend``.
        ritual: Date -> habit flags map.
        goals: Custom goals.
        today: Reference date, defaults to the local date.
    """
    today = today or date.today()
    done_ratio = done / total_tasks if total_tasks > 0 else 0.0
    weeks = elapsed_weeks(start_date, today)
    expected = min(1.0, weeks / total_weeks) if total_weeks > 0 else 0.0

    components = {
        "progress": progress_score(done_ratio, expected),
        "velocity": velocity_score(trend, total_tasks, total_weeks, weeks),
        "ritual": ritual_score(ritual),
        "goals": goal_score(goals),
    }
    combined = clamp(sum(WEIGHTS[name] * value for name, value in components.items()), 0.0, 1.0)
    score = round_half_up(combined * 100)
    status = feasibility_status(score)
    gap = max(0.0, expected - done_ratio)

    return {
        "score": score,
        "status": status,
        "summary": _summary_text(status, gap, start_date, today),
        "recommendations": _recommendations(gap, components["ritual"], components["goals"]),
        "expectedProgress": round_half_up(expected * 100),
        "actualProgress": round_half_up(done_ratio * 100),
        "progressGap": round_half_up(gap * 100),
        "elapsedWeeks": weeks,
        "totalWeeks": total_weeks,
        "components": {name: round(value, 2) for name, value in components.items()},
    }
