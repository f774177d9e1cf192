"""Custom goal aggregate."""

from collections import Counter
from collections.abc import Sequence

from skill_sprint.insights.utils import round_half_up
from skill_sprint.schemas.state import Goal, GoalStatus

TOP_FOCUS_AREAS = 6
UPCOMING_LIMIT = 4


def _effective_progress(goal: Goal) -> int:
    if goal.progress is not None:
        return goal.progress
    return 100 if goal.status == GoalStatus.DONE else 0


def summarize_goals(goals: Sequence[Goal]) -> dict:
    """Count goals by status, average progress, focus areas and next deadlines.

    A finished goal without a reported progress value counts as 100% in the
    average.
    """
    if not goals:
        return {
            "total": 0,
            "done": 0,
            "inProgress": 0,
            "todo": 0,
            "averageProgress": 0,
            "focusAreas": [],
            "upcoming": [],
        }

    by_status = Counter(goal.status for goal in goals)
    average = sum(_effective_progress(goal) for goal in goals) / len(goals)

    # Counter.most_common keeps first-seen order among equal counts
    focus = Counter(goal.focus_area.strip() for goal in goals if goal.focus_area.strip())

    pending = [
        goal for goal in goals if goal.target_date is not None and goal.status != GoalStatus.DONE
    ]
    pending.sort(key=lambda goal: goal.target_date)

    return {
        "total": len(goals),
        "done": by_status[GoalStatus.DONE],
        "inProgress": by_status[GoalStatus.IN_PROGRESS],
        "todo": by_status[GoalStatus.TODO],
        "averageProgress": round_half_up(average),
        "focusAreas": [
            {"focusArea": area, "count": count}
            for area, count in focus.most_common(TOP_FOCUS_AREAS)
        ],
        "upcoming": [
            {
                "id": goal.id,
                "title": goal.title,
                "targetDate": goal.target_date.isoformat(),
                "status": goal.status.value,
                "progress": _effective_progress(goal),
            }
            for goal in pending[:UPCOMING_LIMIT]
        ],
    }
