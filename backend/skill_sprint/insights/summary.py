"""Task counts over the whole roadmap and per week."""

from collections.abc import Mapping

from skill_sprint.insights.utils import percent
from skill_sprint.schemas.roadmap import Roadmap


def summarize_progress(roadmap: Roadmap, progress: Mapping[str, str]) -> dict:
    """Count done/snoozed/todo tasks across every week of every phase.

    Returns:
        ``{totalTasks, done, snoozed, todo, completionRate}``; completionRate is
        an integer percentage.
    """
    total = done = snoozed = 0
    for _, _, task in roadmap.iter_tasks():
        total += 1
        status = progress.get(task.id)
        if status == "done":
            done += 1
        elif status == "snoozed":
            snoozed += 1

    return {
        "totalTasks": total,
        "done": done,
        "snoozed": snoozed,
        "todo": total - done - snoozed,
        "completionRate": percent(done, total),
    }


def build_weekly_breakdown(roadmap: Roadmap, progress: Mapping[str, str]) -> list[dict]:
    """Per-week completion in roadmap order."""
    weekly = []
    for phase, week in roadmap.iter_weeks():
        statuses = [progress.get(task.id) for task in week.tasks]
        total = len(statuses)
        done = statuses.count("done")
        weekly.append(
            {
                "phase": phase.title,
                "week": week.number,
                "theme": week.theme,
                "total": total,
                "done": done,
                "snoozed": statuses.count("snoozed"),
                "percent": percent(done, total),
            }
        )
    return weekly
