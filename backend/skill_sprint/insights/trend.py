"""Cumulative "done" time series rebuilt from the progress history.

The history is the only durable record of *when* a task was completed, so the
series is derived by replaying it rather than stored pre-aggregated. Events are
ordered by timestamp; events sharing a timestamp keep their position in the
stored history (stable sort).
"""

from collections.abc import Iterable, Mapping
from datetime import date, timezone

from skill_sprint.core.logging import get_logger
from skill_sprint.schemas.state import ProgressEvent

logger = get_logger(__name__)

TREND_WINDOW = 60


def reconstruct_progress_trend(
    history: Iterable[ProgressEvent],
    progress: Mapping[str, str],
    total_tasks: int,
    today: date | None = None,
    window: int = TREND_WINDOW,
) -> list[dict]:
    """Replay status changes into one point per calendar day.

    Args:
        history: Progress events in storage order (not necessarily sorted).
        progress: Current task status map, used only when the history is empty.
        total_tasks: Roadmap task count, copied into every point.
        today: Date of the synthesized point when there is no history.
        window: Number of most recent days to keep.

    Returns:
        ``[{date, done, total}, ...]`` ascending by date.
    """
    events = sorted(history, key=lambda event: event.timestamp)

    if not events:
        done_now = sum(1 for status in progress.values() if status == "done")
        if done_now == 0:
            return []
        day = today or date.today()
        return [{"date": day.isoformat(), "done": done_now, "total": total_tasks}]

    done_tasks: set[str] = set()
    buckets: dict[date, dict] = {}
    for event in events:
        if event.to_status == "done":
            done_tasks.add(event.task_id)
        else:
            # the event's own "from" is not trusted; only "to" moves state
            done_tasks.discard(event.task_id)
        day = event.timestamp.astimezone(timezone.utc).date()
        buckets[day] = {"date": day.isoformat(), "done": len(done_tasks), "total": total_tasks}

    series = [buckets[day] for day in sorted(buckets)]
    if len(series) > window:
        logger.debug("Trimming progress trend", days=len(series), window=window)
    return series[-window:]
