"""Custom goal mutations.

``apply_goal_action`` never mutates its input; it returns a new goal list that
the caller persists with ``state_service.update_goals``.
"""

import uuid
from datetime import date, datetime, timezone
from typing import Any

from skill_sprint.core.logging import get_logger
from skill_sprint.insights.utils import parse_iso_date, percent
from skill_sprint.schemas.goal import GoalAction
from skill_sprint.schemas.state import Goal, GoalMilestone, GoalStatus

logger = get_logger(__name__)

TITLE_MAX_LENGTH = 120
TEXT_MAX_LENGTH = 2000


class GoalActionError(ValueError):
    """The goal action or its payload is invalid."""


class GoalNotFoundError(GoalActionError):
    pass


def _new_id(prefix: str) -> str:
    return f"{prefix}-{uuid.uuid4().hex[:10]}"


def _text(value: Any, limit: int = TEXT_MAX_LENGTH) -> str:
    return value.strip()[:limit] if isinstance(value, str) else ""


def _title(value: Any) -> str:
    title = _text(value, TITLE_MAX_LENGTH)
    if not title:
        raise GoalActionError("Goal title is required")
    return title


def _target_date(value: Any) -> date | None:
    if value in (None, ""):
        return None
    if isinstance(value, str):
        try:
            return parse_iso_date(value)
        except ValueError:
            pass
    raise GoalActionError("targetDate must be an ISO date string or null")


def _status(value: Any) -> GoalStatus:
    try:
        return GoalStatus(value)
    except ValueError as e:
        raise GoalActionError(f"Unknown goal status: {value}") from e


def _progress(value: Any) -> int | None:
    if value is None:
        return None
    try:
        return min(max(int(value), 0), 100)
    except (TypeError, ValueError) as e:
        raise GoalActionError("progress must be a number between 0 and 100") from e


def _milestones(value: Any) -> list[GoalMilestone]:
    if not isinstance(value, list):
        return []
    milestones = []
    for entry in value:
        if isinstance(entry, str):
            label, done = entry, False
        elif isinstance(entry, dict):
            label, done = entry.get("label"), bool(entry.get("done"))
        else:
            continue
        label = _text(label, TITLE_MAX_LENGTH)
        if label:
            milestones.append(GoalMilestone(id=_new_id("ms"), label=label, done=done))
    return milestones


def _index_of(goals: list[Goal], goal_id: Any) -> int:
    for index, goal in enumerate(goals):
        if goal.id == goal_id:
            return index
    raise GoalNotFoundError(f"Goal {goal_id} not found")


def _add(goals: list[Goal], payload: dict, now: datetime) -> list[Goal]:
    status = _status(payload.get("status", GoalStatus.TODO))
    goal = Goal(
        id=_new_id("goal"),
        title=_title(payload.get("title")),
        description=_text(payload.get("description")),
        focus_area=_text(payload.get("focusArea"), TITLE_MAX_LENGTH),
        target_date=_target_date(payload.get("targetDate")),
        metric=_text(payload.get("metric"), TITLE_MAX_LENGTH),
        status=status,
        progress=_progress(payload.get("progress")),
        milestones=_milestones(payload.get("milestones")),
        created_at=now,
        updated_at=now,
        notes=_text(payload.get("notes")),
    )
    logger.info("Goal added", goal_id=goal.id)
    return [*goals, goal]


def _update(goals: list[Goal], payload: dict, now: datetime) -> list[Goal]:
    index = _index_of(goals, payload.get("id"))
    goal = goals[index]
    changes: dict[str, Any] = {"updated_at": now}

    if "title" in payload:
        changes["title"] = _title(payload["title"])
    for key, attr, limit in (
        ("description", "description", TEXT_MAX_LENGTH),
        ("focusArea", "focus_area", TITLE_MAX_LENGTH),
        ("metric", "metric", TITLE_MAX_LENGTH),
        ("notes", "notes", TEXT_MAX_LENGTH),
    ):
        if key in payload:
            changes[attr] = _text(payload[key], limit)
    if "targetDate" in payload:
        changes["target_date"] = _target_date(payload["targetDate"])
    if "progress" in payload:
        changes["progress"] = _progress(payload["progress"])
    if "status" in payload:
        changes["status"] = _status(payload["status"])
        if changes["status"] == GoalStatus.DONE and "progress" not in payload:
            changes["progress"] = 100
    if "milestones" in payload:
        changes["milestones"] = _milestones(payload["milestones"])

    updated = goal.model_copy(update=changes)
    logger.info("Goal updated", goal_id=goal.id, fields=sorted(changes))
    return [*goals[:index], updated, *goals[index + 1 :]]


def _remove(goals: list[Goal], payload: dict, now: datetime) -> list[Goal]:
    index = _index_of(goals, payload.get("id"))
    logger.info("Goal removed", goal_id=goals[index].id)
    return [*goals[:index], *goals[index + 1 :]]


def _toggle_milestone(goals: list[Goal], payload: dict, now: datetime) -> list[Goal]:
    index = _index_of(goals, payload.get("id"))
    goal = goals[index]
    milestone_id = payload.get("milestoneId")
    if not any(m.id == milestone_id for m in goal.milestones):
        raise GoalNotFoundError(f"Milestone {milestone_id} not found")

    milestones = [
        m.model_copy(update={"done": not m.done}) if m.id == milestone_id else m
        for m in goal.milestones
    ]
    done = sum(1 for m in milestones if m.done)
    updated = goal.model_copy(
        update={
            "milestones": milestones,
            "progress": percent(done, len(milestones)),
            "updated_at": now,
        }
    )
    logger.info("Goal milestone toggled", goal_id=goal.id, milestone_id=milestone_id)
    return [*goals[:index], updated, *goals[index + 1 :]]


_HANDLERS = {
    GoalAction.ADD: _add,
    GoalAction.UPDATE: _update,
    GoalAction.REMOVE: _remove,
    GoalAction.TOGGLE_MILESTONE: _toggle_milestone,
}


def apply_goal_action(
    goals: list[Goal],
    action: GoalAction | str,
    payload: dict[str, Any],
    now: datetime | None = None,
) -> list[Goal]:
    """Apply one add / update / remove / toggle_milestone action.

    Args:
        goals: Current goals (left untouched).
        action: Action name.
        payload: Action fields, camelCase keys (``id``, ``title``, ``milestoneId``...).
        now: Timestamp for createdAt / updatedAt.

    Returns:
        The new goal list.

    Raises:
        GoalActionError: Unknown action or invalid field.
        GoalNotFoundError: Goal or milestone id does not exist.
    """
    try:
        handler = _HANDLERS[GoalAction(action)]
    except ValueError as e:
        raise GoalActionError(f"Unknown goal action: {action}") from e
    return handler(list(goals), payload, now or datetime.now(timezone.utc))
