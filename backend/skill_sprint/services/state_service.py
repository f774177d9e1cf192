"""State document persistence.

The state is one JSON document, read and overwritten as a whole
(last write wins). Mutations are computed on immutable snapshots and then
written back.
"""

from datetime import datetime, timezone
from typing import Any

from pydantic import ValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from skill_sprint.core.logging import get_logger
from skill_sprint.models.state import STATE_DOCUMENT_ID, StateDocument
from skill_sprint.schemas.state import Goal, Portfolio, ProgressEvent, StateSnapshot

logger = get_logger(__name__)

# camelCase patch key -> StateSnapshot attribute
_PATCH_FIELDS = {
    "startDate": "start_date",
    "progress": "progress",
    "ritual": "ritual",
    "logs": "logs",
}


def parse_snapshot(payload: dict | None) -> StateSnapshot:
    """Validate a stored document, falling back to the empty state."""
    try:
        return StateSnapshot.model_validate(payload or {})
    except ValidationError as e:
        logger.warning("Stored state is invalid, using default state", error=str(e))
        return StateSnapshot()


def diff_progress(
    before: dict[str, str], after: dict[str, str], now: datetime
) -> list[ProgressEvent]:
    """One event per task whose status changed, in a deterministic (sorted) order."""
    events = []
    for task_id in sorted(set(before) | set(after)):
        old, new = before.get(task_id), after.get(task_id)
        if old != new:
            events.append(
                ProgressEvent(task_id=task_id, from_status=old, to_status=new, timestamp=now)
            )
    return events


def apply_state_patch(
    current: StateSnapshot, patch: dict[str, Any], now: datetime | None = None
) -> StateSnapshot:
    """Merge a sanitized patch into a new snapshot.

    Fields missing from the patch keep their current value. A progress change
    appends its status-change events to the history.
    """
    update = {_PATCH_FIELDS[key]: value for key, value in patch.items() if key in _PATCH_FIELDS}

    if "progress" in update:
        events = diff_progress(current.progress, update["progress"], now or datetime.now(timezone.utc))
        if events:
            update["progress_history"] = [*current.progress_history, *events]

    return current.model_copy(update=update)


async def read_state(db: AsyncSession) -> StateSnapshot:
    """Load the state snapshot (default state if nothing was saved yet)."""
    document = await db.get(StateDocument, STATE_DOCUMENT_ID)
    if document is None:
        return StateSnapshot()
    return parse_snapshot(document.payload)


async def write_state(db: AsyncSession, snapshot: StateSnapshot) -> StateSnapshot:
    """Overwrite the stored document.

    Note: This function commits the transaction.
    """
    # round-trip so the stored payload is exactly what a later read returns
    normalized = parse_snapshot(snapshot.to_document())
    payload = normalized.to_document()

    document = await db.get(StateDocument, STATE_DOCUMENT_ID)
    if document is None:
        document = StateDocument(id=STATE_DOCUMENT_ID, payload=payload)
        db.add(document)
    else:
        document.payload = payload
    await db.commit()

    logger.info(
        "State written",
        tasks=len(normalized.progress),
        history=len(normalized.progress_history),
        goals=len(normalized.custom_goals),
    )
    return normalized


async def update_state(
    db: AsyncSession, patch: dict[str, Any], now: datetime | None = None
) -> StateSnapshot:
    """Apply a sanitized partial update and persist it."""
    current = await read_state(db)
    next_state = apply_state_patch(current, patch, now)
    logger.info("State updated", fields=sorted(patch))
    return await write_state(db, next_state)


async def update_goals(db: AsyncSession, goals: list[Goal]) -> StateSnapshot:
    current = await read_state(db)
    return await write_state(db, current.model_copy(update={"custom_goals": goals}))


async def update_portfolio(db: AsyncSession, portfolio: Portfolio) -> StateSnapshot:
    current = await read_state(db)
    return await write_state(db, current.model_copy(update={"portfolio": portfolio}))
