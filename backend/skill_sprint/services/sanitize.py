"""Normalization of incoming state patches.

Runs once at the HTTP boundary so everything behind it can rely on the typed
``StateSnapshot`` shape.
"""

from datetime import date
from typing import Any

from skill_sprint.core.config import get_settings
from skill_sprint.core.logging import get_logger
from skill_sprint.insights.utils import parse_iso_date

logger = get_logger(__name__)

PATCHABLE_FIELDS = ("startDate", "progress", "ritual", "logs")
ALLOWED_STATUSES = frozenset({"done", "snoozed"})


class StateValidationError(ValueError):
    """The request body cannot be applied to the state."""


def _is_date_key(key: object) -> bool:
    if not isinstance(key, str):
        return False
    try:
        date.fromisoformat(key)
    except ValueError:
        return False
    return True


def sanitize_start_date(value: Any) -> date | None:
    if value is None or value == "":
        return None
    if isinstance(value, str):
        try:
            return parse_iso_date(value)
        except ValueError:
            pass
    raise StateValidationError("startDate must be an ISO date string or null")


def sanitize_progress(progress: dict) -> dict[str, str]:
    """Keep only ``done`` / ``snoozed`` entries; anything else means todo."""
    return {
        task_id: status
        for task_id, status in progress.items()
        if isinstance(task_id, str) and isinstance(status, str) and status in ALLOWED_STATUSES
    }


def sanitize_ritual(ritual: dict) -> dict[str, dict[str, bool]]:
    cleaned = {}
    for day, habits in ritual.items():
        if not _is_date_key(day) or not isinstance(habits, dict):
            continue
        cleaned[day] = {str(name): bool(flag) for name, flag in habits.items()}
    return cleaned


def sanitize_logs(logs: dict, max_length: int | None = None) -> dict[str, str]:
    limit = max_length or get_settings().LOG_MAX_LENGTH
    cleaned = {}
    for day, text in logs.items():
        if not _is_date_key(day) or not isinstance(text, str):
            continue
        normalized = text.strip()
        if normalized:
            cleaned[day] = normalized[:limit]
    return cleaned


def sanitize_state_patch(payload: Any) -> dict[str, Any]:
    """Validate a partial state update.

    Args:
        payload: Parsed JSON body.

    Returns:
        Dict with the recognized camelCase keys, values normalized.

    Raises:
        StateValidationError: If the body or one of its fields has the wrong shape,
            or if it contains nothing to update.
    """
    if not isinstance(payload, dict):
        raise StateValidationError("Request body must be a JSON object")

    patch: dict[str, Any] = {}

    if "startDate" in payload:
        patch["startDate"] = sanitize_start_date(payload["startDate"])

    for field, sanitizer in (
        ("progress", sanitize_progress),
        ("ritual", sanitize_ritual),
        ("logs", sanitize_logs),
    ):
        if field not in payload:
            continue
        value = payload[field]
        if not isinstance(value, dict):
            raise StateValidationError(f"{field} must be an object")
        patch[field] = sanitizer(value)

    if not patch:
        raise StateValidationError("Request body has no updatable fields")

    logger.debug("State patch sanitized", fields=sorted(patch))
    return patch
