"""Goal mutation schemas."""

from enum import Enum
from typing import Any

from pydantic import ConfigDict

from skill_sprint.schemas.state import CamelModel


class GoalAction(str, Enum):
    ADD = "add"
    UPDATE = "update"
    REMOVE = "remove"
    TOGGLE_MILESTONE = "toggle_milestone"


class GoalActionRequest(CamelModel):
    """``{"action": ..., ...}``; the remaining keys are the action payload."""

    model_config = ConfigDict(extra="allow")

    action: GoalAction

    def payload(self) -> dict[str, Any]:
        return dict(self.model_extra or {})
