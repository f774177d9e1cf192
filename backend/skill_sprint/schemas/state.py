"""State snapshot schemas.

The state document is stored and exchanged with camelCase keys (``startDate``,
``progressHistory``...); Python code uses the snake_case attribute names.
"""

from datetime import date, datetime, timezone
from enum import Enum
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

ProgressStatus = Literal["done", "snoozed"]

DEFAULT_HABITS: tuple[str, ...] = ("review", "deep", "artifact", "micro")


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_document(self) -> dict[str, Any]:
        """Dump as a JSON-compatible dict with wire (camelCase) keys."""
        return self.model_dump(mode="json", by_alias=True)


class ProgressEvent(CamelModel):
    """One task status change; ``None`` means the task went back to todo."""

    task_id: str
    from_status: ProgressStatus | None = Field(default=None, alias="from")
    to_status: ProgressStatus | None = Field(default=None, alias="to")
    timestamp: datetime

    @field_validator("timestamp")
    @classmethod
    def _assume_utc(cls, value: datetime) -> datetime:
        # naive and aware timestamps must stay comparable when replayed
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)


class GoalStatus(str, Enum):
    TODO = "todo"
    IN_PROGRESS = "in_progress"
    DONE = "done"


class GoalMilestone(CamelModel):
    id: str
    label: str
    done: bool = False


class Goal(CamelModel):
    """A user-defined goal outside the roadmap.

    ``progress`` is the self-reported percentage; ``None`` means the user never
    set one.
    """

    id: str
    title: str
    description: str = ""
    focus_area: str = ""
    target_date: date | None = None
    metric: str = ""
    status: GoalStatus = GoalStatus.TODO
    progress: int | None = Field(default=None, ge=0, le=100)
    milestones: list[GoalMilestone] = Field(default_factory=list)
    created_at: datetime | None = None
    updated_at: datetime | None = None
    notes: str = ""


class PortfolioItem(CamelModel):
    """A normalized external project (e.g. a GitHub repository)."""

    id: str
    type: str = "repository"
    title: str
    description: str = ""
    url: str = ""
    repo: str = ""
    stars: int = Field(default=0, ge=0)
    language: str | None = None
    topics: list[str] = Field(default_factory=list)
    updated_at: datetime | None = None

    @field_validator("topics")
    @classmethod
    def _dedupe_topics(cls, topics: list[str]) -> list[str]:
        seen: dict[str, None] = {}
        for topic in topics:
            if topic:
                seen.setdefault(topic, None)
        return list(seen)


class Portfolio(CamelModel):
    provider: str = "github"
    username: str = ""
    last_sync: datetime | None = None
    items: list[PortfolioItem] = Field(default_factory=list)


class StateSnapshot(CamelModel):
    """Everything persisted for the (single) user."""

    start_date: date | None = None
    progress: dict[str, ProgressStatus] = Field(default_factory=dict)
    progress_history: list[ProgressEvent] = Field(default_factory=list)
    ritual: dict[str, dict[str, bool]] = Field(default_factory=dict)
    logs: dict[str, str] = Field(default_factory=dict)
    custom_goals: list[Goal] = Field(default_factory=list)
    portfolio: Portfolio = Field(default_factory=Portfolio)
