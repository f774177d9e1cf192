"""AI planning schemas."""

from pydantic import Field, field_validator

from skill_sprint.schemas.state import CamelModel


class AgentPlanRequest(CamelModel):
    """What the user wants to kick off, plus which context to share."""

    goal: str = Field(min_length=1, max_length=2000)
    duration: int = 5
    focus: str = "build"
    include_progress: bool = True
    include_backlog: bool = True
    include_logs: bool = False

    @field_validator("goal")
    @classmethod
    def _strip_goal(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("goal must not be empty")
        return value

    @field_validator("duration", mode="before")
    @classmethod
    def _clamp_duration(cls, value: object) -> int:
        try:
            days = int(value)  # type: ignore[call-overload]
        except (TypeError, ValueError):
            return 5
        return min(max(days, 1), 30)


class PlanStep(CamelModel):
    """One stage of the generated sprint plan."""

    title: str = Field(default="", description="Short name of the stage")
    tasks: list[str] = Field(default_factory=list, description="Concrete actions, at most 6")
    outcome: str = Field(default="", description="Visible result at the end of the stage")
    focus: str = Field(default="", description="Skill or area this stage trains")
    duration: str = Field(default="", description="Time box, e.g. '1 day'")


class AgentPlan(CamelModel):
    """Structured output expected from the LLM."""

    summary: str = Field(default="", description="Two or three sentence overview")
    quick_wins: list[str] = Field(default_factory=list, description="Low-friction first actions")
    steps: list[PlanStep] = Field(default_factory=list, description="3-6 sequential stages")
    resources: list[str] = Field(default_factory=list, description="Docs, tools or references")
    reminders: list[str] = Field(default_factory=list, description="Habits to keep the pace")
