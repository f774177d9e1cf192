"""Roadmap schemas.

The roadmap is a read-only curriculum document: phases contain weeks, weeks
contain tasks. It is loaded from JSON (snake_case keys) and never mutated.
"""

from collections.abc import Iterator
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator


class TaskKind(str, Enum):
    """What kind of work a task represents."""

    PROJECT = "project"
    PRACTICE = "practice"
    OUTPUT = "output"
    HABIT = "habit"
    DELIVERABLE = "deliverable"
    OTHER = "other"

    @classmethod
    def _missing_(cls, value: object) -> "TaskKind":
        return cls.OTHER


class ResourceLink(BaseModel):
    model_config = ConfigDict(frozen=True)

    label: str
    url: str


class RoadmapTask(BaseModel):
    """A single checkable task."""

    model_config = ConfigDict(frozen=True)

    id: str
    title: str
    kind: TaskKind = TaskKind.OTHER
    details: str = ""
    resources: list[ResourceLink] = Field(default_factory=list)


class RoadmapWeek(BaseModel):
    """One week of the roadmap; ``number`` is global across phases."""

    model_config = ConfigDict(frozen=True)

    number: int
    theme: str = ""
    milestones: list[str] = Field(default_factory=list)
    tasks: list[RoadmapTask] = Field(default_factory=list)


class RoadmapPhase(BaseModel):
    model_config = ConfigDict(frozen=True)

    title: str
    summary: str = ""
    weeks: list[RoadmapWeek] = Field(default_factory=list)


class DailyRitual(BaseModel):
    """Time boxes (minutes) for the daily ritual habits."""

    model_config = ConfigDict(frozen=True)

    review_minutes: int = 15
    deep_work_minutes: int = 70
    artifact_minutes: int = 20
    micro_post_minutes: int = 10
    habits: list[str] = Field(default_factory=list)


class Roadmap(BaseModel):
    """The whole curriculum."""

    model_config = ConfigDict(frozen=True)

    title: str = ""
    phases: list[RoadmapPhase] = Field(default_factory=list)
    daily_ritual: DailyRitual = Field(default_factory=DailyRitual)

    @model_validator(mode="before")
    @classmethod
    def _number_weeks(cls, data: Any) -> Any:
        """Assign week numbers 1..N in traversal order."""
        if not isinstance(data, dict):
            return data
        phases = data.get("phases") or []
        number = 0
        renumbered = []
        for phase in phases:
            if not isinstance(phase, dict):
                renumbered.append(phase)
                continue
            weeks = []
            for week in phase.get("weeks") or []:
                number += 1
                weeks.append({**week, "number": number} if isinstance(week, dict) else week)
            renumbered.append({**phase, "weeks": weeks})
        return {**data, "phases": renumbered}

    @model_validator(mode="after")
    def _unique_task_ids(self) -> "Roadmap":
        seen: set[str] = set()
        for _, _, task in self.iter_tasks():
            if task.id in seen:
                raise ValueError(f"Duplicate task id in roadmap: {task.id}")
            seen.add(task.id)
        return self

    def iter_weeks(self) -> Iterator[tuple[RoadmapPhase, RoadmapWeek]]:
        for phase in self.phases:
            for week in phase.weeks:
                yield phase, week

    def iter_tasks(self) -> Iterator[tuple[RoadmapPhase, RoadmapWeek, RoadmapTask]]:
        for phase, week in self.iter_weeks():
            for task in week.tasks:
                yield phase, week, task

    @property
    def total_weeks(self) -> int:
        return sum(len(phase.weeks) for phase in self.phases)

    @property
    def total_tasks(self) -> int:
        return sum(1 for _ in self.iter_tasks())
