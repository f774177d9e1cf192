"""Pydantic schemas."""

from skill_sprint.schemas.agent import AgentPlan, AgentPlanRequest, PlanStep
from skill_sprint.schemas.goal import GoalAction, GoalActionRequest
from skill_sprint.schemas.portfolio import PortfolioSyncRequest
from skill_sprint.schemas.roadmap import (
    DailyRitual,
    ResourceLink,
    Roadmap,
    RoadmapPhase,
    RoadmapTask,
    RoadmapWeek,
    TaskKind,
)
from skill_sprint.schemas.state import (
    DEFAULT_HABITS,
    Goal,
    GoalMilestone,
    GoalStatus,
    Portfolio,
    PortfolioItem,
    ProgressEvent,
    StateSnapshot,
)

__all__ = [
    "AgentPlan",
    "AgentPlanRequest",
    "PlanStep",
    "GoalAction",
    "GoalActionRequest",
    "PortfolioSyncRequest",
    "DailyRitual",
    "ResourceLink",
    "Roadmap",
    "RoadmapPhase",
    "RoadmapTask",
    "RoadmapWeek",
    "TaskKind",
    "DEFAULT_HABITS",
    "Goal",
    "GoalMilestone",
    "GoalStatus",
    "Portfolio",
    "PortfolioItem",
    "ProgressEvent",
    "StateSnapshot",
]
