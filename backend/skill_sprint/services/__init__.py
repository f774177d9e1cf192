"""Service layer modules."""

from skill_sprint.services import (
    goal_service,
    portfolio_service,
    roadmap_service,
    sanitize,
    state_service,
)

__all__ = [
    "goal_service",
    "portfolio_service",
    "roadmap_service",
    "sanitize",
    "state_service",
]
