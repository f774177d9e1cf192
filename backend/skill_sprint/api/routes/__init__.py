"""API routes."""

from skill_sprint.api.routes import agent, goals, insights, portfolio, roadmap, state

__all__ = ["agent", "goals", "insights", "portfolio", "roadmap", "state"]
