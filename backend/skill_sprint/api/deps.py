"""API dependencies."""

from collections.abc import AsyncGenerator
from datetime import date
from typing import Annotated, Any

import httpx
from fastapi import Depends, HTTPException, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from skill_sprint.core.config import get_settings
from skill_sprint.core.database import get_session
from skill_sprint.schemas.roadmap import Roadmap
from skill_sprint.services.roadmap_service import RoadmapCache, RoadmapLoadError


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Get database session dependency."""
    async for session in get_session():
        yield session


def get_roadmap_cache(request: Request) -> RoadmapCache:
    return request.app.state.roadmap_cache


def get_roadmap(cache: Annotated[RoadmapCache, Depends(get_roadmap_cache)]) -> Roadmap:
    """Current roadmap; a load failure is a server error."""
    try:
        return cache.get()
    except RoadmapLoadError as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to load roadmap",
        ) from e


def get_today() -> date:
    """Reference date for streaks and pacing."""
    return date.today()


async def get_github_client() -> AsyncGenerator[httpx.AsyncClient, None]:
    async with httpx.AsyncClient(timeout=get_settings().PORTFOLIO_TIMEOUT) as client:
        yield client


def get_planner_llm() -> Any:
    """Chat model override for the planner; None lets it pick the configured one."""
    return None


DBSession = Annotated[AsyncSession, Depends(get_db)]
RoadmapDep = Annotated[Roadmap, Depends(get_roadmap)]
TodayDep = Annotated[date, Depends(get_today)]
