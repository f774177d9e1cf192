"""Insights routes."""

from fastapi import APIRouter

from skill_sprint.api.deps import DBSession, RoadmapDep, TodayDep
from skill_sprint.insights import build_insights
from skill_sprint.services import state_service

router = APIRouter(prefix="/insights", tags=["insights"])


@router.get("")
async def get_insights(db: DBSession, roadmap: RoadmapDep, today: TodayDep) -> dict:
    """Recomputed on every request; nothing is cached between state changes."""
    snapshot = await state_service.read_state(db)
    return build_insights(snapshot, roadmap, today=today)
