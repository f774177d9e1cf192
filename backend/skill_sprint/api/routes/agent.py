"""AI planning routes."""

from typing import Annotated, Any

from fastapi import APIRouter, Depends

from skill_sprint.agent.planner import generate_plan
from skill_sprint.api.deps import DBSession, RoadmapDep, TodayDep, get_planner_llm
from skill_sprint.insights import build_insights
from skill_sprint.schemas.agent import AgentPlanRequest
from skill_sprint.services import state_service

router = APIRouter(prefix="/agent", tags=["agent"])


@router.post("")
async def create_plan(
    data: AgentPlanRequest,
    db: DBSession,
    roadmap: RoadmapDep,
    today: TodayDep,
    llm: Annotated[Any, Depends(get_planner_llm)],
) -> dict:
    """Generate a sprint plan; falls back to an offline template if the model fails."""
    snapshot = await state_service.read_state(db)
    insights = build_insights(snapshot, roadmap, today=today)
    return await generate_plan(data, snapshot, roadmap, insights, llm=llm, today=today)
