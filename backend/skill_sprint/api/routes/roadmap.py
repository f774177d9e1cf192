"""Roadmap routes."""

from fastapi import APIRouter

from skill_sprint.api.deps import RoadmapDep

router = APIRouter(prefix="/roadmap", tags=["roadmap"])


@router.get("")
async def get_roadmap(roadmap: RoadmapDep) -> dict:
    """The roadmap definition, as loaded from the JSON file."""
    return roadmap.model_dump(mode="json")
