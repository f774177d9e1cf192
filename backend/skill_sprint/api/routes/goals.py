"""Custom goal routes."""

from fastapi import APIRouter, HTTPException, status

from skill_sprint.api.deps import DBSession
from skill_sprint.schemas.goal import GoalActionRequest
from skill_sprint.services import state_service
from skill_sprint.services.goal_service import (
    GoalActionError,
    GoalNotFoundError,
    apply_goal_action,
)

router = APIRouter(prefix="/goals", tags=["goals"])


@router.get("")
async def list_goals(db: DBSession) -> list[dict]:
    snapshot = await state_service.read_state(db)
    return [goal.to_document() for goal in snapshot.custom_goals]


@router.post("")
async def mutate_goals(data: GoalActionRequest, db: DBSession) -> list[dict]:
    """Apply one goal action and return the updated goal list."""
    snapshot = await state_service.read_state(db)
    try:
        goals = apply_goal_action(snapshot.custom_goals, data.action, data.payload())
    except GoalNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e
    except GoalActionError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e

    snapshot = await state_service.update_goals(db, goals)
    return [goal.to_document() for goal in snapshot.custom_goals]
