"""State routes."""

from typing import Any

from fastapi import APIRouter, Body, HTTPException, status

from skill_sprint.api.deps import DBSession
from skill_sprint.core.logging import get_logger
from skill_sprint.services import state_service
from skill_sprint.services.sanitize import StateValidationError, sanitize_state_patch

logger = get_logger(__name__)
router = APIRouter(prefix="/state", tags=["state"])


@router.get("")
async def get_state(db: DBSession) -> dict:
    """The whole state document."""
    snapshot = await state_service.read_state(db)
    return snapshot.to_document()


@router.post("")
async def update_state(db: DBSession, payload: Any = Body(default=None)) -> dict:
    """Apply a partial update of startDate / progress / ritual / logs."""
    try:
        patch = sanitize_state_patch(payload)
    except StateValidationError as e:
        logger.info("Rejected state update", reason=str(e))
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e

    snapshot = await state_service.update_state(db, patch)
    return snapshot.to_document()
