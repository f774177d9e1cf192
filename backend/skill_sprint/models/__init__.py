"""Database models."""

from skill_sprint.models.state import STATE_DOCUMENT_ID, StateDocument

__all__ = ["STATE_DOCUMENT_ID", "StateDocument"]
