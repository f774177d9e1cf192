"""Persisted state document."""

from datetime import datetime, timezone

from sqlalchemy import JSON, DateTime, Integer
from sqlalchemy.orm import Mapped, mapped_column

from skill_sprint.core.database import Base

# The app is single-user; the whole state lives in this row.
STATE_DOCUMENT_ID = 1


class StateDocument(Base):
    __tablename__ = "state_documents"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, default=STATE_DOCUMENT_ID)
    payload: Mapped[dict] = mapped_column(JSON, default=dict)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )
