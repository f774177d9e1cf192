"""Portfolio sync schemas."""

from typing import Literal

from pydantic import Field, field_validator

from skill_sprint.schemas.state import CamelModel


class PortfolioSyncRequest(CamelModel):
    provider: Literal["github"] = "github"
    username: str = Field(min_length=1, max_length=100)
    token: str | None = None
    limit: int | None = Field(default=None, ge=1, le=30)
    repos: list[str] | None = None

    @field_validator("username")
    @classmethod
    def _strip_username(cls, value: str) -> str:
        value = value.strip().lstrip("@")
        if not value:
            raise ValueError("username must not be empty")
        return value
