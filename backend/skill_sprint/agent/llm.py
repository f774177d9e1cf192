"""LLM provider configuration."""

from functools import lru_cache

from langchain_openai import ChatOpenAI

from skill_sprint.core.config import get_settings
from skill_sprint.core.logging import get_logger

logger = get_logger(__name__)


def llm_configured() -> bool:
    """Whether an API key is available; without one the planner stays offline."""
    return bool(get_settings().OPENAI_API_KEY)


@lru_cache
def get_llm() -> ChatOpenAI:
    """Get the configured planning model."""
    settings = get_settings()

    kwargs: dict = {
        "model": settings.OPENAI_MODEL,
        "temperature": settings.OPENAI_TEMPERATURE,
        "timeout": 60,
        "max_retries": 1,
    }
    if settings.OPENAI_API_KEY:
        kwargs["api_key"] = settings.OPENAI_API_KEY
    if settings.OPENAI_API_BASE_URL:
        kwargs["base_url"] = settings.OPENAI_API_BASE_URL

    logger.info("Initializing LLM", model=settings.OPENAI_MODEL)
    return ChatOpenAI(**kwargs)
