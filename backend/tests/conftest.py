"""Shared fixtures: a small roadmap, a throwaway sqlite database and an API client."""

import json
from collections.abc import AsyncGenerator
from datetime import date
from pathlib import Path

import httpx
import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession

from skill_sprint import models  # noqa: F401  registers the state table
from skill_sprint.api import deps
from skill_sprint.core.database import build_engine, build_session_factory, init_db
from skill_sprint.main import app
from skill_sprint.schemas.roadmap import Roadmap
from skill_sprint.services.roadmap_service import RoadmapCache

TODAY = date(2026, 3, 16)

ROADMAP_DATA = {
    "title": "Test sprint",
    "daily_ritual": {"habits": ["Ship something"]},
    "phases": [
        {
            "title": "Basics",
            "summary": "Warm up",
            "weeks": [
                {
                    "theme": "Setup",
                    "milestones": ["Tools ready"],
                    "tasks": [
                        {"id": "a", "title": "Install tools", "kind": "practice"},
                        {"id": "b", "title": "First commit", "kind": "output"},
                    ],
                },
                {
                    "theme": "Data",
                    "tasks": [
                        {
                            "id": "c",
                            "title": "Clean a dataset",
                            "kind": "project",
                            "resources": [{"label": "pandas docs", "url": "https://pandas.pydata.org"}],
                        },
                        {"id": "d", "title": "Chart it", "kind": "deliverable"},
                    ],
                },
            ],
        },
        {
            "title": "Build",
            "summary": "Ship it",
            "weeks": [
                {
                    "theme": "API",
                    "tasks": [
                        {"id": "e", "title": "Write an endpoint", "kind": "project"},
                        {"id": "f", "title": "Daily post", "kind": "habit"},
                    ],
                },
                {"theme": "Buffer", "tasks": []},
            ],
        },
    ],
}


@pytest.fixture
def today() -> date:
    return TODAY


@pytest.fixture
def roadmap() -> Roadmap:
    """Six tasks over four weeks; the last week is empty."""
    return Roadmap.model_validate(ROADMAP_DATA)


@pytest.fixture
def roadmap_file(tmp_path: Path) -> Path:
    path = tmp_path / "roadmap.json"
    path.write_text(json.dumps(ROADMAP_DATA), encoding="utf-8")
    return path


@pytest_asyncio.fixture
async def test_engine(tmp_path: Path) -> AsyncGenerator[AsyncEngine, None]:
    engine = build_engine(f"sqlite+aiosqlite:///{tmp_path / 'state.db'}")
    await init_db(engine)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def test_session(test_engine: AsyncEngine) -> AsyncGenerator[AsyncSession, None]:
    """A session on the throwaway database."""
    async with build_session_factory(test_engine)() as session:
        yield session


@pytest.fixture
def github_handler():
    """Replace ``github_handler.handler`` in a test to script GitHub responses."""

    class _Handler:
        def __init__(self) -> None:
            self.requests: list[httpx.Request] = []
            self.handler = lambda request: httpx.Response(200, json=[])

        def __call__(self, request: httpx.Request) -> httpx.Response:
            self.requests.append(request)
            return self.handler(request)

    return _Handler()


@pytest.fixture
def planner_llm():
    """Chat model handed to the planner route; None keeps the default."""
    return None


@pytest_asyncio.fixture
async def client(
    test_engine: AsyncEngine, roadmap_file: Path, github_handler, planner_llm
) -> AsyncGenerator[AsyncClient, None]:
    session_factory = build_session_factory(test_engine)

    async def _get_db() -> AsyncGenerator[AsyncSession, None]:
        async with session_factory() as session:
            yield session

    async def _get_github_client() -> AsyncGenerator[httpx.AsyncClient, None]:
        async with httpx.AsyncClient(transport=httpx.MockTransport(github_handler)) as http:
            yield http

    cache = RoadmapCache(roadmap_file)
    app.dependency_overrides[deps.get_db] = _get_db
    app.dependency_overrides[deps.get_roadmap_cache] = lambda: cache
    app.dependency_overrides[deps.get_today] = lambda: TODAY
    app.dependency_overrides[deps.get_github_client] = _get_github_client
    app.dependency_overrides[deps.get_planner_llm] = lambda: planner_llm

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c

    app.dependency_overrides.clear()
