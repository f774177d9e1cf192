"""Tests for the sprint planner and its fallbacks."""

import json
from datetime import date, datetime, timezone

import pytest
from langchain_core.messages import AIMessage
from pydantic import ValidationError

from skill_sprint.agent import planner
from skill_sprint.core.config import get_settings
from skill_sprint.insights import build_insights
from skill_sprint.schemas.agent import AgentPlan, AgentPlanRequest, PlanStep
from skill_sprint.schemas.state import StateSnapshot

TODAY = date(2026, 3, 16)
NOW = datetime(2026, 3, 16, 12, 0, tzinfo=timezone.utc)

MODEL_REPLY = {
    "summary": "Build a tiny dashboard in five days.",
    "quickWins": ["Create the repo", "", 3],
    "steps": [
        {"title": "Scope", "tasks": ["List features"], "outcome": "Scope doc", "focus": "planning", "duration": 1},
        {"title": "", "tasks": [], "outcome": ""},
        "not a step",
    ],
    "resources": ["pandas docs"],
    "reminders": ["Post daily"],
}


class _StructuredRunner:
    def __init__(self, result) -> None:
        self.result = result

    async def ainvoke(self, messages):
        return self.result


class StructuredLLM:
    """Answers through ``with_structured_output``."""

    def __init__(self, plan: AgentPlan) -> None:
        self.plan = plan

    def with_structured_output(self, schema, method=None):
        return _StructuredRunner(self.plan)

    async def ainvoke(self, messages):
        raise AssertionError("plain completion should not be needed")


class JsonReplyLLM:
    """No structured output support; replies with fenced JSON."""

    def __init__(self, content: str) -> None:
        self.content = content
        self.calls = 0

    def with_structured_output(self, schema, method=None):
        raise NotImplementedError("json_mode not supported")

    async def ainvoke(self, messages):
        self.calls += 1
        return AIMessage(content=self.content)


class BrokenLLM:
    def with_structured_output(self, schema, method=None):
        raise RuntimeError("provider down")

    async def ainvoke(self, messages):
        raise RuntimeError("provider down")


@pytest.fixture
def state() -> StateSnapshot:
    return StateSnapshot.model_validate(
        {
            "startDate": "2026-03-09",
            "progress": {"a": "done", "c": "done"},
            "logs": {"2026-03-15": "Cleaned the data", "2026-03-16": "Charted it"},
        }
    )


@pytest.fixture
def request_data() -> AgentPlanRequest:
    return AgentPlanRequest(goal="Dashboard for my study hours", duration=5, include_logs=True)


class TestAgentPlanRequest:
    def test_duration_is_clamped(self):
        assert AgentPlanRequest(goal="x", duration=100).duration == 30
        assert AgentPlanRequest(goal="x", duration=0).duration == 1
        assert AgentPlanRequest(goal="x", duration="soon").duration == 5

    def test_goal_is_required(self):
        with pytest.raises(ValidationError):
            AgentPlanRequest(goal="   ")

    def test_camel_case_input(self):
        data = AgentPlanRequest.model_validate({"goal": "x", "includeLogs": True, "includeBacklog": False})
        assert data.include_logs is True
        assert data.include_backlog is False


class TestContext:
    def test_context_mentions_progress_week_and_logs(self, roadmap, state, request_data):
        insights = build_insights(state, roadmap, today=TODAY)
        context = planner.build_plan_context(request_data, state, roadmap, insights, today=TODAY)
        text = context["text"]
        assert "Project idea: Dashboard for my study hours" in text
        assert "2/6 tasks done" in text
        assert "week 2: Data" in text
        assert "- Chart it" in text
        assert "- Clean a dataset" not in text
        assert "[2026-03-16] Charted it" in text
        assert context["week"].week.number == 2
        assert context["tags"][0] == "build"
        assert "logs" in context["tags"]
        assert len(context["tags"]) <= 6

    def test_context_without_optional_sections(self, roadmap, state):
        data = AgentPlanRequest(goal="x", include_progress=False, include_backlog=False)
        context = planner.build_plan_context(data, state, roadmap, {}, today=TODAY)
        assert context["text"].count("\n") == 2
        assert context["tags"] == ["build"]


class TestNormalizePlan:
    def test_cleans_loose_reply(self):
        plan = planner.normalize_plan(MODEL_REPLY)
        assert plan.quick_wins == ["Create the repo"]
        assert len(plan.steps) == 1
        assert plan.steps[0].duration == "1 day"

    def test_empty_reply_rejected(self):
        with pytest.raises(ValueError, match="neither summary nor steps"):
            planner.normalize_plan({"quickWins": ["a"]})


class TestOfflinePlan:
    def test_stages_fit_the_time_box(self, roadmap, state, request_data):
        context = planner.build_plan_context(request_data, state, roadmap, {}, today=TODAY)
        plan = planner.offline_plan(request_data, context)
        assert [step.title for step in plan.steps] == ["Scope", "Build", "Ship"]
        assert [step.duration for step in plan.steps] == ["1 day", "3 days", "1 day"]
        assert "Roadmap week 2: Data" in plan.resources
        assert "pandas docs" in plan.resources


@pytest.mark.asyncio
async def test_structured_output(roadmap, state, request_data) -> None:
    plan = AgentPlan(summary="Ship it", steps=[PlanStep(title="Build", tasks=["Code"])])
    result = await planner.generate_plan(
        request_data, state, roadmap, {}, llm=StructuredLLM(plan), now=NOW, today=TODAY
    )
    assert result["provider"] == "openai"
    assert result["model"] == get_settings().OPENAI_MODEL
    assert result["usedFallback"] is False
    assert result["generatedAt"] == NOW.isoformat()
    assert result["plan"]["summary"] == "Ship it"
    assert result["plan"]["steps"][0]["title"] == "Build"


@pytest.mark.asyncio
async def test_falls_back_to_json_parsing(roadmap, state, request_data) -> None:
    content = "Here you go:\n```json\n" + json.dumps(MODEL_REPLY) + "\n```"
    llm = JsonReplyLLM(content)
    result = await planner.generate_plan(request_data, state, roadmap, {}, llm=llm, today=TODAY)
    assert llm.calls == 1
    assert result["usedFallback"] is False
    assert result["raw"] == content
    assert result["plan"]["quickWins"] == ["Create the repo"]


@pytest.mark.asyncio
async def test_unparseable_reply_goes_offline(roadmap, state, request_data) -> None:
    result = await planner.generate_plan(
        request_data, state, roadmap, {}, llm=JsonReplyLLM("I cannot help with that."), today=TODAY
    )
    assert result["provider"] == "offline"
    assert result["usedFallback"] is True


@pytest.mark.asyncio
async def test_broken_model_goes_offline(roadmap, state, request_data) -> None:
    result = await planner.generate_plan(
        request_data, state, roadmap, {}, llm=BrokenLLM(), today=TODAY
    )
    assert result["provider"] == "offline"
    assert result["model"] == "template"
    assert [step["title"] for step in result["plan"]["steps"]] == ["Scope", "Build", "Ship"]
    assert result["context"]["tags"][0] == "build"


@pytest.mark.asyncio
async def test_no_model_configured(roadmap, state, request_data, monkeypatch) -> None:
    monkeypatch.setattr(planner, "llm_configured", lambda: False)
    result = await planner.generate_plan(request_data, state, roadmap, {}, today=TODAY)
    assert result["provider"] == "offline"
