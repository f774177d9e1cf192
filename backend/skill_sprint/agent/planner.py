"""Sprint planner - turns a project idea plus roadmap context into a short plan.

Three tiers, each a fallback for the previous one:

1. structured output (json_mode) parsed straight into ``AgentPlan``
2. plain completion, JSON extracted from the reply text
3. a deterministic offline template built from the same context
"""

from datetime import date, datetime, timezone
from typing import Any

from langchain_core.messages import HumanMessage, SystemMessage

from skill_sprint.agent.llm import get_llm, llm_configured
from skill_sprint.agent.llm_utils import message_text, parse_llm_json_object
from skill_sprint.core.config import get_settings
from skill_sprint.core.logging import get_logger
from skill_sprint.schemas.agent import AgentPlan, AgentPlanRequest, PlanStep
from skill_sprint.schemas.roadmap import Roadmap
from skill_sprint.schemas.state import StateSnapshot
from skill_sprint.services.roadmap_service import locate_week

logger = get_logger(__name__)

MAX_STEPS = 6
MAX_STEP_TASKS = 6
MAX_QUICK_WINS = 6
MAX_RESOURCES = 8
MAX_REMINDERS = 6
MAX_TAGS = 6
BACKLOG_LIMIT = 5
RECENT_LOGS = 3
LOG_EXCERPT_LENGTH = 280


# ============================================================================
# Prompts
# ============================================================================

PLANNER_SYSTEM_PROMPT = """
You are a pragmatic coach for self-directed learning sprints. The learner follows a
week-by-week roadmap and wants to start a small project with as little friction as
possible.

Rules:
1. Keep the plan inside the requested time box; every stage must end in something visible
   (code pushed, a chart, a README, a short post).
2. Reuse what the learner is already working on in the roadmap when it fits.
3. 3-6 stages, each with at most 6 concrete tasks.
4. If the learner is behind plan, shrink the scope instead of adding work.

Reply with JSON only, using exactly these keys:
{
  "summary": "2-3 sentences",
  "quickWins": ["..."],
  "steps": [
    {"title": "...", "tasks": ["..."], "outcome": "...", "focus": "...", "duration": "1 day"}
  ],
  "resources": ["..."],
  "reminders": ["..."]
}
"""


# ============================================================================
# Context
# ============================================================================


def build_plan_context(
    request: AgentPlanRequest,
    state: StateSnapshot,
    roadmap: Roadmap,
    insights: dict,
    today: date | None = None,
) -> dict[str, Any]:
    """Assemble the textual context shared with the model.

    Returns:
        ``{"text": str, "tags": list[str], "week": WeekLocation | None}``
    """
    today = today or date.today()
    lines = [
        f"Project idea: {request.goal}",
        f"Time box: {request.duration} days",
        f"Focus: {request.focus}",
    ]
    tags = [request.focus]
    location = locate_week(roadmap, state.start_date, today) if state.start_date else None

    if request.include_progress:
        summary = insights.get("summary", {})
        feasibility = insights.get("feasibility", {})
        lines.append(
            "Roadmap progress: "
            f"{summary.get('done', 0)}/{summary.get('totalTasks', 0)} tasks done "
            f"({summary.get('completionRate', 0)}%), {summary.get('snoozed', 0)} snoozed."
        )
        if feasibility:
            lines.append(
                f"Pace: {feasibility.get('status')} (score {feasibility.get('score')}). "
                f"{feasibility.get('summary', '')}"
            )
            tags.append(str(feasibility.get("status")))
        if location:
            lines.append(
                f"Current week: {location.phase.title} / week {location.week.number}: "
                f"{location.week.theme}"
            )
            tags.append(f"week-{location.week.number}")

    if request.include_backlog:
        open_tasks = _open_tasks(roadmap, state, location)
        if open_tasks:
            lines.append("Open roadmap tasks:")
            lines.extend(f"- {title}" for title in open_tasks)
            tags.append("backlog")

    if request.include_logs:
        recent = sorted(state.logs.items(), reverse=True)[:RECENT_LOGS]
        if recent:
            lines.append("Recent learning logs:")
            for day, text in recent:
                lines.append(f"[{day}] {text[:LOG_EXCERPT_LENGTH]}")
            tags.append("logs")

    return {"text": "\n".join(lines), "tags": _dedupe(tags)[:MAX_TAGS], "week": location}


def _open_tasks(roadmap: Roadmap, state: StateSnapshot, location: Any) -> list[str]:
    """Open tasks of the current week, or the first open tasks of the roadmap."""
    if location is not None:
        tasks = location.week.tasks
    else:
        tasks = [task for _, _, task in roadmap.iter_tasks()]
    return [task.title for task in tasks if state.progress.get(task.id) != "done"][:BACKLOG_LIMIT]


def _dedupe(values: list[str]) -> list[str]:
    return list(dict.fromkeys(value for value in values if value))


# ============================================================================
# Plan normalization
# ============================================================================


def _clean_list(value: Any, limit: int) -> list[str]:
    if not isinstance(value, list):
        return []
    items = [item.strip() for item in value if isinstance(item, str) and item.strip()]
    return items[:limit]


def _clean_step(step: Any) -> PlanStep | None:
    if not isinstance(step, dict):
        return None
    duration = step.get("duration")
    if isinstance(duration, (int, float)) and not isinstance(duration, bool):
        duration = f"{duration:g} day{'' if duration == 1 else 's'}"
    cleaned = PlanStep(
        title=str(step.get("title") or "").strip(),
        tasks=_clean_list(step.get("tasks"), MAX_STEP_TASKS),
        outcome=str(step.get("outcome") or "").strip(),
        focus=str(step.get("focus") or "").strip(),
        duration=str(duration or "").strip(),
    )
    if not cleaned.title and not cleaned.tasks and not cleaned.outcome:
        return None
    return cleaned


def normalize_plan(raw: dict[str, Any]) -> AgentPlan:
    """Coerce a loosely shaped model reply into a bounded ``AgentPlan``.

    Raises:
        ValueError: If nothing usable (no summary and no steps) remains.
    """
    steps = [step for step in map(_clean_step, raw.get("steps") or []) if step][:MAX_STEPS]
    summary = raw.get("summary")
    plan = AgentPlan(
        summary=summary.strip() if isinstance(summary, str) else "",
        quick_wins=_clean_list(raw.get("quickWins", raw.get("quick_wins")), MAX_QUICK_WINS),
        steps=steps,
        resources=_clean_list(raw.get("resources"), MAX_RESOURCES),
        reminders=_clean_list(raw.get("reminders"), MAX_REMINDERS),
    )
    if not plan.summary and not plan.steps:
        raise ValueError("Plan has neither summary nor steps")
    return plan


def offline_plan(request: AgentPlanRequest, context: dict[str, Any]) -> AgentPlan:
    """Deterministic plan used when no model is available or every call failed."""
    days = request.duration
    scope_days = max(1, days // 5)
    ship_days = max(1, days // 5)
    build_days = max(1, days - scope_days - ship_days)
    location = context.get("week")

    resources = []
    if location is not None:
        resources.append(f"Roadmap week {location.week.number}: {location.week.theme}")
        for task in location.week.tasks:
            resources.extend(link.label for link in task.resources)

    return AgentPlan(
        summary=(
            f"A {days}-day {request.focus} sprint for: {request.goal[:120]}. "
            "Scope it down, build the smallest working slice, then ship it where others can see it."
        ),
        quick_wins=[
            "Write a one-paragraph problem statement and the single output you will show.",
            "Create the repository with a README and an empty task list.",
            "Time-box a 25-minute spike on the riskiest part today.",
        ],
        steps=[
            PlanStep(
                title="Scope",
                tasks=[
                    "List must-have versus nice-to-have features",
                    "Pick one dataset, API or input to work with",
                    "Sketch the demo you will record at the end",
                ],
                outcome="A written scope that fits the time box",
                focus="planning",
                duration=f"{scope_days} day{'s' if scope_days > 1 else ''}",
            ),
            PlanStep(
                title="Build",
                tasks=[
                    "Implement the core path end to end, no polish",
                    "Commit at least once per deep-work block",
                    "Log blockers and fixes in the daily log",
                ],
                outcome="A runnable minimal demo",
                focus=request.focus,
                duration=f"{build_days} day{'s' if build_days > 1 else ''}",
            ),
            PlanStep(
                title="Ship",
                tasks=[
                    "Write the README: what, why, how to run",
                    "Record a short demo or screenshot",
                    "Post a short write-up and ask one person for feedback",
                ],
                outcome="A public artifact someone else can reproduce",
                focus="output",
                duration=f"{ship_days} day{'s' if ship_days > 1 else ''}",
            ),
        ],
        resources=_dedupe(resources)[:MAX_RESOURCES],
        reminders=[
            "Keep the daily ritual: review, deep work, visible output, micro post.",
            "If a step slips, cut scope instead of extending the time box.",
        ],
    )


# ============================================================================
# Entry point
# ============================================================================


async def generate_plan(
    request: AgentPlanRequest,
    state: StateSnapshot,
    roadmap: Roadmap,
    insights: dict,
    llm: Any = None,
    now: datetime | None = None,
    today: date | None = None,
) -> dict[str, Any]:
    """Produce a sprint plan; never raises for model failures.

    Args:
        request: The user's plan request.
        state: Current state snapshot.
        roadmap: Roadmap definition.
        insights: Output of ``build_insights`` for the same state.
        llm: Chat model override (tests); defaults to ``get_llm()`` when an API
            key is configured.
        now: Timestamp for ``generatedAt``.
        today: Reference date for the current-week lookup.

    Returns:
        ``{plan, raw, provider, model, generatedAt, usedFallback, context}``
    """
    settings = get_settings()
    context = build_plan_context(request, state, roadmap, insights, today=today)
    generated_at = (now or datetime.now(timezone.utc)).isoformat()

    def _response(plan: AgentPlan, raw: str, provider: str, model: str, fallback: bool) -> dict:
        return {
            "plan": plan.to_document(),
            "raw": raw,
            "provider": provider,
            "model": model,
            "generatedAt": generated_at,
            "usedFallback": fallback,
            "context": {"tags": context["tags"]},
        }

    def _offline() -> dict:
        plan = offline_plan(request, context)
        return _response(plan, context["text"], "offline", "template", True)

    if llm is None:
        if not llm_configured():
            logger.info("No LLM configured, using offline plan", goal=request.goal[:80])
            return _offline()
        llm = get_llm()

    messages = [
        SystemMessage(content=PLANNER_SYSTEM_PROMPT),
        HumanMessage(content=context["text"]),
    ]

    try:
        structured_llm = llm.with_structured_output(AgentPlan, method="json_mode")
        result = await structured_llm.ainvoke(messages)
        raw_plan = result.to_document() if isinstance(result, AgentPlan) else dict(result)
        plan = normalize_plan(raw_plan)
        logger.info("Plan generated", steps=len(plan.steps))
        return _response(plan, plan.summary, "openai", settings.OPENAI_MODEL, False)
    except Exception as structured_error:
        logger.warning(
            "Structured plan output failed, falling back to manual JSON parsing",
            error=str(structured_error),
        )

    try:
        reply = await llm.ainvoke(messages)
        raw = message_text(reply)
        plan = normalize_plan(parse_llm_json_object(raw))
        logger.info("Plan generated (fallback parsing)", steps=len(plan.steps))
        return _response(plan, raw, "openai", settings.OPENAI_MODEL, False)
    except Exception as fallback_error:
        logger.error("Plan generation failed, using offline plan", error=str(fallback_error))
        return _offline()
