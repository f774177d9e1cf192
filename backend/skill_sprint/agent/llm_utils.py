"""Helpers for turning free-form model replies into JSON."""

import json
import re
from collections.abc import Iterator
from typing import Any

from skill_sprint.core.logging import get_logger

logger = get_logger(__name__)

_FENCE_RE = re.compile(
    r"```(?:json|javascript|js|text)?\s*\n(.*?)\n\s*```", re.DOTALL | re.IGNORECASE
)
_TRAILING_COMMA_RE = re.compile(r",(\s*[}\]])")


def _loads(text: str) -> Any | None:
    try:
        return json.loads(_TRAILING_COMMA_RE.sub(r"\1", text.strip()))
    except (json.JSONDecodeError, ValueError):
        return None


def _first_balanced_block(text: str) -> str | None:
    """First complete ``{...}`` or ``[...]`` in ``text``, ignoring brackets in strings."""
    start = next((i for i, ch in enumerate(text) if ch in "{["), -1)
    if start == -1:
        return None

    depth = 0
    in_string = False
    escaped = False
    for i in range(start, len(text)):
        ch = text[i]
        if escaped:
            escaped = False
        elif ch == "\\":
            escaped = True
        elif ch == '"':
            in_string = not in_string
        elif not in_string and ch in "{[":
            depth += 1
        elif not in_string and ch in "}]":
            depth -= 1
            if depth == 0:
                return text[start : i + 1]
    return None


def _candidates(content: str) -> Iterator[tuple[str, str]]:
    yield "direct", content
    fenced = _FENCE_RE.search(content)
    if fenced:
        yield "fenced", fenced.group(1)
    block = _first_balanced_block(content)
    if block:
        yield "embedded", block


def parse_llm_json_response(content: str | None) -> dict[str, Any] | list[Any]:
    """Parse JSON out of a model reply.

    Tries the whole reply, then the first fenced code block, then the first
    balanced object/array embedded in prose. Trailing commas are tolerated.

    Raises:
        ValueError: If the reply is empty or contains no valid JSON.
    """
    if not content:
        raise ValueError("Empty LLM response")

    for strategy, candidate in _candidates(content):
        result = _loads(candidate)
        if isinstance(result, (dict, list)):
            logger.debug("Parsed LLM JSON", strategy=strategy)
            return result

    logger.error("Failed to parse LLM JSON response", content_preview=content[:200])
    raise ValueError("Failed to parse LLM JSON response: no valid JSON found")


def parse_llm_json_object(content: str | None) -> dict[str, Any]:
    result = parse_llm_json_response(content)
    if not isinstance(result, dict):
        raise ValueError("Expected a JSON object in LLM response")
    return result


def message_text(message: Any) -> str:
    """Plain text of a chat message whose content may be a list of parts."""
    content = getattr(message, "content", message)
    if isinstance(content, str):
        return content
    if isinstance(content, list):
        parts = []
        for part in content:
            if isinstance(part, str):
                parts.append(part)
            elif isinstance(part, dict) and isinstance(part.get("text"), str):
                parts.append(part["text"])
        return "".join(parts)
    return str(content or "")
