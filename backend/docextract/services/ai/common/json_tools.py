"""JSON extraction from LLM responses using an explicit brace-balance scan."""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING, Any

from .errors import InvalidResponse, MalformedJson, NoJsonFound

if TYPE_CHECKING:
    from .providers.base import ProviderResult
    from .registry import Operation

logger = logging.getLogger(__name__)


def find_json_object(text: str) -> str:
    """Return the substring from the leftmost ``{`` to its matching ``}``.

    Braces inside JSON strings (including escaped quotes) do not count.
    Raises ``NoJsonFound`` when there is no ``{`` or it is never closed.
    """
    start = text.find("{")
    if start == -1:
        raise NoJsonFound()

    depth = 0
    in_string = False
    escape = False

    for i in range(start, len(text)):
        ch = text[i]

        if escape:
            escape = False
            continue

        if ch == "\\":
            if in_string:
                escape = True
            continue

        if ch == '"':
            in_string = not in_string
            continue

        if in_string:
            continue

        if ch == "{":
            depth += 1
        elif ch == "}":
            depth -= 1
            if depth == 0:
                return text[start : i + 1]

    raise NoJsonFound()


def extract_json(text: str) -> dict[str, Any]:
    """Parse the first balanced JSON object embedded in *text*.

    Leading/trailing commentary and markdown fences are ignored.
    """
    if not text or not text.strip():
        raise NoJsonFound()

    candidate = find_json_object(text)
    try:
        value = json.loads(candidate)
    except json.JSONDecodeError as exc:
        raise MalformedJson(f"Model response contains malformed JSON: {exc.msg} (char {exc.pos})") from exc

    if not isinstance(value, dict):
        raise MalformedJson("Model response JSON is not an object")
    return value


def normalize(result: ProviderResult, operation: Operation) -> dict[str, Any]:
    """Turn a raw provider answer into a candidate value for validation."""
    if result.structured is not None:
        return result.structured

    if operation.text_field is not None:
        answer = result.raw_text.strip()
        if not answer:
            raise InvalidResponse("Model returned empty text")
        return {operation.text_field: answer}

    try:
        return extract_json(result.raw_text)
    except (NoJsonFound, MalformedJson):
        logger.warning(
            "%s: could not extract JSON from %d-char response",
            operation.name,
            len(result.raw_text),
        )
        raise
