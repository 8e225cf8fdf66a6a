"""Response parsing utilities for generated UI schemas.

Free-text models do not always emit strictly parseable JSON even when told
to, so parsing is a fixed fallback chain: strict parse of the fence-stripped
text, then the outermost bracketed substring. Anything else is a
MalformedGeneration.
"""
import json
import logging
import re
from typing import Any

from interface_compiler.errors import MalformedGeneration
from interface_compiler.services.validator import validate_components

logger = logging.getLogger(__name__)

_FENCE_OPEN_RE = re.compile(r"^```(?:json)?\s*", re.IGNORECASE)
_FENCE_CLOSE_RE = re.compile(r"\s*```$")
_ARRAY_RE = re.compile(r"\[[\s\S]*\]")


def strip_code_fence(text: str) -> str:
    """Remove a leading ```json / ``` marker and a trailing ``` if present."""
    trimmed = text.strip()
    if trimmed.startswith("```"):
        trimmed = _FENCE_OPEN_RE.sub("", trimmed, count=1)
        trimmed = _FENCE_CLOSE_RE.sub("", trimmed, count=1)
    return trimmed


def extract_json_array(text: str) -> str:
    """Return the span from the first '[' to the last ']', or raise ValueError."""
    match = _ARRAY_RE.search(text)
    if not match:
        raise ValueError("No JSON array found in response")
    return match.group(0)


def _reject_constant(name: str) -> Any:
    raise ValueError(f"Non-standard JSON constant: {name}")


def strict_loads(text: str) -> Any:
    """json.loads that refuses NaN, Infinity and -Infinity."""
    return json.loads(text, parse_constant=_reject_constant)


def _safe_parse_json(text: str) -> Any:
    """Parse JSON with fallback to bracket extraction."""
    try:
        return strict_loads(text)
    except ValueError:
        pass

    try:
        extracted = extract_json_array(text)
        return strict_loads(extracted)
    except ValueError as e:
        logger.error("Failed to parse JSON response: %s", text[:500])
        raise MalformedGeneration(
            details=f"Could not extract valid JSON from AI response: {e}",
        ) from e


def parse_components(text: str) -> list:
    """Turn raw model output into a validated component list."""
    cleaned = strip_code_fence(text or "")
    parsed = _safe_parse_json(cleaned)

    if not isinstance(parsed, list):
        raise MalformedGeneration(details="Schema must be an array")

    result = validate_components(parsed)
    if not result:
        raise MalformedGeneration(details=result.message)

    return parsed
