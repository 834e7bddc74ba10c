"""
JSON extraction from model output.

Models asked for "raw JSON only" still wrap answers in ```json fences or add a
sentence before the object. Extraction order:

1. strip a surrounding Markdown fence and parse
2. fall back to the substring between the first "{" and the last "}"

NaN and Infinity are rejected even though Python's json module accepts them.
"""

import json
import re
from typing import Any

_FENCE_OPEN_RE = re.compile(r"^```[a-zA-Z0-9_-]*\s*")
_FENCE_CLOSE_RE = re.compile(r"\s*```$")


class JSONExtractionError(ValueError):
    """No JSON object could be recovered from the text."""
    pass


def _reject_constant(token: str) -> Any:
    raise JSONExtractionError(f"non-standard JSON constant {token}")


def strip_code_fences(text: str) -> str:
    s = (text or "").strip()
    if s.startswith("```"):
        s = _FENCE_OPEN_RE.sub("", s)
        s = _FENCE_CLOSE_RE.sub("", s)
    return s.strip()


def extract_json(text: str) -> Any:
    """
    Parse the JSON object contained in a model response.

    Raises:
        JSONExtractionError: nothing parseable was found.
    """
    s = strip_code_fences(text)
    if not s:
        raise JSONExtractionError("empty content")

    try:
        return json.loads(s, parse_constant=_reject_constant)
    except json.JSONDecodeError:
        pass

    start = s.find("{")
    end = s.rfind("}")
    if start == -1 or end <= start:
        raise JSONExtractionError("no JSON object found in content")

    try:
        return json.loads(s[start : end + 1], parse_constant=_reject_constant)
    except json.JSONDecodeError as e:
        raise JSONExtractionError(f"invalid JSON: {e.msg} (line {e.lineno}, col {e.colno})") from e
