from __future__ import annotations

import json
from typing import Any, Optional

from recipesuggest.shared.errors import MalformedSuggestion

MAX_BRACE_DEPTH = 64


def find_balanced_object(text: str, *, max_depth: int = MAX_BRACE_DEPTH) -> Optional[str]:
    """
    Return the first balanced top-level ``{...}`` substring of ``text``.

    Braces inside JSON string literals are ignored. Returns None when the first
    opening brace never closes or nesting goes deeper than ``max_depth``.
    """
    start = text.find("{")
    if start < 0:
        return None

    depth = 0
    in_string = False
    escaped = False
    for i in range(start, len(text)):
        ch = text[i]
        if in_string:
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == '"':
                in_string = False
            continue
        if ch == '"':
            in_string = True
        elif ch == "{":
            depth += 1
            if depth > max_depth:
                return None
        elif ch == "}":
            depth -= 1
            if depth == 0:
                return text[start:i + 1]
    return None


def parse_json_payload(text: str) -> Any:
    """
    Strict parse of the whole text, then one brace-matching fallback.

    Raises MalformedSuggestion when neither step yields JSON.
    """
    try:
        return json.loads(text)
    except (ValueError, TypeError):
        pass

    candidate = find_balanced_object(text or "")
    if candidate is None:
        raise MalformedSuggestion(text, "no JSON object found in completion")
    try:
        return json.loads(candidate)
    except ValueError as e:
        raise MalformedSuggestion(text, f"embedded object is not valid JSON: {e}") from e


def extract_suggestions(text: str) -> dict:
    """
    Extract the suggestion object from a model completion.

    The only shape check is that the result is an object whose ``recipes`` is a list;
    recipe entries are passed through untouched.
    """
    if not text or not text.strip():
        raise MalformedSuggestion(text or "", "no content in AI response")

    obj = parse_json_payload(text)
    if not isinstance(obj, dict) or not isinstance(obj.get("recipes"), list):
        raise MalformedSuggestion(text, "completion does not contain a recipes array")
    return obj
