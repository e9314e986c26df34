"""Helpers for pulling JSON out of free-form model replies."""

import re

_FENCE_PREFIX = re.compile(r"^```[a-zA-Z]*\s*")
_FENCE_SUFFIX = re.compile(r"\s*```$")


def strip_code_fences(text: str) -> str:
    """Remove a surrounding Markdown code fence and whitespace."""
    cleaned = text.strip()
    cleaned = _FENCE_PREFIX.sub("", cleaned)
    cleaned = _FENCE_SUFFIX.sub("", cleaned)
    return cleaned.strip()


def extract_json_array(text: str) -> str | None:
    """Return the first balanced ``[...]`` substring, or None.

    Brackets inside JSON string literals are ignored.
    """
    start = text.find("[")
    while start != -1:
        end = _matching_bracket(text, start)
        if end is not None:
            return text[start : end + 1]
        start = text.find("[", start + 1)
    return None


def _matching_bracket(text: str, start: int) -> int | None:
    depth = 0
    in_string = False
    escaped = False
    for index in range(start, len(text)):
        char = text[index]
        if in_string:
            if escaped:
                escaped = False
            elif char == "\\":
                escaped = True
            elif char == '"':
                in_string = False
            continue
        if char == '"':
            in_string = True
        elif char == "[":
            depth += 1
        elif char == "]":
            depth -= 1
            if depth == 0:
                return index
    return None
