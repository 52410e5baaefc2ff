"""JSON extraction from provider output.

Providers wrap JSON in prose or markdown fences even when asked not to; the
first balanced {...} object is taken as the payload.
"""

import json
from typing import Any


def extract_first_json_object(text: str) -> str | None:
    """Return the first balanced {...} substring, or None.

    Braces inside JSON string literals do not affect depth.
    """
    start = text.find("{")
    if start == -1:
        return None

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
        elif char == "{":
            depth += 1
        elif char == "}":
            depth -= 1
            if depth == 0:
                return text[start:index + 1]
    return None


def parse_json_response(raw: str) -> dict[str, Any]:
    """Parse a provider reply into a JSON object.

    Raises:
        ValueError: No JSON object could be parsed (json.JSONDecodeError included).
    """
    cleaned = (raw or "").strip()
    extracted = extract_first_json_object(cleaned) or cleaned
    try:
        data = json.loads(extracted)
    except RecursionError as e:
        raise ValueError("JSON nesting too deep") from e
    if not isinstance(data, dict):
        raise ValueError(f"Expected a JSON object, got {type(data).__name__}")
    return data
