"""Decode JSON payloads out of generation-service replies.

Replies are free text.  The payload may sit inside a markdown code fence,
and string values sometimes carry raw newlines or tabs that strict JSON
rejects.  ``parse_llm_payload`` handles both and reports anything else as
``LLMPayloadError``, which callers treat as an expected outcome.
"""

import json
import re
from typing import Any, Optional

_CODE_FENCE = re.compile(r"```(?:json)?\s*(.*?)\s*```", re.DOTALL)

_CONTROL_ESCAPES = {
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
    "\b": "\\b",
    "\f": "\\f",
}


class LLMPayloadError(ValueError):
    """The generation service reply could not be decoded as JSON."""


def strip_code_fence(raw: str) -> str:
    match = _CODE_FENCE.search(raw)
    return match.group(1) if match else raw.strip()


def escape_control_chars(raw: str) -> str:
    """Escape control characters that appear inside JSON string literals.

    Characters outside strings are left alone, so structural whitespace
    survives.  Backslash escapes are tracked, which keeps ``"a\\\\"`` from
    being read as an unterminated string.
    """
    out = []
    in_string = False
    escaped = False

    for char in raw:
        if in_string and not escaped and ord(char) < 0x20:
            out.append(_CONTROL_ESCAPES.get(char, f"\\u{ord(char):04x}"))
            continue

        out.append(char)
        if escaped:
            escaped = False
        elif char == "\\" and in_string:
            escaped = True
        elif char == '"':
            in_string = not in_string

    return "".join(out)


def parse_llm_payload(raw: Optional[str]) -> Any:
    """Return the JSON value (object, array, scalar) carried by *raw*.

    Raises:
        LLMPayloadError: If the reply is blank or not JSON even after
            control characters are escaped.
    """
    if not raw or not raw.strip():
        raise LLMPayloadError("Empty reply")

    body = strip_code_fence(raw)
    try:
        return json.loads(body)
    except json.JSONDecodeError:
        pass

    try:
        return json.loads(escape_control_chars(body))
    except json.JSONDecodeError as e:
        raise LLMPayloadError(f"Invalid JSON in reply: {e}") from e
