"""Helpers for reading raw Jira issue records returned by the gateway."""
from __future__ import annotations

from typing import Any, Optional


def extract_text_from_description(desc) -> str:
    if not desc:
        return ""
    if isinstance(desc, str):
        return desc
    if not isinstance(desc, dict):
        return str(desc)
    # Jira ADF to plain text
    parts = []
    for block in desc.get("content", []) or []:
        if not isinstance(block, dict):
            continue
        for item in block.get("content", []) or []:
            if isinstance(item, dict) and item.get("text"):
                parts.append(item["text"])
    return "\n".join(parts)[:4000]


def named_field(value: Any) -> Optional[str]:
    """Return the ``name`` of a Jira named object (status, priority, ...)."""
    if isinstance(value, dict):
        name = value.get("name")
        return str(name) if name else None
    if isinstance(value, str) and value:
        return value
    return None
