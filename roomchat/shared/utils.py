"""Shared utility functions."""
import re
from typing import Any, Iterable, List

MENTION_PATTERN = re.compile(r"@([A-Za-z0-9_]+)")


def mentioned_usernames(body: str) -> List[str]:
    """Return the distinct ``@username`` references in a message body, in order."""
    seen: List[str] = []
    for name in MENTION_PATTERN.findall(body or ""):
        if name not in seen:
            seen.append(name)
    return seen


def error_messages(body: Any, default: Iterable[str] = ()) -> List[str]:
    """Extract an ordered list of human-readable messages from a failure body.

    Accepts a bare list of strings, ``{"errors": [...]}``, ``{"detail": ...}``
    (FastAPI) or a plain string.
    """
    if isinstance(body, dict):
        for key in ("errors", "detail", "message"):
            if key in body:
                return error_messages(body[key], default)
        return list(default)
    if isinstance(body, str):
        return [body] if body else list(default)
    if isinstance(body, list):
        messages = []
        for item in body:
            if isinstance(item, dict) and "msg" in item:
                messages.append(str(item["msg"]))
            elif item:
                messages.append(str(item))
        return messages or list(default)
    return list(default)
