# src/oyster_chat/utils/text.py
"""Helpers that turn raw chat responses into displayable text."""

from __future__ import annotations

import json
import re
from typing import Any

_THINK_PATTERN = re.compile(r"<think>(.*?)</think>", re.DOTALL)
_TEXT_FIELDS = ("response", "output", "message")


def parse_assistant_text(raw: str) -> str:
    """Extract the assistant reply from a chat response body.

    Ollama-style JSON bodies are unwrapped (``response``, ``output``,
    ``message`` or ``message.content``); other JSON is pretty-printed and
    anything that is not JSON is returned unchanged.
    """
    if not raw:
        return ""

    try:
        parsed: Any = json.loads(raw)
    except ValueError:
        return raw

    if isinstance(parsed, str):
        return parsed
    if parsed is None:
        return raw
    if isinstance(parsed, dict):
        for key in _TEXT_FIELDS:
            if isinstance(parsed.get(key), str):
                return parsed[key]
        message = parsed.get("message")
        if isinstance(message, dict) and isinstance(message.get("content"), str):
            return message["content"]

    return json.dumps(parsed, indent=2, ensure_ascii=False)


def split_think_content(content: str) -> tuple[str | None, str]:
    """Split a reply into its ``<think>`` block and the visible answer.

    Returns:
        Tuple of (thinking text or None, visible reply)
    """
    match = _THINK_PATTERN.search(content)
    if not match:
        return None, content
    think = match.group(1).strip()
    reply = (content[: match.start()] + content[match.end() :]).strip()
    return think or None, reply
