"""
Shared text utilities for the extraction and summarization pipeline.
"""
import re
from datetime import datetime, timezone

WHITESPACE_RE = re.compile(r"\s+")

# Innermost think block: an opening tag followed by text that contains no
# further opening tag, up to the nearest closing tag.
THINK_BLOCK_RE = re.compile(r"<think>(?:(?!<think>).)*?</think>", re.IGNORECASE | re.DOTALL)


def collapse_whitespace(text: str) -> str:
    """Collapse whitespace runs to single spaces and trim."""
    if not text:
        return ""
    return WHITESPACE_RE.sub(" ", text).strip()


def strip_think_blocks(text: str) -> str:
    """
    Remove model reasoning blocks from a completed response.

    Blocks are removed innermost-first until none remain, so nested and
    repeated blocks disappear entirely. An unterminated ``<think>`` is left
    as-is.
    """
    if not text:
        return text
    previous = None
    while previous != text:
        previous = text
        text = THINK_BLOCK_RE.sub("", text)
    return text.strip()


def word_count(text: str) -> int:
    """Number of whitespace-separated words."""
    return len(text.split()) if text else 0


def utc_now_iso() -> str:
    """Current UTC time as an ISO-8601 string with millisecond precision."""
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def preview(text: str, limit: int) -> str:
    """First ``limit`` characters of text, with an ellipsis when cut."""
    if len(text) <= limit:
        return text
    return text[:limit] + "..."
