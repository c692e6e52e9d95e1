"""Minimal tag scanning for the AWC XML responses.

This is not an XML parser. It relies on the fixed, flat shape of the data
server's answers: every tag of interest appears at most once and callers read
fields in document order. Reading a field that appears earlier than the
current cursor requires a ``reset()`` first. A differently shaped document is
silently mis-read.
"""
from __future__ import annotations

from typing import Tuple


def extract_tag(buffer: str, tag: str, pos: int = 0) -> Tuple[str, int]:
    """Return the text following ``tag`` up to the next ``<`` and the new cursor.

    The cursor points at that ``<`` afterwards. When the tag is missing, or
    nothing follows it, the value is empty and the cursor goes back to 0.
    """
    found = buffer.find(tag, pos)
    if found < 0:
        return "", 0

    start = found + len(tag)
    end = buffer.find("<", start)
    if end < 0:
        return "", 0
    return buffer[start:end], end


class TagScanner:
    """Sequential reader sharing one cursor between ``extract`` calls."""

    def __init__(self, buffer: str) -> None:
        self.buffer = buffer
        self.pos = 0

    def extract(self, tag: str) -> str:
        value, self.pos = extract_tag(self.buffer, tag, self.pos)
        return value

    def reset(self) -> None:
        self.pos = 0


__all__ = ["extract_tag", "TagScanner"]
