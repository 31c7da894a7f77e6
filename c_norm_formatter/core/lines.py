"""
Line Model

This module provides the immutable line representation shared by every pass,
plus the helpers that split a document into lines and join it back while
keeping its newline convention.
"""

import re
from typing import List, Tuple
from dataclasses import dataclass
import logging

logger = logging.getLogger(__name__)

LINE_BREAK_RE = re.compile(r'\r\n|\n')


@dataclass(frozen=True)
class Line:
    """One physical line of a document plus derived facts."""
    index: int
    raw: str
    trimmed: str
    indent: str

    @classmethod
    def from_raw(cls, index: int, raw: str) -> "Line":
        stripped = raw.lstrip()
        return cls(index=index, raw=raw, trimmed=raw.strip(),
                   indent=raw[:len(raw) - len(stripped)])

    @property
    def is_empty(self) -> bool:
        return self.trimmed == ""

    def with_raw(self, raw: str) -> "Line":
        """Return a new Line for rewritten text, keeping the index."""
        if raw == self.raw:
            return self
        return Line.from_raw(self.index, raw)

    def __repr__(self):
        return f"Line(index={self.index}, raw={self.raw!r})"


class LineBuffer:
    """
    Ordered sequence of lines with explicit insertion.

    Inserting shifts every later position by one; ``insert_after`` returns
    that shift so callers holding recorded indices can re-validate them.
    """

    def __init__(self, lines: List[Line] = None):
        self._lines: List[Line] = list(lines or [])

    def __len__(self):
        return len(self._lines)

    def __iter__(self):
        return iter(self._lines)

    def __getitem__(self, position: int) -> Line:
        return self._lines[position]

    def insert_after(self, position: int, line: Line) -> int:
        self._lines.insert(position + 1, line)
        return 1

    def to_list(self) -> List[Line]:
        return list(self._lines)


def detect_newline(text: str) -> str:
    """Return the newline convention of a document ("\\r\\n" or "\\n")."""
    return "\r\n" if "\r\n" in text else "\n"


def split_document(text: str) -> Tuple[List[Line], str]:
    """
    Split a document into Line objects.

    Args:
        text: Full document text

    Returns:
        Tuple of (lines, newline). An empty document yields no lines.
        Lines break on both "\\r\\n" and a lone "\\n", so a mixed document
        is joined back with the single convention detected here.
    """
    if text == "":
        return [], "\n"

    newline = detect_newline(text)
    lines = [Line.from_raw(i, raw) for i, raw in enumerate(LINE_BREAK_RE.split(text))]
    logger.debug(f"Split document into {len(lines)} lines ({newline!r})")
    return lines, newline


def join_document(lines: List[Line], newline: str = "\n") -> str:
    """Join lines back into document text."""
    return newline.join(line.raw for line in lines)


def reindex(lines: List[Line]) -> List[Line]:
    """Renumber lines after a pass changed the line count."""
    return [line if line.index == i else Line(i, line.raw, line.trimmed, line.indent)
            for i, line in enumerate(lines)]
