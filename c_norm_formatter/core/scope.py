"""
Lexical State Tracker

This module approximates C scope with a small finite-state object: a block
comment flag and an integer brace depth, advanced one line at a time.

Known heuristic limits:
- braces are counted per line, not per character (``{ {`` counts once)
- nested blocks, struct bodies and aggregate initializers at depth >= 1 are
  not distinguished from function bodies
- braces inside string literals or ``//`` comments are counted, and so
  are braces inside a leading block comment closed mid-line
"""

from typing import Iterable, List
from dataclasses import dataclass
import logging

from .lines import Line

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ScopeContext:
    """Scope facts attached to one line."""
    brace_depth: int
    depth_before: int
    in_block_comment: bool
    enters_function: bool = False

    @property
    def in_function_body(self) -> bool:
        return self.brace_depth > 0

    @property
    def inside_body(self) -> bool:
        """True for lines strictly between a body's opening and closing brace."""
        return self.depth_before > 0 and self.brace_depth > 0


class ScopeTracker:
    """
    Forward scanner producing one ScopeContext per line.

    A tracker is cheap and holds per-document state; create one per run.
    """

    def __init__(self):
        self.depth = 0
        self.in_comment = False

    def _update_comment_state(self, text: str):
        opened = text.rfind('/*')
        closed = text.rfind('*/')
        if opened == -1 and closed == -1:
            return
        # '/*/' must not count as both an opener and a closer
        if opened != -1 and closed == opened + 1:
            closed = text.rfind('*/', 0, opened)
        self.in_comment = opened > closed

    def advance(self, line: Line) -> ScopeContext:
        """Consume one line and return its context."""
        text = line.trimmed
        started_in_comment = self.in_comment
        depth_before = self.depth

        self._update_comment_state(text)
        # a leading comment closed mid-line leaves the rest of the line as code
        is_comment = started_in_comment or (
            text.startswith('/*') and (self.in_comment or text.endswith('*/')))

        if not is_comment:
            if '{' in text:
                self.depth += 1
            if '}' in text:
                self.depth = max(0, self.depth - 1)

        return ScopeContext(
            brace_depth=self.depth,
            depth_before=depth_before,
            in_block_comment=is_comment,
            enters_function=depth_before == 0 and self.depth > 0,
        )

    def scan(self, lines: Iterable[Line]) -> List[ScopeContext]:
        return [self.advance(line) for line in lines]


def compute_scopes(lines: Iterable[Line]) -> List[ScopeContext]:
    """Run a fresh tracker over a sequence of lines."""
    contexts = ScopeTracker().scan(lines)
    if contexts and contexts[-1].brace_depth:
        logger.debug(f"Document ends at brace depth {contexts[-1].brace_depth}")
    return contexts
