"""
Rewrite Passes

Each pass takes the current line list (and, where it needs scope, the
contexts computed for exactly that list) and returns a new line list plus
the number of lines it changed. Passes never mutate Line objects.

Pass order is fixed by the pipeline:
    brace split -> indentation -> declarations -> keyword spacing
    -> trailing whitespace -> blank lines after declaration spans
"""

import re
from typing import List, Sequence, Tuple
from dataclasses import dataclass
import logging

from .lines import Line, LineBuffer, reindex
from .patterns import match_declaration, match_opening_brace_suffix
from .scope import ScopeContext

logger = logging.getLogger(__name__)

KEYWORD_PAREN_RE = re.compile(r'\b(if|while|return)\(')
BARE_RETURN_RE = re.compile(r'\breturn\b(?=[^\s;(])')
RETURN_STATEMENT_RE = re.compile(r'^return\s+(?P<expr>.+?)\s*;$')
INTEGER_LITERAL_RE = re.compile(r'^(?:0[xX][0-9a-fA-F]+|\d+)[uUlL]*$')
IDENTIFIER_RE = re.compile(r'^[A-Za-z_]\w*$')


@dataclass(frozen=True)
class DeclarationSpan:
    """A maximal run of declaration lines inside one function body."""
    start: int
    end: int


def _is_comment_line(line: Line, ctx: ScopeContext) -> bool:
    return ctx.in_block_comment or line.trimmed.startswith('//')


class BraceSplitter:
    """Move an inline opening brace onto its own line."""

    def apply(self, lines: Sequence[Line], contexts: Sequence[ScopeContext]) -> Tuple[List[Line], int]:
        result = []
        changes = 0

        for line, ctx in zip(lines, contexts):
            if _is_comment_line(line, ctx) or not match_opening_brace_suffix(line.trimmed):
                result.append(line)
                continue

            head = line.raw[:line.raw.rfind('{')].rstrip()
            result.append(line.with_raw(head))
            result.append(Line.from_raw(line.index, line.indent + '{'))
            changes += 1

        if changes:
            logger.debug(f"Split {changes} inline opening braces")
        return reindex(result), changes


class IndentNormalizer:
    """
    Indent lines that sit shallower than their brace level with one tab
    per level.

    Existing indentation at least as wide as the level is kept as written,
    spaces included. Comment and preprocessor lines are left alone.
    """

    def apply(self, lines: Sequence[Line], contexts: Sequence[ScopeContext]) -> Tuple[List[Line], int]:
        result = []
        changes = 0

        for line, ctx in zip(lines, contexts):
            if line.is_empty or ctx.in_block_comment or line.trimmed.startswith('#'):
                result.append(line)
                continue

            level = ctx.brace_depth if line.trimmed.startswith('}') else ctx.depth_before
            if len(line.indent) >= level:
                result.append(line)
                continue

            result.append(line.with_raw('\t' * level + line.raw[len(line.indent):]))
            changes += 1

        return result, changes


class DeclarationFormatter:
    """
    Align declarations inside function bodies and find the spans that need
    a blank line after them.
    """

    def apply(self, lines: Sequence[Line],
              contexts: Sequence[ScopeContext]) -> Tuple[List[Line], int, List[DeclarationSpan]]:
        """
        Rewrite declaration lines as ``indent<TAB>type<TAB>name;``.

        Returns:
            Tuple of (lines, changes_made, spans needing a separator)
        """
        result = []
        separated = []
        span = None
        changes = 0

        for position, (line, ctx) in enumerate(zip(lines, contexts)):
            if ctx.enters_function:
                span = None
            if line.is_empty:
                result.append(line)
                continue

            decl = None
            if ctx.in_function_body and not _is_comment_line(line, ctx):
                decl = match_declaration(line.trimmed)

            if decl is None:
                if span is not None:
                    if not lines[span.end + 1].is_empty:
                        separated.append(span)
                    span = None
                result.append(line)
                continue

            block_indent = '\t' * (ctx.brace_depth - 1)
            new_line = line.with_raw(f"{block_indent}\t{decl.type_part}\t{decl.name_part};")
            if new_line is not line:
                changes += 1
            result.append(new_line)
            span = DeclarationSpan(position if span is None else span.start, position)

        return result, changes, separated


class KeywordSpacer:
    """Space after if/while/return and parenthesize return expressions."""

    @staticmethod
    def _is_wrapped(expr: str) -> bool:
        if not expr.startswith('('):
            return False
        depth = 0
        for i, ch in enumerate(expr):
            if ch == '(':
                depth += 1
            elif ch == ')':
                depth -= 1
                if depth == 0:
                    return i == len(expr) - 1
        return False

    def needs_parentheses(self, expr: str) -> bool:
        return not (INTEGER_LITERAL_RE.match(expr)
                    or IDENTIFIER_RE.match(expr)
                    or self._is_wrapped(expr))

    def space_line(self, text: str) -> str:
        """Apply the three spacing rules to one line of text."""
        text = KEYWORD_PAREN_RE.sub(r'\1 (', text)
        text = BARE_RETURN_RE.sub('return ', text)

        stripped = text.strip()
        match = RETURN_STATEMENT_RE.match(stripped)
        if match and self.needs_parentheses(match.group('expr')):
            indent = text[:len(text) - len(text.lstrip())]
            text = f"{indent}return ({match.group('expr')});"
        return text

    def apply(self, lines: Sequence[Line], contexts: Sequence[ScopeContext]) -> Tuple[List[Line], int]:
        result = []
        changes = 0

        for line, ctx in zip(lines, contexts):
            if line.is_empty or _is_comment_line(line, ctx):
                result.append(line)
                continue

            new_line = line.with_raw(self.space_line(line.raw))
            if new_line is not line:
                changes += 1
            result.append(new_line)

        return result, changes


def trim_trailing_whitespace(lines: Sequence[Line]) -> Tuple[List[Line], int]:
    result = [line.with_raw(line.raw.rstrip()) for line in lines]
    changes = sum(1 for old, new in zip(lines, result) if old is not new)
    return result, changes


def insert_declaration_separators(lines: Sequence[Line],
                                  spans: Sequence[DeclarationSpan]) -> Tuple[List[Line], int]:
    """Insert one blank line after each span, shifting later spans as we go."""
    buffer = LineBuffer(lines)
    offset = 0

    for span in spans:
        end = span.end + offset
        offset += buffer.insert_after(end, Line.from_raw(end + 1, ''))

    if spans:
        logger.debug(f"Inserted {len(spans)} blank lines after declarations")
    return reindex(buffer.to_list()), len(spans)
