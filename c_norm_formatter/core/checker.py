"""
Compliance Checker

This module runs the read-only norm checks over a document and produces
advisory diagnostics. It never rewrites a line.

Checks, in the order they are reported for a single line:
- FORBIDDEN_KEYWORD: for, do, switch, case or goto used as a word
- TOO_LONG_LINE: more than 80 characters
- TOO_MANY_LINES: function body longer than 25 non-empty lines
- TOO_MANY_FUNCS: more than 5 functions in the file
- GLOBAL_VAR: non-static variable declared at file scope
"""

import re
from typing import List, Optional, Sequence
from dataclasses import dataclass, field
import logging

from .config import NormConfig, DEFAULT_CONFIG
from .lines import Line
from .patterns import find_forbidden_keyword, match_declaration, match_function_signature
from .scope import ScopeContext, compute_scopes

logger = logging.getLogger(__name__)

STATIC_PREFIX_RE = re.compile(r"static\b")


@dataclass(frozen=True)
class Diagnostic:
    """A norm violation tied to a 1-based line number."""
    line: int
    message: str
    rule: str = ""

    def to_dict(self):
        return {'line': self.line, 'message': self.message, 'rule': self.rule}

    def __str__(self):
        return f"Line {self.line}: {self.message}"


@dataclass
class FunctionRecord:
    """A function body found by the checker."""
    start_line: int
    body_line_count: int = 0


@dataclass
class CheckResult:
    """Everything one checker run produced."""
    diagnostics: List[Diagnostic] = field(default_factory=list)
    functions: List[FunctionRecord] = field(default_factory=list)
    function_count: int = 0
    global_count: int = 0


class ComplianceChecker:
    """
    Norm compliance checker.

    The checker keeps no state between calls to ``check``; every run builds
    its own counters and diagnostic list.
    """

    def __init__(self, config: Optional[NormConfig] = None):
        self.config = config or DEFAULT_CONFIG

    def _is_signature(self, lines: Sequence[Line], position: int, ctx: ScopeContext) -> bool:
        if ctx.depth_before != 0 or ctx.brace_depth != 0:
            return False
        if position + 1 >= len(lines) or lines[position + 1].trimmed != '{':
            return False
        return match_function_signature(lines[position].trimmed)

    def check(self, lines: Sequence[Line], contexts: Optional[Sequence[ScopeContext]] = None) -> CheckResult:
        """
        Check a document.

        Args:
            lines: Document lines
            contexts: Scope contexts for exactly these lines (computed if omitted)

        Returns:
            CheckResult with diagnostics in line order
        """
        if contexts is None:
            contexts = compute_scopes(lines)

        config = self.config
        result = CheckResult()
        diagnostics = result.diagnostics
        current: Optional[FunctionRecord] = None
        previous_signature = False

        for position, (line, ctx) in enumerate(zip(lines, contexts)):
            number = position + 1
            is_comment = ctx.in_block_comment

            if ctx.enters_function:
                current = FunctionRecord(start_line=number)
                if previous_signature:
                    result.functions.append(current)

            if not is_comment:
                keyword = find_forbidden_keyword(line.raw, config.forbidden_keywords)
                if keyword:
                    diagnostics.append(Diagnostic(
                        number, f"Forbidden control structure '{keyword}'", 'FORBIDDEN_KEYWORD'))

                if len(line.raw) > config.max_line_length:
                    diagnostics.append(Diagnostic(
                        number,
                        f"Line too long ({len(line.raw)}/{config.max_line_length})",
                        'TOO_LONG_LINE'))

            if current is not None and ctx.inside_body and not line.is_empty:
                current.body_line_count += 1
                if current.body_line_count > config.max_function_lines:
                    diagnostics.append(Diagnostic(
                        number,
                        f"Function has too many lines ({current.body_line_count}/{config.max_function_lines})",
                        'TOO_MANY_LINES'))

            previous_signature = self._is_signature(lines, position, ctx)
            if previous_signature:
                result.function_count += 1
                if result.function_count == config.max_functions + 1:
                    diagnostics.append(Diagnostic(
                        number,
                        f"Too many functions in file ({result.function_count}/{config.max_functions})",
                        'TOO_MANY_FUNCS'))

            if (not is_comment and ctx.depth_before == 0 and ctx.brace_depth == 0
                    and not STATIC_PREFIX_RE.match(line.trimmed)
                    and match_declaration(line.trimmed)):
                result.global_count += 1
                diagnostics.append(Diagnostic(
                    number, "Global variable must be declared static", 'GLOBAL_VAR'))

            if ctx.brace_depth == 0:
                current = None

        logger.debug(f"Checked {len(lines)} lines: {len(diagnostics)} diagnostics, "
                     f"{result.function_count} functions")
        return result
