"""
Pipeline Orchestrator

This module sequences the compliance check and the rewrite passes over one
document snapshot and assembles the final text.

A run is synchronous and self-contained: it splits the text, runs the
checker, recomputes scope after the only structural pass (brace split),
applies the remaining passes in order and joins the lines with the
document's own newline convention.
"""

from typing import List, Optional
from dataclasses import dataclass, field
import logging

from .checker import ComplianceChecker, Diagnostic
from .config import NormConfig, NormFormatterError, DEFAULT_CONFIG
from .lines import Line, split_document, join_document
from .passes import (
    BraceSplitter, IndentNormalizer, DeclarationFormatter, KeywordSpacer,
    trim_trailing_whitespace, insert_declaration_separators,
)
from .scope import compute_scopes

logger = logging.getLogger(__name__)


class InvalidRangeError(NormFormatterError):
    """Raised when a range request does not fit the document."""


@dataclass
class PipelineResult:
    """Formatted text plus the diagnostics of one run."""
    formatted_text: str
    diagnostics: List[Diagnostic] = field(default_factory=list)
    changes_made: int = 0

    @property
    def changed(self) -> bool:
        return self.changes_made > 0

    def to_dict(self):
        return {
            'formatted_text': self.formatted_text,
            'diagnostics': [d.to_dict() for d in self.diagnostics],
            'changes_made': self.changes_made,
        }

    def __repr__(self):
        return f"PipelineResult(changes={self.changes_made}, diagnostics={len(self.diagnostics)})"


class FormatPipeline:
    """
    Runs the norm checker and every rewrite pass over a document.

    The pipeline object only holds configuration; buffers, scope trackers
    and diagnostic lists are created per run, so one instance can serve
    any number of documents.
    """

    def __init__(self, config: Optional[NormConfig] = None):
        self.config = (config or DEFAULT_CONFIG).validate()
        self.checker = ComplianceChecker(self.config)
        self.brace_splitter = BraceSplitter()
        self.indent_normalizer = IndentNormalizer()
        self.declaration_formatter = DeclarationFormatter()
        self.keyword_spacer = KeywordSpacer()

    def _rewrite(self, lines: List[Line]):
        lines, total = self.brace_splitter.apply(lines, compute_scopes(lines))

        contexts = compute_scopes(lines)
        lines, changes = self.indent_normalizer.apply(lines, contexts)
        total += changes
        lines, changes, spans = self.declaration_formatter.apply(lines, contexts)
        total += changes
        lines, changes = self.keyword_spacer.apply(lines, contexts)
        total += changes

        lines, changes = trim_trailing_whitespace(lines)
        total += changes
        lines, changes = insert_declaration_separators(lines, spans)
        total += changes
        return lines, total

    def run(self, text: str) -> PipelineResult:
        """
        Format a whole document.

        Args:
            text: Full document text

        Returns:
            PipelineResult with the rewritten text and the diagnostics
        """
        lines, newline = split_document(text)
        if not lines:
            return PipelineResult(formatted_text=text)

        diagnostics = []
        if not self.config.check_formatted:
            diagnostics = self.checker.check(lines).diagnostics

        rewritten, changes = self._rewrite(lines)

        if self.config.check_formatted:
            diagnostics = self.checker.check(rewritten).diagnostics

        formatted = join_document(rewritten, newline)
        logger.debug(f"Formatted {len(lines)} lines into {len(rewritten)}: "
                     f"{changes} changes, {len(diagnostics)} diagnostics")
        return PipelineResult(formatted_text=formatted, diagnostics=diagnostics,
                              changes_made=changes)

    def run_range(self, text: str, start_line: int, end_line: int) -> PipelineResult:
        """
        Format a document on behalf of a range request.

        Scope depends on the whole document, so the range is only validated
        (1-based, inclusive) and the result is still the full document.
        """
        lines, _ = split_document(text)
        if start_line < 1 or end_line < start_line or end_line > max(len(lines), 1):
            raise InvalidRangeError(
                f"Invalid range {start_line}-{end_line} for a document of {len(lines)} lines")
        logger.debug(f"Range request {start_line}-{end_line}: formatting whole document")
        return self.run(text)


def format_document(text: str, config: Optional[NormConfig] = None) -> PipelineResult:
    """Format one document with a fresh pipeline."""
    return FormatPipeline(config).run(text)
