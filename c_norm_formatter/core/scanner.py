"""
Source Scanner Module

This module runs the compliance checker over C source files and
directories and keeps the per-file results for reporting.
"""

import os
from typing import List, Dict, Optional
from pathlib import Path
import logging

from .checker import ComplianceChecker, Diagnostic
from .config import NormConfig
from .lines import split_document
from .pipeline import FormatPipeline

logger = logging.getLogger(__name__)

SOURCE_SUFFIXES = ('.c', '.h')


class ScanResult:
    """Represents the result of checking a single file."""

    def __init__(self, filepath: str, status: str, diagnostics: List[Diagnostic] = None,
                 line_count: int = 0):
        self.filepath = filepath
        self.status = status  # 'OK' or 'Error'
        self.diagnostics = diagnostics or []
        self.error_count = len(self.diagnostics)
        self.line_count = line_count

    @property
    def rules(self) -> List[str]:
        return sorted({d.rule for d in self.diagnostics})

    def to_dict(self) -> Dict:
        return {
            'filepath': self.filepath,
            'status': self.status,
            'error_count': self.error_count,
            'line_count': self.line_count,
            'diagnostics': [d.to_dict() for d in self.diagnostics],
        }

    def __repr__(self):
        return f"ScanResult(filepath='{self.filepath}', status='{self.status}', errors={self.error_count})"


class SourceScanner:
    """
    Scanner class for checking C files against the norm.

    This class provides methods to:
    - Check individual files or entire directories
    - Filter results by status or rule
    - Generate summary statistics
    """

    def __init__(self, config: Optional[NormConfig] = None):
        """
        Initialize the scanner.

        Args:
            config: Norm limits; with ``check_formatted`` set, files are
                checked as they would be after formatting
        """
        self.config = config
        self.checker = ComplianceChecker(config)
        self.pipeline = FormatPipeline(config)
        self.results: List[ScanResult] = []

    def check_text(self, text: str) -> List[Diagnostic]:
        """Return the diagnostics for a document held in memory."""
        if self.pipeline.config.check_formatted:
            return self.pipeline.run(text).diagnostics
        lines, _ = split_document(text)
        return self.checker.check(lines).diagnostics

    def scan_file(self, filepath: str) -> ScanResult:
        """
        Check a single C file.

        Args:
            filepath: Path to the C file

        Returns:
            ScanResult object
        """
        if not os.path.exists(filepath):
            logger.error(f"File not found: {filepath}")
            return ScanResult(filepath, "Error", [Diagnostic(0, "File not found", 'FILE_NOT_FOUND')])

        if not filepath.endswith(SOURCE_SUFFIXES):
            logger.warning(f"Skipping non-C file: {filepath}")
            return ScanResult(filepath, "OK")

        try:
            with open(filepath, 'r', encoding='utf-8', newline='') as f:
                text = f.read()
        except (OSError, UnicodeDecodeError) as e:
            logger.error(f"Failed to read {filepath}: {e}")
            return ScanResult(filepath, "Error", [Diagnostic(0, f"Unreadable file: {e}", 'FILE_UNREADABLE')])

        diagnostics = self.check_text(text)
        line_count = len(split_document(text)[0])
        status = "Error" if diagnostics else "OK"
        return ScanResult(filepath, status, diagnostics, line_count)

    def scan_directory(self, directory: str, recursive: bool = True) -> List[ScanResult]:
        """
        Check all C files in a directory.

        Args:
            directory: Path to the directory
            recursive: Whether to scan subdirectories

        Returns:
            List of ScanResult objects
        """
        results = []
        path = Path(directory)

        if not path.exists():
            logger.error(f"Directory not found: {directory}")
            return results

        all_files = []
        for suffix in SOURCE_SUFFIXES:
            pattern = f"**/*{suffix}" if recursive else f"*{suffix}"
            all_files.extend(sorted(path.glob(pattern)))

        logger.info(f"Found {len(all_files)} C/H files to scan")

        for file_path in all_files:
            results.append(self.scan_file(str(file_path)))

        self.results = results
        return results

    def get_summary(self) -> Dict:
        """
        Get summary statistics of scan results.

        Returns:
            Dictionary with summary statistics
        """
        if not self.results:
            return {}

        total_files = len(self.results)
        ok_files = len([r for r in self.results if r.status == "OK"])
        total_errors = sum(r.error_count for r in self.results)

        rule_counts = {}
        for result in self.results:
            for diagnostic in result.diagnostics:
                rule_counts[diagnostic.rule] = rule_counts.get(diagnostic.rule, 0) + 1

        return {
            'total_files': total_files,
            'ok_files': ok_files,
            'error_files': total_files - ok_files,
            'total_errors': total_errors,
            'rules': rule_counts,
            'success_rate': ok_files / total_files * 100
        }

    def filter_results(self, status: Optional[str] = None, rule: Optional[str] = None) -> List[ScanResult]:
        """Filter scan results by status or rule."""
        filtered = self.results

        if status:
            filtered = [r for r in filtered if r.status == status]

        if rule:
            filtered = [r for r in filtered if any(d.rule == rule for d in r.diagnostics)]

        return filtered
