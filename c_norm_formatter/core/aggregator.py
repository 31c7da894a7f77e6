"""
File Aggregator Module

This module aggregates per-file scan results into project statistics,
file rankings, recommendations and exportable reports.
"""

from typing import List, Dict, Optional, Set, Tuple, Any
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
import logging

from .scanner import ScanResult

logger = logging.getLogger(__name__)


class Severity(Enum):
    """How much a rule violation matters."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


RULE_SEVERITY = {
    'TOO_LONG_LINE': Severity.LOW,
    'TOO_MANY_LINES': Severity.MEDIUM,
    'TOO_MANY_FUNCS': Severity.HIGH,
    'FORBIDDEN_KEYWORD': Severity.HIGH,
    'GLOBAL_VAR': Severity.HIGH,
    'FILE_NOT_FOUND': Severity.CRITICAL,
    'FILE_UNREADABLE': Severity.CRITICAL,
}

RULE_ADVICE = {
    'TOO_LONG_LINE': "Split long lines or move sub-expressions into variables.",
    'TOO_MANY_LINES': "Extract helper functions to keep bodies under the line limit.",
    'TOO_MANY_FUNCS': "Move functions into separate files.",
    'FORBIDDEN_KEYWORD': "Rewrite for/do/switch/case/goto with while and if.",
    'GLOBAL_VAR': "Make globals static or pass state through parameters.",
}


class FileStatus(Enum):
    """File status categories."""
    OK = "OK"
    WARNING = "Warning"
    ERROR = "Error"
    CRITICAL = "Critical"


@dataclass
class FileInfo:
    """Information about a single file."""
    filepath: str
    filename: str
    status: FileStatus
    error_count: int
    rule_counts: Dict[str, int]
    line_count: int

    @property
    def rules(self) -> Set[str]:
        return set(self.rule_counts)


@dataclass
class ProjectSummary:
    """Summary statistics for the entire project."""
    total_files: int
    ok_files: int
    warning_files: int
    error_files: int
    critical_files: int
    total_errors: int
    total_lines: int
    success_rate: float
    most_common_rules: List[Tuple[str, int]]
    severity_distribution: Dict[str, int]


class FileAggregator:
    """
    Aggregator for organizing and analyzing scan results.

    This class provides:
    - File status categorization
    - Filtering and ranking of files
    - Project-wide statistics and recommendations
    """

    def __init__(self):
        self.files: List[FileInfo] = []
        self.scan_results: Dict[str, ScanResult] = {}

    def add_scan_result(self, result: ScanResult):
        """Add or replace the result for one file."""
        self.scan_results[result.filepath] = result
        file_info = self._create_file_info(result)

        for i, existing in enumerate(self.files):
            if existing.filepath == result.filepath:
                self.files[i] = file_info
                logger.debug(f"Replaced result for {result.filepath}")
                return
        self.files.append(file_info)

    def _create_file_info(self, result: ScanResult) -> FileInfo:
        rule_counts = {}
        for diagnostic in result.diagnostics:
            rule_counts[diagnostic.rule] = rule_counts.get(diagnostic.rule, 0) + 1

        severities = {RULE_SEVERITY.get(rule, Severity.MEDIUM) for rule in rule_counts}
        if not rule_counts:
            status = FileStatus.OK
        elif Severity.CRITICAL in severities:
            status = FileStatus.CRITICAL
        elif Severity.HIGH in severities:
            status = FileStatus.ERROR
        else:
            status = FileStatus.WARNING

        return FileInfo(
            filepath=result.filepath,
            filename=Path(result.filepath).name,
            status=status,
            error_count=result.error_count,
            rule_counts=rule_counts,
            line_count=result.line_count,
        )

    def filter_files(self, status: Optional[FileStatus] = None, rule: Optional[str] = None,
                     min_errors: Optional[int] = None) -> List[FileInfo]:
        filtered = self.files

        if status:
            filtered = [f for f in filtered if f.status == status]

        if rule:
            filtered = [f for f in filtered if rule in f.rule_counts]

        if min_errors is not None:
            filtered = [f for f in filtered if f.error_count >= min_errors]

        return filtered

    def get_most_problematic_files(self, limit: int = 10) -> List[FileInfo]:
        """
        Get the files with the heaviest violations.

        Args:
            limit: Maximum number of files to return

        Returns:
            List of FileInfo objects sorted by weighted error score
        """
        weights = {Severity.LOW: 1, Severity.MEDIUM: 2, Severity.HIGH: 5, Severity.CRITICAL: 10}

        def problem_score(file_info: FileInfo) -> int:
            return sum(weights[RULE_SEVERITY.get(rule, Severity.MEDIUM)] * count
                       for rule, count in file_info.rule_counts.items())

        problematic = [f for f in self.files if f.error_count]
        return sorted(problematic, key=problem_score, reverse=True)[:limit]

    def generate_project_summary(self) -> ProjectSummary:
        """Generate project summary."""
        status_counts = {status: 0 for status in FileStatus}
        rule_totals: Dict[str, int] = {}
        severity_distribution = {severity.value: 0 for severity in Severity}

        for file_info in self.files:
            status_counts[file_info.status] += 1
            for rule, count in file_info.rule_counts.items():
                rule_totals[rule] = rule_totals.get(rule, 0) + count
                severity_distribution[RULE_SEVERITY.get(rule, Severity.MEDIUM).value] += count

        total_files = len(self.files)
        success_rate = (status_counts[FileStatus.OK] / total_files * 100) if total_files > 0 else 0.0

        return ProjectSummary(
            total_files=total_files,
            ok_files=status_counts[FileStatus.OK],
            warning_files=status_counts[FileStatus.WARNING],
            error_files=status_counts[FileStatus.ERROR],
            critical_files=status_counts[FileStatus.CRITICAL],
            total_errors=sum(f.error_count for f in self.files),
            total_lines=sum(f.line_count for f in self.files),
            success_rate=success_rate,
            most_common_rules=sorted(rule_totals.items(), key=lambda x: x[1], reverse=True)[:10],
            severity_distribution=severity_distribution,
        )

    def get_recommendations(self) -> List[str]:
        """Generate recommendations based on project analysis."""
        summary = self.generate_project_summary()
        if not summary.total_files:
            return []

        recommendations = []
        if summary.success_rate < 50:
            recommendations.append("Project has low norm compliance (<50%). Run the formatter on all files first.")
        elif summary.success_rate < 100:
            recommendations.append("Some files still violate the norm. Start with the most problematic ones.")
        else:
            recommendations.append("All files comply with the norm.")

        if summary.critical_files:
            recommendations.append(f"{summary.critical_files} files could not be checked. Fix paths or encodings.")

        for rule, count in summary.most_common_rules[:3]:
            advice = RULE_ADVICE.get(rule)
            if advice:
                recommendations.append(f"{rule} ({count} occurrences): {advice}")

        problematic = self.get_most_problematic_files(3)
        if problematic:
            recommendations.append(f"Focus on: {', '.join(f.filename for f in problematic)}")

        return recommendations

    def export_report(self) -> Dict[str, Any]:
        """Export the project report as JSON-serializable data."""
        summary = self.generate_project_summary()
        logger.info(f"Exporting report for {summary.total_files} files, {summary.total_errors} diagnostics")

        return {
            'summary': {
                'total_files': summary.total_files,
                'ok_files': summary.ok_files,
                'warning_files': summary.warning_files,
                'error_files': summary.error_files,
                'critical_files': summary.critical_files,
                'total_errors': summary.total_errors,
                'total_lines': summary.total_lines,
                'success_rate': summary.success_rate,
                'most_common_rules': summary.most_common_rules,
                'severity_distribution': summary.severity_distribution,
            },
            'recommendations': self.get_recommendations(),
            'files': [
                {
                    'filepath': f.filepath,
                    'filename': f.filename,
                    'status': f.status.value,
                    'error_count': f.error_count,
                    'rule_counts': f.rule_counts,
                    'line_count': f.line_count,
                    'diagnostics': [d.to_dict() for d in self.scan_results[f.filepath].diagnostics],
                }
                for f in self.files
            ],
        }
