"""
Unit tests for the source scanner and the file aggregator.
"""

import logging
from pathlib import Path

from c_norm_formatter.core.aggregator import FileAggregator, FileStatus
from c_norm_formatter.core.checker import Diagnostic
from c_norm_formatter.core.config import NormConfig
from c_norm_formatter.core.scanner import SourceScanner, ScanResult


CLEAN = "int main(void)\n{\n\treturn (0);\n}\n"
DIRTY = "int g_count;\n\nint main(void)\n{\n\tgoto end;\n}\n"


def write(path: Path, content: str) -> str:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding='utf-8')
    return str(path)


class TestScanResult:
    """Test the ScanResult class."""

    def test_counts_and_rules(self):
        """Test derived fields."""
        result = ScanResult("a.c", "Error", [
            Diagnostic(1, "x", 'GLOBAL_VAR'), Diagnostic(2, "y", 'GLOBAL_VAR'),
            Diagnostic(3, "z", 'TOO_LONG_LINE')])

        assert result.error_count == 3
        assert result.rules == ['GLOBAL_VAR', 'TOO_LONG_LINE']
        assert result.to_dict()['diagnostics'][2]['rule'] == 'TOO_LONG_LINE'


class TestSourceScanner:
    """Test the SourceScanner class."""

    def setup_method(self):
        """Set up test fixtures."""
        self.scanner = SourceScanner()

    def test_scan_clean_file(self, tmp_path):
        """Test a compliant file."""
        result = self.scanner.scan_file(write(tmp_path / "main.c", CLEAN))

        assert result.status == "OK"
        assert result.error_count == 0
        assert result.line_count == 5

    def test_scan_dirty_file(self, tmp_path):
        """Test diagnostics are collected in order."""
        result = self.scanner.scan_file(write(tmp_path / "main.c", DIRTY))

        assert result.status == "Error"
        assert [(d.line, d.rule) for d in result.diagnostics] == [
            (1, 'GLOBAL_VAR'), (5, 'FORBIDDEN_KEYWORD')]

    def test_missing_file(self, tmp_path):
        """Test a missing file is reported as an error result."""
        result = self.scanner.scan_file(str(tmp_path / "nope.c"))

        assert result.status == "Error"
        assert result.rules == ['FILE_NOT_FOUND']

    def test_non_c_file_is_skipped(self, tmp_path):
        """Test files without a C suffix are not checked."""
        result = self.scanner.scan_file(write(tmp_path / "notes.txt", "int x;\n"))

        assert result.status == "OK"
        assert result.diagnostics == []

    def test_check_formatted_checks_the_output(self):
        """Test check_formatted runs the checker on formatted text."""
        text = "int main(void) {\n\treturn (0);\n}"

        assert SourceScanner().check_text(text) == []
        assert SourceScanner(NormConfig(check_formatted=True)).check_text(text) == []
        assert SourceScanner(NormConfig(max_line_length=10, check_formatted=True)) \
            .check_text(text)[0].rule == 'TOO_LONG_LINE'

    def test_scan_directory(self, tmp_path):
        """Test recursive and flat directory scans."""
        write(tmp_path / "a.c", CLEAN)
        write(tmp_path / "b.h", DIRTY)
        write(tmp_path / "sub" / "c.c", CLEAN)
        write(tmp_path / "README.md", "# readme\n")

        assert len(self.scanner.scan_directory(str(tmp_path), recursive=False)) == 2
        results = self.scanner.scan_directory(str(tmp_path))
        assert len(results) == 3

        summary = self.scanner.get_summary()
        assert summary['total_files'] == 3
        assert summary['ok_files'] == 2
        assert summary['rules'] == {'GLOBAL_VAR': 1, 'FORBIDDEN_KEYWORD': 1}

        assert [Path(r.filepath).name for r in self.scanner.filter_results(status="Error")] == ["b.h"]
        assert len(self.scanner.filter_results(rule='GLOBAL_VAR')) == 1

    def test_scan_missing_directory(self, tmp_path):
        """Test a missing directory yields no results."""
        assert self.scanner.scan_directory(str(tmp_path / "nope")) == []
        assert self.scanner.get_summary() == {}


class TestFileAggregator:
    """Test the FileAggregator class."""

    def setup_method(self):
        """Set up test fixtures."""
        self.aggregator = FileAggregator()

    def add(self, filepath, *rules):
        diagnostics = [Diagnostic(i + 1, rule.lower(), rule) for i, rule in enumerate(rules)]
        self.aggregator.add_scan_result(
            ScanResult(filepath, "Error" if rules else "OK", diagnostics, line_count=10))

    def test_status_from_severity(self):
        """Test file status follows the worst rule severity."""
        self.add("ok.c")
        self.add("long.c", 'TOO_LONG_LINE')
        self.add("global.c", 'TOO_LONG_LINE', 'GLOBAL_VAR')
        self.add("missing.c", 'FILE_NOT_FOUND')

        statuses = {f.filename: f.status for f in self.aggregator.files}
        assert statuses == {
            "ok.c": FileStatus.OK,
            "long.c": FileStatus.WARNING,
            "global.c": FileStatus.ERROR,
            "missing.c": FileStatus.CRITICAL,
        }

    def test_adding_a_file_twice_replaces_it(self, caplog):
        """Test re-adding a file keeps one entry."""
        self.add("a.c", 'GLOBAL_VAR')
        with caplog.at_level(logging.DEBUG, logger="c_norm_formatter.core.aggregator"):
            self.add("a.c")

        assert "Replaced result for a.c" in caplog.text

        assert len(self.aggregator.files) == 1
        assert self.aggregator.files[0].status == FileStatus.OK

    def test_filters_and_ranking(self):
        """Test filtering and weighted ranking."""
        self.add("a.c", 'TOO_LONG_LINE', 'TOO_LONG_LINE', 'TOO_LONG_LINE')
        self.add("b.c", 'GLOBAL_VAR')
        self.add("c.c")

        assert [f.filename for f in self.aggregator.filter_files(rule='GLOBAL_VAR')] == ["b.c"]
        assert [f.filename for f in self.aggregator.filter_files(min_errors=2)] == ["a.c"]
        assert [f.filename for f in self.aggregator.get_most_problematic_files()] == ["b.c", "a.c"]

    def test_summary_and_report(self):
        """Test project summary and the exported report."""
        self.add("a.c", 'TOO_LONG_LINE')
        self.add("b.c")

        summary = self.aggregator.generate_project_summary()
        assert summary.total_files == 2
        assert summary.ok_files == 1
        assert summary.warning_files == 1
        assert summary.success_rate == 50.0
        assert summary.total_lines == 20

        report = self.aggregator.export_report()
        assert set(report) == {'summary', 'recommendations', 'files'}
        assert report['files'][0]['diagnostics'][0]['rule'] == 'TOO_LONG_LINE'
        assert any(r.startswith('TOO_LONG_LINE') for r in report['recommendations'])

    def test_no_recommendations_without_files(self):
        """Test an empty project has no recommendations."""
        assert self.aggregator.get_recommendations() == []
