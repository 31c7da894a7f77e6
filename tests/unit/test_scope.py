"""
Unit tests for the lexical state tracker.

These tests cover:
- Brace depth accounting per line
- Function body entry
- Block comment tracking
"""

from c_norm_formatter.core.lines import Line
from c_norm_formatter.core.scope import ScopeTracker, compute_scopes


def make_lines(*raws):
    return [Line.from_raw(i, raw) for i, raw in enumerate(raws)]


class TestBraceDepth:
    """Test brace depth and function body detection."""

    def test_simple_function(self):
        """Test depth and body flags across a small function."""
        contexts = compute_scopes(make_lines("int main()", "{", "int x = 5;", "return 0;", "}"))

        assert [c.brace_depth for c in contexts] == [0, 1, 1, 1, 0]
        assert [c.in_function_body for c in contexts] == [False, True, True, True, False]
        assert [c.enters_function for c in contexts] == [False, True, False, False, False]
        assert [c.inside_body for c in contexts] == [False, False, True, True, False]

    def test_braces_count_once_per_line(self):
        """Test several braces on one line move the depth by one."""
        contexts = compute_scopes(make_lines("{ {", "x;"))

        assert contexts[0].brace_depth == 1
        assert contexts[1].brace_depth == 1

    def test_close_and_open_on_one_line(self):
        """Test '} else {' keeps the depth."""
        contexts = compute_scopes(make_lines("{", "} else {", "}"))

        assert [c.brace_depth for c in contexts] == [1, 1, 0]
        assert contexts[1].depth_before == 1

    def test_depth_never_goes_negative(self):
        """Test stray closing braces clamp at zero."""
        contexts = compute_scopes(make_lines("}", "}", "{"))

        assert [c.brace_depth for c in contexts] == [0, 0, 1]
        assert contexts[2].enters_function


class TestBlockComments:
    """Test block comment tracking."""

    def test_braces_inside_comments_are_ignored(self):
        """Test braces in a multi-line comment do not change depth."""
        contexts = compute_scopes(make_lines("/* start", "{", "*/", "{"))

        assert [c.in_block_comment for c in contexts] == [True, True, True, False]
        assert [c.brace_depth for c in contexts] == [0, 0, 0, 1]

    def test_single_line_comment_closes(self):
        """Test a balanced comment line does not leave comment state."""
        contexts = compute_scopes(make_lines("/* note */", "int x;"))

        assert contexts[0].in_block_comment
        assert not contexts[1].in_block_comment

    def test_close_then_open_stays_in_comment(self):
        """Test '*/ ... /*' ends the line inside a comment."""
        contexts = compute_scopes(make_lines("/* a", "*/ b /*", "c", "*/", "d"))

        assert [c.in_block_comment for c in contexts] == [True, True, True, True, False]

    def test_trailing_comment_after_code(self):
        """Test code followed by a comment opener is a code line."""
        tracker = ScopeTracker()

        first = tracker.advance(Line.from_raw(0, "x = 1; /* starts"))
        second = tracker.advance(Line.from_raw(1, "still comment { */"))

        assert not first.in_block_comment
        assert second.in_block_comment
        assert tracker.depth == 0
        assert not tracker.in_comment

    def test_code_after_a_closed_leading_comment(self):
        """Test a leading comment closed mid-line leaves a code line."""
        contexts = compute_scopes(make_lines("/* x */ for (;;)", "/* a */ /* b */", "/* c */ y; /* d"))

        assert [c.in_block_comment for c in contexts] == [False, True, True]
