"""
Unit tests for the pattern matchers.

These tests cover:
- The declaration grammar and its rejections
- Word-boundary forbidden keyword detection
- Inline brace and function signature heuristics
"""

import pytest

from c_norm_formatter.core.patterns import (
    DeclarationMatch, match_declaration, match_forbidden_keyword, find_forbidden_keyword,
    match_opening_brace_suffix, match_function_signature
)


class TestMatchDeclaration:
    """Test the declaration matcher."""

    @pytest.mark.parametrize("line,type_part,name_part", [
        ("int x = 5;", "int", "x = 5"),
        ("int\tx;", "int", "x"),
        ("char *str;", "char", "*str"),
        ("char **argv;", "char", "**argv"),
        ("unsigned   int  count;", "unsigned int", "count"),
        ('static const char *s = "a";', "static const char", '*s = "a"'),
        ("struct s_list *node;", "struct s_list", "*node"),
        ("long long total;", "long long", "total"),
        ("t_list *lst;", "t_list", "*lst"),
        ("size_t len;", "size_t", "len"),
        ("int tab[10];", "int", "tab[10]"),
        ("int a[] = {1, 2};", "int", "a[] = {1, 2}"),
        ("char c = ';';", "char", "c = ';'"),
    ])
    def test_recognized_declarations(self, line, type_part, name_part):
        """Test declarations split into type and name parts."""
        assert match_declaration(line) == DeclarationMatch(type_part, name_part)

    @pytest.mark.parametrize("line", [
        "int main(void);",
        "int main()",
        "return x;",
        "x = 5;",
        "if (x);",
        "int x, y;",
        'printf("%d", x);',
        "int x = 5",
        "intx;",
        "int x = {1;",
        "int x; // trailing comment",
        "",
    ])
    def test_rejected_lines(self, line):
        """Test prototypes, statements and malformed lines are not declarations."""
        assert match_declaration(line) is None


class TestForbiddenKeywords:
    """Test forbidden keyword detection."""

    @pytest.mark.parametrize("line", [
        "for (i = 0; i < 10; i++)",
        "\tdo",
        "switch (c)",
        "case 1:",
        "goto end;",
        "} while (x); do {",
    ])
    def test_detects_keywords(self, line):
        """Test whole-word forbidden keywords are found."""
        assert match_forbidden_keyword(line)

    @pytest.mark.parametrize("line", [
        "formatter(x);",
        "int format;",
        "do_stuff();",
        "x = forward + casez;",
        "gotoxy(1, 2);",
    ])
    def test_ignores_identifiers_containing_keywords(self, line):
        """Test identifiers that merely contain a keyword do not match."""
        assert not match_forbidden_keyword(line)

    def test_find_returns_keyword(self):
        """Test the extractor returns the keyword itself."""
        assert find_forbidden_keyword("\tgoto end;") == "goto"
        assert find_forbidden_keyword("x = 1;") is None

    def test_custom_keyword_set(self):
        """Test a custom keyword set replaces the default one."""
        assert match_forbidden_keyword("while (x)", ("while",))
        assert not match_forbidden_keyword("for (;;)", ("while",))


class TestBraceAndSignature:
    """Test inline brace and function signature heuristics."""

    @pytest.mark.parametrize("line,expected", [
        ("if (x) {", True),
        ("} else {", True),
        ("int main(void) {", True),
        ("{", False),
        ("}", False),
        ("int a[] = {", False),
        ("int a[] ={", False),
        ("x = y;", False),
    ])
    def test_opening_brace_suffix(self, line, expected):
        """Test which lines open a block inline."""
        assert match_opening_brace_suffix(line) is expected

    @pytest.mark.parametrize("line,expected", [
        ("int main()", True),
        ("int\tmain(void)", True),
        ("static int ft_len(char *s)", True),
        ("char *ft_dup(const char *s)", True),
        ("main()", False),
        ("int main(void);", False),
        ("return (x);", False),
    ])
    def test_function_signature(self, line, expected):
        """Test the function signature heuristic."""
        assert match_function_signature(line) is expected
