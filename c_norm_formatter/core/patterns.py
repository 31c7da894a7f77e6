"""
Pattern Matchers

Stateless predicates and extractors used by the rewrite passes and the
compliance checker: variable declarations, forbidden keywords, inline
opening braces and function signatures.
"""

import re
from functools import lru_cache
from typing import Optional, Sequence
from dataclasses import dataclass


QUALIFIERS = ('const', 'static', 'extern', 'volatile', 'unsigned', 'signed')
BASE_TYPES = ('char', 'int', 'short', 'long', 'float', 'double', 'void')
AGGREGATE_KEYWORDS = ('struct', 'enum', 'union')
FORBIDDEN_KEYWORDS = ('for', 'do', 'switch', 'case', 'goto')

_QUALIFIER_RE = r'(?:(?:' + '|'.join(QUALIFIERS) + r')\s+)*'
_BASE_TYPE_RE = (
    r'(?:'
    r'(?:(?:short|long)\s+)*(?:' + '|'.join(BASE_TYPES) + r')\b'
    r'|(?:' + '|'.join(AGGREGATE_KEYWORDS) + r')\s+\w+'
    r'|t_\w+|\w+_t\b'
    r')'
)

DECLARATION_RE = re.compile(
    r'^(?P<type>' + _QUALIFIER_RE + _BASE_TYPE_RE + r')'
    r'(?:\s+|\s*(?=\*))'
    r'(?P<name>\**\s*[A-Za-z_]\w*(?:\s*\[[^\]]*\])*(?:\s*=(?!=).*?)?)'
    r'\s*;$'
)

FUNCTION_SIGNATURE_RE = re.compile(r'^(?:[A-Za-z_]\w*\s+)+\**\s*[A-Za-z_]\w*\s*\(.*\)$')
INITIALIZER_OPEN_RE = re.compile(r'=\s*\{$')


@dataclass(frozen=True)
class DeclarationMatch:
    """The two halves of a recognized variable declaration."""
    type_part: str
    name_part: str


def match_declaration(trimmed_line: str) -> Optional[DeclarationMatch]:
    """
    Match a single variable declaration.

    Args:
        trimmed_line: Line text with surrounding whitespace removed

    Returns:
        DeclarationMatch, or None for prototypes, calls, control statements
        and anything else outside the declaration grammar.
    """
    match = DECLARATION_RE.match(trimmed_line)
    if not match:
        return None

    name_part = match.group('name').strip()
    if name_part.count('{') != name_part.count('}'):
        return None

    type_part = ' '.join(match.group('type').split())
    return DeclarationMatch(type_part=type_part, name_part=name_part)


@lru_cache(maxsize=None)
def _keyword_pattern(keywords):
    return re.compile(r'\b(' + '|'.join(map(re.escape, keywords)) + r')\b')


def find_forbidden_keyword(line: str, keywords: Sequence[str] = FORBIDDEN_KEYWORDS) -> Optional[str]:
    """Return the first whole-word forbidden keyword in a line, if any."""
    match = _keyword_pattern(tuple(keywords)).search(line)
    return match.group(1) if match else None


def match_forbidden_keyword(line: str, keywords: Sequence[str] = FORBIDDEN_KEYWORDS) -> bool:
    """True if the line uses for, do, switch, case or goto as a word."""
    return find_forbidden_keyword(line, keywords) is not None


def match_opening_brace_suffix(trimmed_line: str) -> bool:
    """True when a line opens a block inline, e.g. ``if (x) {``."""
    return (trimmed_line.endswith('{')
            and len(trimmed_line) > 1
            and not INITIALIZER_OPEN_RE.search(trimmed_line))


def match_function_signature(trimmed_line: str) -> bool:
    """Heuristic: ``<identifier> <identifier> ( ... )`` with no terminator."""
    return bool(FUNCTION_SIGNATURE_RE.match(trimmed_line))
