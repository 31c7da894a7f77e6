"""
Norm configuration.

Limits and switches shared by the checker, the rewrite pipeline and the
collaborators (CLI, dashboard). Defaults are the 42 norm values.
"""

from typing import Any, Dict, Tuple
from dataclasses import dataclass, field, fields
import logging

from .patterns import FORBIDDEN_KEYWORDS

logger = logging.getLogger(__name__)


class NormFormatterError(Exception):
    """Base class for caller errors raised by the formatter."""


class ConfigError(NormFormatterError):
    """Raised when a configuration value is out of range."""


@dataclass(frozen=True)
class NormConfig:
    """Limits enforced by the compliance checker."""
    max_line_length: int = 80
    max_function_lines: int = 25
    max_functions: int = 5
    forbidden_keywords: Tuple[str, ...] = field(default=FORBIDDEN_KEYWORDS)
    check_formatted: bool = False

    def validate(self) -> "NormConfig":
        for name in ('max_line_length', 'max_function_lines', 'max_functions'):
            value = getattr(self, name)
            if not isinstance(value, int) or isinstance(value, bool) or value < 1:
                raise ConfigError(f"{name} must be a positive integer, got {value!r}")
        if isinstance(self.forbidden_keywords, str):
            raise ConfigError(f"forbidden_keywords must be a list of keywords, got {self.forbidden_keywords!r}")
        if not all(isinstance(k, str) and k.isidentifier() for k in self.forbidden_keywords):
            raise ConfigError(f"forbidden_keywords must be identifiers, got {self.forbidden_keywords!r}")
        return self

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "NormConfig":
        """
        Build a configuration from a plain mapping (JSON payload, CLI options).

        Unknown keys are ignored with a warning; ``None`` values keep defaults.
        """
        known = {f.name for f in fields(cls)}
        values = {}
        for key, value in (data or {}).items():
            if key not in known:
                logger.warning(f"Ignoring unknown configuration key: {key}")
                continue
            if value is None:
                continue
            if key == 'forbidden_keywords' and not isinstance(value, str):
                value = tuple(value)
            values[key] = value
        return cls(**values).validate()

    def to_dict(self) -> Dict[str, Any]:
        return {
            'max_line_length': self.max_line_length,
            'max_function_lines': self.max_function_lines,
            'max_functions': self.max_functions,
            'forbidden_keywords': list(self.forbidden_keywords),
            'check_formatted': self.check_formatted,
        }


DEFAULT_CONFIG = NormConfig()
