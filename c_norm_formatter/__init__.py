"""
42-c-format

A line-oriented formatter and norm checker for C sources written to the
42 school norm.
"""

__version__ = "1.0.0"

from .core.config import NormConfig, NormFormatterError, ConfigError
from .core.checker import ComplianceChecker, Diagnostic
from .core.pipeline import FormatPipeline, PipelineResult, InvalidRangeError, format_document
from .core.formatter import AutoFormatter, FormatResult
from .core.scanner import SourceScanner
from .core.aggregator import FileAggregator

__all__ = [
    'NormConfig',
    'NormFormatterError',
    'ConfigError',
    'ComplianceChecker',
    'Diagnostic',
    'FormatPipeline',
    'PipelineResult',
    'InvalidRangeError',
    'format_document',
    'AutoFormatter',
    'FormatResult',
    'SourceScanner',
    'FileAggregator'
]
