"""
Core modules: line model, scope tracking, pattern matching, rewrite passes,
compliance checking and the pipeline that ties them together.
"""

from .checker import ComplianceChecker, Diagnostic
from .pipeline import FormatPipeline, PipelineResult
from .formatter import AutoFormatter
from .scanner import SourceScanner
from .aggregator import FileAggregator

__all__ = [
    'ComplianceChecker',
    'Diagnostic',
    'FormatPipeline',
    'PipelineResult',
    'AutoFormatter',
    'SourceScanner',
    'FileAggregator'
]
