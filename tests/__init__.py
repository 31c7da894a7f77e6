"""
Test package for 42-c-format.

This package contains:
- Unit tests for the line model, scope tracker, matchers, passes and checker
- Property-based tests using Hypothesis
- Integration tests for the pipeline, the CLI and the HTTP API
"""
