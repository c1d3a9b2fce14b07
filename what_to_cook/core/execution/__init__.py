"""Execution module for the What To Cook API.

Provides error classification for the recipe pipeline.
"""

from what_to_cook.core.execution.error_classifier import ErrorCategory, ErrorClassifier

__all__ = ["ErrorCategory", "ErrorClassifier"]
