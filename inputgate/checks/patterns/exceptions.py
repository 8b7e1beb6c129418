"""
Custom exceptions for the validation pattern system.

None of these cross the public validate() boundary: the validator
turns every one of them into a deny verdict.
"""

import logging

logger = logging.getLogger(__name__)


class PatternAnalysisError(Exception):
    """Base exception for pattern analysis errors."""

    def __init__(self, message: str, pattern: str = None, content_length: int = None):
        self.pattern = pattern
        self.content_length = content_length
        super().__init__(message)
        logger.error(f"Pattern analysis error: {message}")


class RegexComplexityError(PatternAnalysisError):
    """Raised when a rule uses an unbounded or nested quantifier."""

    def __init__(self, pattern: str, reason: str):
        message = f"Regex pattern rejected ({reason}): {pattern[:50]}..."
        super().__init__(message, pattern=pattern)


class PatternCompilationError(PatternAnalysisError):
    """Raised when regex pattern compilation fails."""

    def __init__(self, pattern: str, error: str):
        message = f"Failed to compile regex pattern: {error}"
        super().__init__(message, pattern=pattern)


class ContentDecodingError(PatternAnalysisError):
    """Raised when a percent-encoded probe cannot be decoded."""

    def __init__(self, content_length: int, reason: str):
        message = f"Failed to percent-decode content ({reason})"
        super().__init__(message, content_length=content_length)


class AnalysisTimeoutError(PatternAnalysisError):
    """Raised when a scan exceeds its global or per-pattern time budget."""

    def __init__(self, budget_ms: float, elapsed_ms: float, pattern: str = None):
        message = f"Pattern analysis exceeded {budget_ms}ms budget ({elapsed_ms:.2f}ms elapsed)"
        super().__init__(message, pattern=pattern)
        self.budget_ms = budget_ms
        self.elapsed_ms = elapsed_ms
