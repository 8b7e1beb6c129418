"""
Input Validation Pattern System

This package inspects untrusted text for cross-site scripting and SQL
injection signatures before it is echoed back to a browser. Features include:

- Fixed XSS and SQL injection rule sets with bounded quantifiers only
- Per-rule and per-scan time budgets with deny-on-timeout
- Deny-on-error handling for matcher faults and undecodable escapes
- Secondary heuristics for special-character runs and percent-encoding

Main Components:
- InputValidator: Primary validation interface
- RegexEngine: Timed first-match-wins rule scan
- PatternRule: Compiled attack signature

Usage:
    from inputgate.checks.patterns import validate_input, sanitize_input

    verdict = validate_input(text)
    if verdict.is_valid:
        safe = sanitize_input(text)
"""

from .pattern_store import PatternRule, XSS_RULES, SQL_RULES, get_rules
from .input_validator import (
    InputValidator,
    ValidationCategory,
    ValidationVerdict,
    get_validator,
    sanitize_input,
    validate_input,
)
from .encoders import decode_percent_once, has_percent_escape
from .pattern_engine import MatchResult, RegexEngine
from .exceptions import (
    PatternAnalysisError,
    RegexComplexityError,
    ContentDecodingError,
    PatternCompilationError,
    AnalysisTimeoutError
)

__version__ = "1.0.0"

__all__ = [
    # Validation interface
    'InputValidator',
    'ValidationCategory',
    'ValidationVerdict',
    'get_validator',
    'validate_input',
    'sanitize_input',

    # Rule library
    'PatternRule',
    'XSS_RULES',
    'SQL_RULES',
    'get_rules',

    # Content processing
    'has_percent_escape',
    'decode_percent_once',

    # Pattern engine
    'MatchResult',
    'RegexEngine',

    # Exceptions
    'PatternAnalysisError',
    'RegexComplexityError',
    'ContentDecodingError',
    'PatternCompilationError',
    'AnalysisTimeoutError'
]
