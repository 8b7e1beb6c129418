"""
Input validation gate for untrusted text.

Runs the XSS and SQL injection rule sets against a single string and
returns a structured verdict. Every uncertain outcome (oversized input,
slow matcher, matcher fault, undecodable escape) resolves to rejection,
and no exception crosses validate().
"""

import re
import time
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional, Tuple

from inputgate.checks.sanitizer import sanitize
from inputgate.checks.validation_policy import DEFAULT_CONFIG, EngineConfig
from .encoders import decode_percent_once, has_percent_escape
from .exceptions import AnalysisTimeoutError, ContentDecodingError, PatternAnalysisError
from .pattern_engine import Clock, RegexEngine
from .pattern_store import SQL, XSS, PatternRule, get_rules

logger = logging.getLogger(__name__)

MSG_INVALID_INPUT = "Invalid input provided"
MSG_INPUT_TOO_LONG = "Input is too long"
MSG_XSS = "Input contains potentially malicious content (XSS)"
MSG_SQL_INJECTION = "Input contains potentially malicious content (SQL Injection)"
MSG_OVER_RECOMMENDED_LENGTH = "Input is too long (maximum {limit} characters)"
MSG_SUSPICIOUS = "Input contains suspicious patterns"
MSG_INTERNAL_ERROR = "Input could not be validated"

_SPECIAL_CHAR_RUN = re.compile(r"[<>'\";&|(){}\[\]]{3,10}")
_COMPARISON_RUN = re.compile(r"[=<>!]{2,5}")


class ValidationCategory(str, Enum):
    VALID = "valid"
    INVALID = "invalid"
    XSS = "xss"
    SQL_INJECTION = "sqli"


@dataclass(frozen=True)
class ValidationVerdict:
    """Outcome of validate(). ``category`` says why, ``is_valid`` says whether."""
    is_valid: bool
    errors: Tuple[str, ...]
    category: ValidationCategory
    matched_pattern: Optional[str] = None

    @property
    def is_attack(self) -> bool:
        return self.category in (ValidationCategory.XSS, ValidationCategory.SQL_INJECTION)


def _reject(category: ValidationCategory, message: str, matched_pattern: str = None) -> ValidationVerdict:
    return ValidationVerdict(
        is_valid=False,
        errors=(message,),
        category=category,
        matched_pattern=matched_pattern,
    )


class InputValidator:
    """
    Layered XSS / SQL injection detector with fail-safe scanning.

    Holds only immutable configuration and the shared rule library, so a
    single instance may serve any number of concurrent callers. Application
    code goes through validate_input(), which always runs on DEFAULT_CONFIG
    and the real clock.
    """

    def __init__(self, *, config: EngineConfig = None, clock: Clock = time.perf_counter):
        """
        Args:
            config: Test-only override of the engine limits; the budgets
                and ceilings are fixed in production
            clock: Test-only monotonic clock in seconds
        """
        self.config = config or DEFAULT_CONFIG
        self.engine = RegexEngine(
            global_budget_ms=self.config.global_scan_budget_ms,
            per_pattern_budget_ms=self.config.per_pattern_budget_ms,
            clock=clock,
        )

    def validate(self, content: Any) -> ValidationVerdict:
        """
        Validate untrusted text.

        Args:
            content: Candidate text, of any type

        Returns:
            ValidationVerdict; never raises
        """
        if not isinstance(content, str) or not content:
            return _reject(ValidationCategory.INVALID, MSG_INVALID_INPUT)

        # Hard ceiling before any pattern work
        if len(content) > self.config.max_input_length:
            logger.warning(f"Rejected input of length {len(content)} (limit {self.config.max_input_length})")
            return _reject(ValidationCategory.INVALID, MSG_INPUT_TOO_LONG)

        try:
            return self._validate(content)
        except Exception:
            logger.exception("Unexpected validation failure, rejecting input")
            return _reject(ValidationCategory.INVALID, MSG_INTERNAL_ERROR)

    def _validate(self, content: str) -> ValidationVerdict:
        matched, rule_name = self._scan(content, XSS)
        if matched:
            return _reject(ValidationCategory.XSS, MSG_XSS, rule_name)

        matched, rule_name = self._scan(content, SQL)
        if matched:
            return _reject(ValidationCategory.SQL_INJECTION, MSG_SQL_INJECTION, rule_name)

        errors = []
        if len(content) > self.config.max_valid_length:
            errors.append(MSG_OVER_RECOMMENDED_LENGTH.format(limit=self.config.max_valid_length))

        if self.contains_suspicious_patterns(content):
            errors.append(MSG_SUSPICIOUS)

        return ValidationVerdict(
            is_valid=not errors,
            errors=tuple(errors),
            category=ValidationCategory.VALID,
        )

    def contains_xss(self, content: str) -> bool:
        return self._scan(content, XSS)[0]

    def contains_sql_injection(self, content: str) -> bool:
        return self._scan(content, SQL)[0]

    def _scan(self, content: str, category: str) -> Tuple[bool, Optional[str]]:
        """
        Run one rule category with the deny-on-doubt policy.

        Returns:
            (matched, rule name or failure marker)
        """
        if len(content) > self.config.max_attack_scan_length:
            logger.warning(
                f"{category} scan skipped for oversized input ({len(content)} > "
                f"{self.config.max_attack_scan_length}), treating as match"
            )
            return True, "oversized_input"

        rules: Tuple[PatternRule, ...] = get_rules(category)
        try:
            result = self.engine.match(content, rules)
        except AnalysisTimeoutError as e:
            logger.warning(f"{category} scan over budget at rule {e.pattern}, treating as match")
            return True, "scan_timeout"
        except PatternAnalysisError as e:
            logger.warning(f"{category} scan fault at rule {e.pattern}, treating as match")
            return True, "scan_error"

        if result:
            logger.info(
                f"{result.attack_type} signature '{result.matched_pattern}' matched "
                f"in {result.processing_time_ms:.2f}ms"
            )
            return True, result.matched_pattern

        logger.debug(f"{category} scan clean for input of length {len(content)}")
        return False, None

    def contains_suspicious_patterns(self, content: str) -> bool:
        """
        Secondary heuristics run after both attack scans came back clean.

        Args:
            content: Text that passed the XSS and SQL injection scans

        Returns:
            True if the text looks hostile without matching a signature
        """
        if len(content) > self.config.max_suspicious_scan_length:
            return True

        if _SPECIAL_CHAR_RUN.search(content):
            return True

        if _COMPARISON_RUN.search(content):
            return True

        if has_percent_escape(content):
            # Probe size is capped before decoding to bound the work
            if len(content) > self.config.max_encoded_probe_length:
                return True
            try:
                decoded = decode_percent_once(content)
            except ContentDecodingError:
                return True
            if len(decoded) > self.config.max_decoded_probe_length:
                return True
            return decoded != content

        return False

    def sanitize(self, content: Any) -> str:
        return sanitize(content, max_length=self.config.max_sanitize_length)


_default_validator: Optional[InputValidator] = None


def get_validator() -> InputValidator:
    """
    Get the shared validator with lazy initialization.

    Returns:
        Process-wide InputValidator instance
    """
    global _default_validator

    if _default_validator is None:
        _default_validator = InputValidator()

    return _default_validator


def validate_input(content: Any) -> ValidationVerdict:
    return get_validator().validate(content)


def sanitize_input(content: Any) -> str:
    return get_validator().sanitize(content)
