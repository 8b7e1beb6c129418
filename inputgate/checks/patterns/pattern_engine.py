"""
Timed regex engine for the validation gate.

Python's ``re`` cannot be interrupted mid-match, so budgets are enforced
between matcher invocations: each rule is timed individually and the scan
as a whole is timed against a global budget. Overruns and matcher faults
are raised to the caller, which treats them as detections.
"""

import time
import logging
from dataclasses import dataclass
from typing import Callable, Optional, Sequence

from .exceptions import AnalysisTimeoutError, PatternAnalysisError
from .pattern_store import PatternRule

logger = logging.getLogger(__name__)

Clock = Callable[[], float]


@dataclass
class MatchResult:
    """Result of a category scan that found a signature."""
    is_match: bool
    attack_type: str
    matched_pattern: str = None
    processing_time_ms: float = 0.0


class RegexEngine:
    """
    Ordered, first-match-wins regex scan with time budgets.

    The engine holds no per-call state and can be shared between threads.
    """

    def __init__(self, global_budget_ms: float, per_pattern_budget_ms: float, clock: Clock = time.perf_counter):
        """
        Args:
            global_budget_ms: Maximum cumulative time for one scan
            per_pattern_budget_ms: Maximum time for a single rule
            clock: Monotonic clock returning seconds
        """
        self.engine_name = "regex"
        self.global_budget_ms = global_budget_ms
        self.per_pattern_budget_ms = per_pattern_budget_ms
        self.clock = clock

    def match(self, content: str, rules: Sequence[PatternRule]) -> Optional[MatchResult]:
        """
        Scan content against rules in order.

        Args:
            content: Text to scan
            rules: Compiled rules of one category

        Returns:
            MatchResult for the first matching rule, None when nothing matched

        Raises:
            AnalysisTimeoutError: If a rule or the whole scan exceeds its budget
            PatternAnalysisError: If a rule raises while matching
        """
        scan_start = self.clock()

        for rule in rules:
            elapsed_ms = (self.clock() - scan_start) * 1000
            if elapsed_ms > self.global_budget_ms:
                raise AnalysisTimeoutError(self.global_budget_ms, elapsed_ms, pattern=rule.name)

            rule_start = self.clock()
            try:
                found = rule.compiled.search(content)
            except Exception as e:
                raise PatternAnalysisError(
                    f"Rule {rule.name} failed: {e}",
                    pattern=rule.name,
                    content_length=len(content),
                ) from e
            rule_end = self.clock()

            rule_ms = (rule_end - rule_start) * 1000
            if rule_ms > self.per_pattern_budget_ms:
                raise AnalysisTimeoutError(self.per_pattern_budget_ms, rule_ms, pattern=rule.name)

            if found:
                return MatchResult(
                    is_match=True,
                    attack_type=rule.category.upper(),
                    matched_pattern=rule.name,
                    processing_time_ms=(rule_end - scan_start) * 1000,
                )

        elapsed_ms = (self.clock() - scan_start) * 1000
        if elapsed_ms > self.global_budget_ms:
            raise AnalysisTimeoutError(self.global_budget_ms, elapsed_ms)

        return None
