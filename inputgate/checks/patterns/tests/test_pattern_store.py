"""
Tests for the built-in signature library.

These tests validate that every shipped rule is bounded and that the
compile-time complexity check rejects backtracking-prone constructs.
"""

import pytest

from inputgate.checks.patterns.pattern_store import (
    SQL, SQL_RULES, XSS, XSS_RULES,
    PatternRule, compile_rule, find_complexity_violation, get_rules
)
from inputgate.checks.patterns.exceptions import (
    PatternCompilationError, RegexComplexityError
)


class TestLibrary:
    """Test the shipped rule sets."""

    def test_all_rules_are_bounded(self):
        """Every shipped rule passes the complexity check."""
        for rule in XSS_RULES + SQL_RULES:
            assert find_complexity_violation(rule.pattern) is None, rule.name

    def test_rules_are_tagged_with_their_category(self):
        assert XSS_RULES and SQL_RULES
        assert all(rule.category == XSS for rule in XSS_RULES)
        assert all(rule.category == SQL for rule in SQL_RULES)

    def test_rule_names_are_unique(self):
        names = [rule.name for rule in XSS_RULES + SQL_RULES]
        assert len(names) == len(set(names))

    def test_rules_are_case_insensitive(self):
        script_rule = next(rule for rule in XSS_RULES if rule.name == "script_tag")
        assert script_rule.compiled.search("<SCRIPT>")

    def test_rules_are_immutable(self):
        with pytest.raises(AttributeError):
            XSS_RULES[0].pattern = ".*"

    def test_get_rules(self):
        assert get_rules(XSS) is XSS_RULES
        assert get_rules(SQL) is SQL_RULES

        with pytest.raises(KeyError):
            get_rules("custom")


class TestComplexityCheck:
    """Test detection of catastrophic-backtracking constructs."""

    @pytest.mark.parametrize("source", [
        r".*",
        r"a+",
        r"<script[^>]*>",
        r"\d{2,}",
        r"(?:ab)*",
    ])
    def test_unbounded_quantifiers_rejected(self, source):
        assert find_complexity_violation(source) is not None

    def test_nested_quantifier_rejected(self):
        """A bounded repetition around a quantified group is rejected."""
        assert find_complexity_violation(r"(?:a{1,5}){1,5}") == "nested quantifier"
        assert find_complexity_violation(r"(?:\s{0,3}x){2}") == "nested quantifier"

    @pytest.mark.parametrize("source", [
        r"\bunion\s{1,20}(?:all\s{1,20})?select\b",
        r"[*+]{1,3}",
        r"a\+b\*c",
        r"(?:\s|\+){1,10}",
        r"(?![a-z])x",
        r"[\]]{0,2}",
        r"{literal",
    ])
    def test_bounded_constructs_accepted(self, source):
        assert find_complexity_violation(source) is None

    def test_unbalanced_groups_rejected(self):
        assert find_complexity_violation("(abc") == "unbalanced parenthesis"
        assert find_complexity_violation("abc)") == "unbalanced parenthesis"


class TestCompileRule:
    """Test rule compilation."""

    def test_compile_valid_rule(self):
        rule = compile_rule("test", r"evil\s{1,3}payload", XSS)

        assert isinstance(rule, PatternRule)
        assert rule.name == "test"
        assert rule.category == XSS
        assert rule.compiled.search("EVIL  PAYLOAD")

    def test_complex_rule_raises(self):
        with pytest.raises(RegexComplexityError):
            compile_rule("greedy", r"<script.*?>", XSS)

    def test_invalid_regex_raises(self):
        with pytest.raises(PatternCompilationError):
            compile_rule("broken", r"[abc", SQL)
