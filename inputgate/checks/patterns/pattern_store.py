"""
Built-in attack signature library.

The library is compiled once at import time and never changes afterwards.
Every rule is checked before compilation: quantifiers must carry an explicit
upper bound and a bounded repetition may not wrap a group that is itself
quantified. This keeps worst-case matching cost polynomial in input length
with Python's backtracking ``re`` engine.
"""

import re
import logging
from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Tuple

from .exceptions import PatternCompilationError, RegexComplexityError

logger = logging.getLogger(__name__)

XSS = "xss"
SQL = "sql"

_REGEX_FLAGS = re.IGNORECASE
_BRACE_QUANTIFIER = re.compile(r"\{(\d+)(?:(,)(\d*))?\}")


@dataclass(frozen=True)
class PatternRule:
    """One compiled attack signature."""
    name: str
    pattern: str
    category: str
    compiled: re.Pattern = field(compare=False, repr=False, default=None)


def _skip_group_prefix(source: str, i: int) -> int:
    """Return the index just past a ``(?:``, ``(?=``, ``(?<!`` style prefix."""
    if i >= len(source) or source[i] != "?":
        return i
    i += 1
    if i < len(source) and source[i] in ":=!":
        return i + 1
    if source.startswith("<=", i) or source.startswith("<!", i):
        return i + 2
    if source.startswith("P<", i):
        end = source.find(">", i)
        return end + 1 if end != -1 else len(source)
    return i


def find_complexity_violation(source: str) -> Optional[str]:
    """
    Scan a regex source for constructs that allow catastrophic backtracking.

    Args:
        source: Regex pattern source

    Returns:
        A short reason string, or None when every quantifier is bounded
    """
    # Each entry records whether the open group contains a quantifier
    groups: List[bool] = [False]
    in_class = False
    last_group_quantified = False
    i = 0
    n = len(source)

    while i < n:
        c = source[i]

        if c == "\\":
            i += 2
            last_group_quantified = False
            continue

        if in_class:
            if c == "]":
                in_class = False
            i += 1
            continue

        if c == "[":
            in_class = True
            i += 1
            if i < n and source[i] == "^":
                i += 1
            if i < n and source[i] == "]":
                i += 1
            last_group_quantified = False
            continue

        if c == "(":
            groups.append(False)
            i = _skip_group_prefix(source, i + 1)
            last_group_quantified = False
            continue

        if c == ")":
            if len(groups) == 1:
                return "unbalanced parenthesis"
            inner = groups.pop()
            groups[-1] = groups[-1] or inner
            last_group_quantified = inner
            i += 1
            continue

        if c in "*+":
            return f"unbounded quantifier '{c}'"

        if c == "{":
            quantifier = _BRACE_QUANTIFIER.match(source, i)
            if quantifier:
                low, comma, high = quantifier.groups()
                if comma and not high:
                    return "open-ended repetition"
                upper = int(high) if comma else int(low)
                if last_group_quantified and upper > 1:
                    return "nested quantifier"
                groups[-1] = True
                i = quantifier.end()
                last_group_quantified = False
                continue

        if c == "?":
            groups[-1] = True

        last_group_quantified = False
        i += 1

    if len(groups) != 1:
        return "unbalanced parenthesis"
    return None


def compile_rule(name: str, source: str, category: str) -> PatternRule:
    """
    Validate and compile one signature.

    Raises:
        RegexComplexityError: If the pattern may backtrack catastrophically
        PatternCompilationError: If ``re`` rejects the pattern
    """
    reason = find_complexity_violation(source)
    if reason:
        raise RegexComplexityError(source, reason)

    try:
        compiled = re.compile(source, _REGEX_FLAGS)
    except re.error as e:
        raise PatternCompilationError(source, str(e)) from e

    return PatternRule(name=name, pattern=source, category=category, compiled=compiled)


def compile_rules(category: str, sources: Iterable[Tuple[str, str]]) -> Tuple[PatternRule, ...]:
    rules = tuple(compile_rule(name, source, category) for name, source in sources)
    logger.debug(f"Compiled {len(rules)} {category} rules")
    return rules


_XSS_SOURCES = (
    ("script_tag", r"<\s{0,10}/?\s{0,10}script\b"),
    ("javascript_scheme", r"javascript\s{0,10}:"),
    ("vbscript_scheme", r"vbscript\s{0,10}:"),
    ("event_handler", r"\bon[a-z]{1,30}\s{0,10}="),
    ("dangerous_tag", r"<\s{0,10}(?:iframe|object|embed|link|meta|style)\b"),
    ("data_html_uri", r"data\s{0,10}:\s{0,10}text/html"),
    ("img_src", r"<\s{0,10}img\b[^>]{0,500}\bsrc\s{0,10}="),
    ("css_expression", r"\bexpression\s{0,10}\("),
    ("css_url", r"\burl\s{0,10}\("),
    (
        "attribute_javascript",
        r"<[^>]{0,500}\s(?:on[a-z]{1,30}|href|src)\s{0,10}=\s{0,10}['\"]{0,2}\s{0,10}javascript\s{0,10}:",
    ),
)

_SQL_SOURCES = (
    (
        "quoted_boolean",
        r"['\"]\s{0,10}(?:or|and)\b\s{0,10}['\"]?\s{0,10}\w{1,50}\s{0,10}['\"]?\s{0,10}(?:=|<>|!=|<|>|\blike\b)",
    ),
    ("union_select", r"\bunion\s{1,20}(?:all\s{1,20}|distinct\s{1,20})?select\b"),
    ("quote_comment", r"['\";]\s{0,10}(?:--|/\*)"),
    (
        "stacked_query",
        r";\s{0,10}(?:drop\s{1,10}(?:table|database|view|index|schema)|delete\s{1,10}from"
        r"|insert\s{1,10}into|update\s{1,10}\w{1,64}\s{1,10}set|truncate\s{1,10}table"
        r"|alter\s{1,10}table|create\s{1,10}(?:table|database|user|view)|shutdown)\b",
    ),
    ("numeric_tautology", r"\b(?:or|and)\s{1,10}\d{1,10}\s{0,10}=\s{0,10}\d{1,10}\b"),
    (
        "string_tautology",
        r"\b(?:or|and)\s{1,10}['\"]\w{1,50}['\"]\s{0,10}=\s{0,10}['\"]\w{1,50}['\"]",
    ),
    ("encoded_quote_or", r"(?:%27|')\s{0,10}(?:%6f|%4f|o)\s{0,10}(?:%72|%52|r)(?![a-z])"),
    (
        "encoded_quote_union",
        r"(?:%27|')\s{0,10}(?:%55|%75|u)(?:%4e|%6e|n)(?:%49|%69|i)(?:%4f|%6f|o)(?:%4e|%6e|n)",
    ),
    ("stored_procedure", r"\bexec(?:ute)?(?:\s|\+){1,10}(?:s|x)p_\w{1,64}"),
    ("extended_procedure", r"\bxp_\w{1,64}"),
    ("blind_comment", r"\d\s{0,10}=\s{0,10}\d\s{0,10}(?:--|#|/\*)"),
    ("waitfor_delay", r"\bwaitfor\s{1,10}(?:delay|time)\b"),
    ("sleep_call", r"\b(?:pg_)?sleep\s{0,10}\("),
    ("benchmark_call", r"\bbenchmark\s{0,10}\("),
)

XSS_RULES: Tuple[PatternRule, ...] = compile_rules(XSS, _XSS_SOURCES)
SQL_RULES: Tuple[PatternRule, ...] = compile_rules(SQL, _SQL_SOURCES)


def get_rules(category: str) -> Tuple[PatternRule, ...]:
    """Return the ordered rule set for ``xss`` or ``sql``."""
    if category == XSS:
        return XSS_RULES
    if category == SQL:
        return SQL_RULES
    raise KeyError(category)
