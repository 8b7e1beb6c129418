"""Search term inspection for the HTTP layer."""

from __future__ import annotations

import logging
from typing import Any

from inputgate.checks.patterns.input_validator import (
    ValidationCategory,
    get_validator,
)

logger = logging.getLogger(__name__)

__all__ = ["MSG_TERM_REQUIRED", "inspect_search_term"]

MSG_TERM_REQUIRED = "Search term is required"
MSG_VALID_TERM = "Search term is valid"

_CLEARED_MESSAGES = {
    ValidationCategory.XSS: "Input cleared due to potential XSS attack",
    ValidationCategory.SQL_INJECTION: "Input cleared due to potential SQL injection attack",
}


def inspect_search_term(term: Any) -> dict[str, Any]:
    """
    Build the response body for a submitted search term.

    The raw term is never part of a rejection body; an accepted term is
    only ever returned in its sanitized form.
    """
    if not term:
        return {"success": False, "errors": [MSG_TERM_REQUIRED]}

    validator = get_validator()
    verdict = validator.validate(term)

    if verdict.is_valid:
        return {
            "success": True,
            "message": MSG_VALID_TERM,
            "sanitizedTerm": validator.sanitize(term),
        }

    errors = list(verdict.errors)
    cleared = _CLEARED_MESSAGES.get(verdict.category)
    if cleared:
        errors.append(cleared)
        logger.info("Rejected search term category=%s rule=%s", verdict.category.value, verdict.matched_pattern)

    return {
        "success": False,
        "errors": errors,
        "type": verdict.category.value,
    }
