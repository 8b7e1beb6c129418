"""HTML encoding for text that already passed validation."""

from __future__ import annotations

import html
from typing import Any

from inputgate.checks.validation_policy import DEFAULT_CONFIG


def sanitize(content: Any, max_length: int = DEFAULT_CONFIG.max_sanitize_length) -> str:
    """
    HTML-encode ``& < > " ' /`` for safe echoing.

    Input longer than ``max_length`` is truncated before encoding. The
    result is not idempotent: encoding twice escapes the inserted ``&``.
    This is not a security boundary against payloads the detector missed.
    """
    if not isinstance(content, str) or not content:
        return ""

    truncated = content[:max_length]
    # html.escape replaces "&" first, so inserted entities are not re-escaped
    return html.escape(truncated, quote=True).replace("/", "&#x2F;")
