"""
Percent-encoding probe for the secondary heuristic scan.

Decoding is strict and happens exactly once. The decoded text is only
compared with the original; it is never fed back into the attack
matchers, so a payload cannot amplify its own scan cost by nesting
encodings.
"""

import re
import urllib.parse
import logging

from .exceptions import ContentDecodingError

logger = logging.getLogger(__name__)

# A hex pair, or an alphanumeric that makes the escape malformed (e.g. "%zz")
_ESCAPE_CANDIDATE = re.compile(r"%(?:[0-9a-fA-F]{2}|[0-9a-zA-Z])")
_VALID_ESCAPE = re.compile(r"%[0-9a-fA-F]{2}")


def has_percent_escape(content: str) -> bool:
    """
    Quick check for percent-escape candidates.

    A lone ``%`` followed by whitespace or punctuation ("50% off") is not
    treated as an escape attempt.
    """
    return _ESCAPE_CANDIDATE.search(content) is not None


def decode_percent_once(content: str) -> str:
    """
    Decode percent-escapes once, rejecting malformed input.

    Args:
        content: Text containing percent-escapes

    Returns:
        The decoded text

    Raises:
        ContentDecodingError: On a ``%`` not followed by two hex digits, or
            when the escaped bytes are not valid UTF-8
    """
    position = content.find("%")
    while position != -1:
        if not _VALID_ESCAPE.match(content, position):
            raise ContentDecodingError(len(content), f"malformed escape at offset {position}")
        position = content.find("%", position + 3)

    try:
        return urllib.parse.unquote(content, encoding="utf-8", errors="strict")
    except UnicodeDecodeError as e:
        raise ContentDecodingError(len(content), "escaped bytes are not valid UTF-8") from e
