"""
Escaping of free text for embedding in the query language.

Two independent passes are provided:

- ``escape_special_chars`` backslash-escapes every reserved character
  (and the two-character operators ``&&`` and ``||``) in a single pass
  over the input, so backslashes inserted by the pass are never
  escaped again.
- ``escape_special_operators`` neutralizes the boolean keywords
  ``to``, ``or``, ``and`` and ``not`` when they stand alone between
  spaces, and ``and``, ``or``, ``not`` at either end of the text. Quoted
  values do not need it.

Example:
    >>> escape_special_operators("salt and pepper")
    'salt pepper'
    >>> print(escape_special_chars("C++"))
    C\\+\\+
"""

from __future__ import annotations

from typing import Any, List
import re


SPECIAL_CHARS: List[str] = [
    "\\", "+", "-", "&&", "||", "!", "(", ")", "{", "}",
    "[", "]", "^", '"', "~", "*", "?", ":",
]

OPERATOR_KEYWORDS: List[str] = ["to", "or", "and", "not"]

# Longest alternatives first so "&&" is matched as a pair
_SPECIAL_RE = re.compile(
    "|".join(re.escape(ch) for ch in sorted(SPECIAL_CHARS, key=len, reverse=True))
)

_OPERATOR_RE = re.compile(
    r"\s(?:%s)\s" % "|".join(OPERATOR_KEYWORDS),
    re.IGNORECASE,
)

# Boolean keywords the parser also accepts at the start or end of the text
EDGE_KEYWORDS: List[str] = ["or", "and", "not"]

_EDGE_OPERATOR_RE = re.compile(
    r"^(?:%s)(?:\s+|$)|\s+(?:%s)$" % (("|".join(EDGE_KEYWORDS),) * 2),
    re.IGNORECASE,
)


def escape_special_chars(value: Any) -> str:
    """
    Escape reserved query-language characters.
    
    Args:
        value: Free text (non-strings are converted with ``str``)
        
    Returns:
        Text safe to embed in a query fragment
    """
    if value is None:
        return ""
    return _SPECIAL_RE.sub(lambda m: "\\" + m.group(0), str(value))


def escape_special_operators(value: str) -> str:
    """
    Remove standalone boolean operator keywords.
    
    A keyword between two whitespace characters is replaced with a single
    space; the match consumes both delimiters, so adjacent keywords
    ("a and or b") are removed over repeated passes. ``and``, ``or`` and
    ``not`` are also dropped at the start or end of the text.
    
    Args:
        value: Text, usually already passed through ``escape_special_chars``
        
    Returns:
        Text in which ``to``/``or``/``and``/``not`` no longer act as operators
    """
    result = value
    while True:
        replaced = _EDGE_OPERATOR_RE.sub("", _OPERATOR_RE.sub(" ", result))
        if replaced == result:
            return result
        result = replaced


def escape(value: Any, quoted: bool = False) -> str:
    """Escape a value, neutralizing operators unless it will be quoted."""
    escaped = escape_special_chars(value)
    if quoted:
        return escaped
    return escape_special_operators(escaped)
