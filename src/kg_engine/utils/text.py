"""
String normalization shared by the graph store, resolver and file adapters.

Case folding is ASCII-only: letters outside A-Z keep their case, so
comparisons behave byte-wise like the classic C tooling this format
comes from.
"""

import re

# Separator of the Source|Relationship|Target format
FIELD_SEPARATOR = "|"
# Lines whose first non-blank character is this are comments
COMMENT_MARKER = "#"

_WHITESPACE_RUN = re.compile(r"\s+")
_ASCII_LOWER = str.maketrans(
    "ABCDEFGHIJKLMNOPQRSTUVWXYZ",
    "abcdefghijklmnopqrstuvwxyz",
)


def collapse_whitespace(text: str) -> str:
    """
    Trim the text and collapse internal whitespace runs to one space.

    Args:
        text: Raw input

    Returns:
        Normalized text (possibly empty)
    """
    return _WHITESPACE_RUN.sub(" ", text).strip()


def ascii_lower(text: str) -> str:
    """Lowercase ASCII letters only."""
    return text.translate(_ASCII_LOWER)


def normalize_field(text: str, max_length: int | None = None) -> str:
    """
    Normalize an entity name or relation label.

    Whitespace is collapsed first, then the value is truncated to
    max_length characters. A space exposed by the cut is stripped.

    Args:
        text: Raw field value
        max_length: Maximum length, or None for no limit

    Returns:
        Normalized field value
    """
    normalized = collapse_whitespace(text)
    if max_length is not None and len(normalized) > max_length:
        normalized = normalized[:max_length].rstrip()
    return normalized


def contains_separator(text: str) -> bool:
    """Check whether text contains the triple field separator."""
    return FIELD_SEPARATOR in text
