"""
Utilities module for Knowledge Graph Engine.

Provides logging setup and string normalization helpers.
"""

from kg_engine.utils.logging import setup_logging, get_logger, reset_logging
from kg_engine.utils.text import (
    FIELD_SEPARATOR,
    COMMENT_MARKER,
    collapse_whitespace,
    ascii_lower,
    normalize_field,
    contains_separator,
)

__all__ = [
    # Logging
    "setup_logging",
    "get_logger",
    "reset_logging",
    # Text
    "FIELD_SEPARATOR",
    "COMMENT_MARKER",
    "collapse_whitespace",
    "ascii_lower",
    "normalize_field",
    "contains_separator",
]
