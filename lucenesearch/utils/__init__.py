"""
Utility functions for lucenesearch.
"""

from .validation import (
    validate_field_name,
    validate_field_names,
    validate_per_page,
)
from .logging import setup_logger, get_logger, parse_level, LogContext

__all__ = [
    "validate_field_name",
    "validate_field_names",
    "validate_per_page",
    "setup_logger",
    "get_logger",
    "parse_level",
    "LogContext",
]
