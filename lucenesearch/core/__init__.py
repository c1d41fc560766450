"""
Core components for lucenesearch.
"""

from .exceptions import (
    LuceneSearchError,
    InvalidArgumentError,
    InvalidOperationError,
    QueryParseError,
    ValidationError,
    ModelNotRegisteredError,
    SearchIndexError,
)
from .context import SearchContext
from .registry import ModelConfig, ModelRegistry
from .search import Search

__all__ = [
    # Facade
    "Search",
    "SearchContext",
    # Models
    "ModelConfig",
    "ModelRegistry",
    # Exceptions
    "LuceneSearchError",
    "InvalidArgumentError",
    "InvalidOperationError",
    "QueryParseError",
    "ValidationError",
    "ModelNotRegisteredError",
    "SearchIndexError",
]
