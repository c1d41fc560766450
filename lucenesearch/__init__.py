"""
lucenesearch - Lucene-style full-text search over application models.

Example:
    >>> from lucenesearch import InMemoryIndex, ModelRegistry, Search
    >>> 
    >>> registry = ModelRegistry()
    >>> registry.register("Product", fields=["name"], loader=load_products)
    >>> search = Search(InMemoryIndex(), registry)
    >>> 
    >>> # Index models
    >>> search.update({"_type": "Product", "id": 1, "name": "Red apple"})
    >>> 
    >>> # Query
    >>> search.where("name", "red apple").get()
    >>> search.find("apple", fuzzy=0.8).limit(10).get()
"""

from .core import (
    # Main classes
    Search,
    SearchContext,
    ModelConfig,
    ModelRegistry,
    # Exceptions
    LuceneSearchError,
    InvalidArgumentError,
    InvalidOperationError,
    QueryParseError,
    ValidationError,
    ModelNotRegisteredError,
    SearchIndexError,
)

from .query import (
    QueryRunner,
    ClauseOptions,
    Sign,
    BooleanQuery,
    Page,
    parse_query,
    escape,
)

from .index import (
    Document,
    Hit,
    SearchIndex,
    InMemoryIndex,
    Analyzer,
)

__version__ = "0.1.0"
__author__ = "lucenesearch Team"

__all__ = [
    # Main classes
    "Search",
    "SearchContext",
    "ModelConfig",
    "ModelRegistry",
    # Query
    "QueryRunner",
    "ClauseOptions",
    "Sign",
    "BooleanQuery",
    "Page",
    "parse_query",
    "escape",
    # Index
    "Document",
    "Hit",
    "SearchIndex",
    "InMemoryIndex",
    "Analyzer",
    # Exceptions
    "LuceneSearchError",
    "InvalidArgumentError",
    "InvalidOperationError",
    "QueryParseError",
    "ValidationError",
    "ModelNotRegisteredError",
    "SearchIndexError",
]
