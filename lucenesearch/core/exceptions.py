"""
Custom exceptions for lucenesearch.
"""


class LuceneSearchError(Exception):
    """Base exception for lucenesearch."""
    pass


class InvalidArgumentError(LuceneSearchError, ValueError):
    """An argument has an unsupported type or value."""
    pass


class InvalidOperationError(LuceneSearchError, RuntimeError):
    """Operation is not allowed in the current query state."""
    pass


class QueryParseError(LuceneSearchError):
    """Query-language text could not be parsed."""
    
    def __init__(self, message: str, query: str = "", position: int = -1):
        super().__init__(message)
        self.query = query
        self.position = position


class ValidationError(LuceneSearchError):
    """Input validation error."""
    pass


class ModelNotRegisteredError(LuceneSearchError):
    """Model type is not configured for indexing."""
    pass


class SearchIndexError(LuceneSearchError):
    """Error related to index operations."""
    pass
