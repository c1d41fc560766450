"""
Per-session search state.

A ``SearchContext`` belongs to one logical session (for example one
web request). It remembers the most recently executed query and knows
how to obtain the current page number.
"""

from __future__ import annotations

from typing import Any, Callable, Optional
import threading


PageResolver = Callable[[], Any]


def default_page_resolver() -> int:
    return 1


def coerce_page(value: Any) -> int:
    """
    Page number from user input.
    
    Values that are not integers (or numeric strings) count as page 1,
    as do numbers below 1.
    """
    try:
        page = int(value)
    except (TypeError, ValueError):
        return 1
    return max(1, page)


class SearchContext:
    """
    Session-scoped holder of the last executed query and the page resolver.
    
    Example:
        >>> context = SearchContext(page_resolver=lambda: request.args.get("page", 1))
        >>> search = Search(index, registry, context=context)
    """
    
    def __init__(self, page_resolver: Optional[PageResolver] = None):
        """
        Initialize the context.
        
        Args:
            page_resolver: Zero-argument callable returning the current
                page number (defaults to page 1)
        """
        self._page_resolver = page_resolver or default_page_resolver
        self._last_query: Any = None
        self._lock = threading.Lock()
    
    @property
    def last_query(self) -> Any:
        """Most recently executed query, or None."""
        with self._lock:
            return self._last_query
    
    def record_query(self, query: Any) -> None:
        with self._lock:
            self._last_query = query
    
    def current_page(self) -> int:
        """Current page number from the resolver, normalized by ``coerce_page``."""
        return coerce_page(self._page_resolver())
    
    def reset(self) -> None:
        with self._lock:
            self._last_query = None
