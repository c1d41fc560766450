"""
Fluent query construction and execution.

A ``QueryRunner`` is bound to one ``Search`` (index + model registry)
and accumulates clauses into a boolean query, or holds a raw query
supplied by the caller. Filters registered with ``add_filter`` run
once, right before the first execution.

Example:
    >>> runner = search.query()
    >>> models = (
    ...     runner
    ...     .where("name", "red apple")
    ...     .find("fresh", fuzzy=0.6, required=False)
    ...     .limit(10)
    ...     .get()
    ... )
    >>> total = runner.count()   # served from the result cache
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, List, Optional, Union

from ..core.context import coerce_page
from ..core.exceptions import InvalidArgumentError, InvalidOperationError
from ..utils.logging import get_logger
from ..utils.validation import validate_per_page
from .cache import ResultCache
from .clauses import ANY_FIELD, ClauseOptions, FieldSpec, Sign, compile_clause
from .nodes import BooleanQuery, Query
from .pagination import Page, page_offset
from .parser import QueryParser


logger = get_logger(__name__)

QueryLike = Union[str, Query]
QueryFilter = Callable[[QueryLike], Optional[QueryLike]]

DEFAULT_PER_PAGE = 25


@dataclass
class StructuredState:
    """Query built clause by clause."""
    tree: BooleanQuery
    
    @property
    def query(self) -> BooleanQuery:
        return self.tree


@dataclass
class RawState:
    """Query supplied verbatim; clause builders are disabled."""
    query: QueryLike


QueryState = Union[StructuredState, RawState]


class QueryRunner:
    """
    Builds and executes one search query.
    
    Not safe for concurrent use: the filter flag and the result cache
    are plain instance state.
    """
    
    def __init__(
        self,
        search: Any,
        query: Optional[BooleanQuery] = None,
        per_page: int = DEFAULT_PER_PAGE,
        parser: Optional[QueryParser] = None,
    ):
        """
        Initialize a runner.
        
        Args:
            search: Owning Search facade (index, model registry, context)
            query: Initial boolean query (empty by default)
            per_page: Default page size for ``paginate``
            parser: Parser for compiled fragments
        """
        self._search = search
        self._state: QueryState = StructuredState(
            query if query is not None else BooleanQuery()
        )
        self._parser = parser or QueryParser()
        self._per_page = per_page
        
        self._limit: Optional[int] = None
        self._offset: int = 0
        
        self._filters: List[QueryFilter] = []
        self._filters_executed = False
        
        self._cache = ResultCache()
    
    # =========================================================================
    # STATE
    # =========================================================================
    
    @property
    def query(self) -> QueryLike:
        """The current query (boolean tree or raw query)."""
        return self._state.query
    
    @property
    def is_raw(self) -> bool:
        return isinstance(self._state, RawState)
    
    @property
    def cache(self) -> ResultCache:
        return self._cache
    
    def get_last_query(self) -> Optional[QueryLike]:
        """The query most recently executed in this runner's search context."""
        return self._search.context.last_query
    
    # =========================================================================
    # BUILDING
    # =========================================================================
    
    def raw_query(self, query: Union[QueryLike, Callable[[], QueryLike]]) -> "QueryRunner":
        """
        Replace the query with a raw one.
        
        Args:
            query: Query node, query-language string, or a zero-argument
                callable returning either
                
        Returns:
            self
            
        Raises:
            InvalidArgumentError: If ``query`` (or the callable's result)
                is neither a string nor a Query
        """
        if isinstance(query, Query):
            resolved = query
        elif callable(query):
            resolved = query()
            if not isinstance(resolved, (str, Query)):
                raise InvalidArgumentError(
                    "Callable passed to raw_query() must return a string or Query, "
                    f"got {type(resolved).__name__}"
                )
        elif isinstance(query, str):
            resolved = query
        else:
            raise InvalidArgumentError(
                "Argument 'query' must be a string, a Query instance or a callable "
                f"returning a string or Query instance, got {type(query).__name__}"
            )
        
        self._state = RawState(resolved)
        logger.debug("Raw query set: %s", resolved)
        return self
    
    def add_filter(self, query_filter: QueryFilter) -> "QueryRunner":
        """
        Register a query transformation run once before execution.
        
        The filter receives the current query and returns a replacement,
        or None (or an empty string) to keep it unchanged.
        """
        if not callable(query_filter):
            raise InvalidArgumentError(
                f"Query filter must be callable, got {type(query_filter).__name__}"
            )
        if self._filters_executed:
            logger.warning("Filter added after filters were executed; it will not run")
        self._filters.append(query_filter)
        return self
    
    def where(
        self,
        field: FieldSpec,
        value: Any,
        *,
        required: bool = True,
        prohibited: bool = False,
        phrase: bool = True,
        fuzzy: Union[bool, float, None] = None,
        proximity: Optional[int] = None,
    ) -> "QueryRunner":
        """
        Add a clause matching ``value`` in ``field`` (phrase match by default).
        
        Args:
            field: Field name, list of field names, or ``"*"`` for any field
            value: Text to match
            required: Clause must match
            prohibited: Clause must not match (wins over ``required``)
            phrase: Match the value as a phrase
            fuzzy: ``True`` or a similarity in [0, 1]
            proximity: Maximum distance between the phrase words
            
        Raises:
            InvalidOperationError: If a raw query is set
        """
        return self.add_clause(ClauseOptions(
            field=field,
            value=value,
            required=required,
            prohibited=prohibited,
            phrase=phrase,
            fuzzy=fuzzy,
            proximity=proximity,
        ))
    
    def find(
        self,
        value: Any,
        field: FieldSpec = ANY_FIELD,
        *,
        required: bool = True,
        prohibited: bool = False,
        phrase: bool = False,
        fuzzy: Union[bool, float, None] = None,
        proximity: Optional[int] = None,
    ) -> "QueryRunner":
        """
        Add a clause matching the terms of ``value`` (term match by default).
        
        Same options as ``where``; ``field`` defaults to any field.
        """
        return self.add_clause(ClauseOptions(
            field=field,
            value=value,
            required=required,
            prohibited=prohibited,
            phrase=phrase,
            fuzzy=fuzzy,
            proximity=proximity,
        ))
    
    def add_clause(self, options: ClauseOptions) -> "QueryRunner":
        """Compile a clause and attach it to the boolean query."""
        self._ensure_structured()
        compiled = compile_clause(options)
        logger.debug("Compiled clause %r (%s)", compiled.fragment, compiled.sign.value)
        return self.add_subquery(compiled.fragment, compiled.sign)
    
    def add_subquery(
        self,
        fragment: str,
        sign: Union[Sign, bool, None] = None,
    ) -> "QueryRunner":
        """
        Parse ``fragment`` and attach it to the boolean query.
        
        Raises:
            InvalidOperationError: If a raw query is set
            QueryParseError: If the fragment is not valid query syntax
        """
        self._ensure_structured()
        self._state.tree.add_subquery(self._parser.parse(fragment), sign)
        return self
    
    def limit(self, limit: int, offset: int = 0) -> "QueryRunner":
        """
        Set the result window for ``get``; does not execute.
        
        A limit of 0 disables windowing.
        """
        for name, value in (("limit", limit), ("offset", offset)):
            if isinstance(value, bool) or not isinstance(value, int) or value < 0:
                raise InvalidArgumentError(
                    f"{name} must be a non-negative integer, got {value!r}"
                )
        self._limit = limit
        self._offset = offset
        return self
    
    def _ensure_structured(self) -> None:
        if not isinstance(self._state, StructuredState):
            raise InvalidOperationError("Can't use chain methods on the raw query.")
    
    # =========================================================================
    # EXECUTION
    # =========================================================================
    
    def get(self) -> List[Any]:
        """
        Execute the query and return the matching models.
        
        Returns:
            Models for the hits inside the current window
        """
        self._execute_filters()
        
        if self._limit:
            hits = self._execute_query(self.query, limit=self._limit, offset=self._offset)
        else:
            hits = self._execute_query(self.query)
        
        return self._search.config().models_from_hits(hits)
    
    def count(self) -> int:
        """
        Total number of hits, ignoring the window.
        
        Served from the result cache when this exact query already ran.
        """
        self._execute_filters()
        
        query = self.query
        cached = self._cache.get(query)
        if cached is not None:
            logger.debug("Result cache hit for %s: %d", query, cached)
            return cached
        
        return len(self._execute_query(query))
    
    def paginate(
        self,
        per_page: Optional[int] = None,
        page: Optional[int] = None,
    ) -> Page:
        """
        Execute the query for one page.
        
        Args:
            per_page: Page size (runner default if None)
            page: 1-based page number; taken from the search context's
                page resolver if None. Invalid values count as page 1
                
        Returns:
            Page with the windowed models and the total hit count
        """
        per_page = validate_per_page(per_page if per_page is not None else self._per_page)
        if page is None:
            page = self._search.context.current_page()
        page = coerce_page(page)
        
        self.limit(per_page, page_offset(page, per_page))
        items = self.get()
        
        return Page(
            items=items,
            total=self.count(),
            per_page=per_page,
            current_page=page,
        )
    
    def delete(self) -> int:
        """
        Execute the query and remove every matched model from the index.
        
        Returns:
            Number of models removed
        """
        models = self.get()
        for model in models:
            self._search.delete(model)
        logger.info("Deleted %d models from the index", len(models))
        return len(models)
    
    def _execute_filters(self) -> None:
        if self._filters_executed:
            return
        
        for query_filter in self._filters:
            result = query_filter(self.query)
            # An empty BooleanQuery is a replacement, not "no change"
            if result is None or (isinstance(result, str) and not result):
                continue
            if isinstance(self._state, StructuredState) and isinstance(result, BooleanQuery):
                self._state = StructuredState(result)
            else:
                self._state = RawState(result)
        
        self._filters_executed = True
    
    def _execute_query(
        self,
        query: QueryLike,
        limit: Optional[int] = None,
        offset: Optional[int] = None,
    ) -> list:
        """
        Run ``query`` against the index.
        
        Stores the total in the result cache, records the query as the
        last executed one, and slices the hits when both ``limit`` and
        ``offset`` are given.
        """
        hits = list(self._search.index().find(query))
        
        self._cache.store(query, len(hits))
        self._search.context.record_query(query)
        logger.debug("Executed query %s: %d hits", query, len(hits))
        
        if limit is not None and offset is not None:
            hits = hits[offset:offset + limit]
        
        return hits
