"""
Query construction and execution for lucenesearch.

This module provides:
- Escaping of free text for the query language
- Compilation of declarative clauses into query fragments
- Structured query nodes and a Lucene-style query parser
- The QueryRunner with filters, result cache and pagination

Example:
    >>> from lucenesearch.query import ClauseOptions, compile_clause, parse_query
    >>> 
    >>> compiled = compile_clause(ClauseOptions.for_where("name", "red apple"))
    >>> compiled.fragment
    'name:("red apple")'
    >>> parse_query(compiled.fragment)
    PhraseQuery(field='name', terms=('red', 'apple'), slop=0, boost=1.0)
"""

from .escaping import (
    escape,
    escape_special_chars,
    escape_special_operators,
)

from .clauses import (
    ANY_FIELD,
    ClauseOptions,
    CompiledClause,
    Sign,
    compile_clause,
    normalize_fields,
)

from .nodes import (
    Query,
    TermQuery,
    PhraseQuery,
    FuzzyQuery,
    WildcardQuery,
    RangeQuery,
    BooleanClause,
    BooleanQuery,
    query_from_dict,
)

from .parser import (
    QueryParser,
    parse_query,
)

from .cache import (
    ResultCache,
    query_identity,
)

from .pagination import Page, page_offset

from .runner import (
    QueryRunner,
    StructuredState,
    RawState,
)

__all__ = [
    # Escaping
    "escape",
    "escape_special_chars",
    "escape_special_operators",
    # Clauses
    "ANY_FIELD",
    "ClauseOptions",
    "CompiledClause",
    "Sign",
    "compile_clause",
    "normalize_fields",
    # Nodes
    "Query",
    "TermQuery",
    "PhraseQuery",
    "FuzzyQuery",
    "WildcardQuery",
    "RangeQuery",
    "BooleanClause",
    "BooleanQuery",
    "query_from_dict",
    # Parser
    "QueryParser",
    "parse_query",
    # Cache
    "ResultCache",
    "query_identity",
    # Pagination
    "Page",
    "page_offset",
    # Runner
    "QueryRunner",
    "StructuredState",
    "RawState",
]
