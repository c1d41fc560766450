"""
Query-language parser.

Parses Lucene-style query text into structured query nodes.

Supports:
- Terms with backslash escapes: ``apple``, ``C\\+\\+``
- Field scoping: ``title:apple``, ``title:(apple pear)``
- Phrases with optional slop: ``"red apple"``, ``"red apple"~3``
- Fuzzy terms: ``apple~``, ``apple~0.7``
- Wildcards: ``app*``, ``ap?le``
- Ranges: ``year:[2001 TO 2010]``, ``name:{a TO m}``
- Boosts: ``apple^2``
- Modifiers ``+``, ``-``, ``!`` and the operators ``AND``/``&&``,
  ``OR``/``||``, ``NOT`` (case-insensitive)

Clause occurrence follows the classic Lucene rules: ``AND`` makes both
neighbours required, ``NOT``/``-``/``!`` prohibits the next clause, ``+``
requires it, and everything else is optional. A group (or a whole query)
holding one optional clause is that clause.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, List, Optional
import re

import pyparsing as pp

from ..core.exceptions import QueryParseError
from .clauses import Sign
from .nodes import (
    BooleanClause,
    BooleanQuery,
    FuzzyQuery,
    PhraseQuery,
    Query,
    RangeQuery,
    TermQuery,
    WildcardQuery,
)


CONJ_NONE = "none"
CONJ_AND = "and"
CONJ_OR = "or"

MOD_NONE = "none"
MOD_REQ = "req"
MOD_NOT = "not"

KEYWORDS = frozenset({"AND", "OR", "NOT"})

# A lone "&" or "|" is term text; doubled they are operators
_PIPE_AMP = r"&(?!&)|\|(?!\|)"
_TERM_START = r"(?:\\.|%s|[^\s\\+\-!():^\[\]\"{}~&|])" % _PIPE_AMP
_TERM_CHAR = r"(?:\\.|%s|[^\s\\!():^\[\]\"{}~&|])" % _PIPE_AMP
_FIELD_START = r"(?:\\.|[^\s\\+\-!():^\[\]\"{}~*?&|])"
_FIELD_CHAR = r"(?:\\.|[^\s\\!():^\[\]\"{}~*?&|])"
_NUMBER = r"\d+(?:\.\d+)?|\.\d+"

_UNESCAPE_RE = re.compile(r"\\(.)")
_WILDCARD_RE = re.compile(r"(?<!\\)[*?]")
_PHRASE_FUZZY_RE = re.compile(r"(?<!\\)~(?:%s)?$" % _NUMBER)


@dataclass
class _Word:
    raw: str


@dataclass
class _Fuzzy:
    raw: str
    similarity: Optional[str]


@dataclass
class _Phrase:
    raw: str
    slop: Optional[str]


@dataclass
class _Range:
    lower: str
    upper: str
    inclusive: bool


@dataclass
class _Group:
    items: List[Any]


@dataclass
class _Clause:
    field: Optional[str]
    body: Any
    boost: Optional[str]


# Characters that end an operator keyword
_KEYWORD_END = r"[\s()\[\]{}\"]"


def _keyword(name: str) -> pp.ParserElement:
    return pp.Regex(r"(?i)%s(?=%s|$)" % (name, _KEYWORD_END))


def _reject_keyword(s: str, loc: int, toks: pp.ParseResults) -> None:
    # "and~" is a fuzzy term, not an operator
    end = loc + len(toks[0])
    if end < len(s) and not re.match(_KEYWORD_END, s[end]):
        return
    if toks[0].upper() in KEYWORDS:
        raise pp.ParseException(s, loc, f"unexpected operator {toks[0]!r}")


def _build_grammar() -> pp.ParserElement:
    number = pp.Regex(_NUMBER).leave_whitespace()
    tilde = pp.Suppress(pp.Literal("~").leave_whitespace())
    
    conj = (
        (_keyword("AND") | pp.Literal("&&")).set_parse_action(pp.replace_with(CONJ_AND))
        | (_keyword("OR") | pp.Literal("||")).set_parse_action(pp.replace_with(CONJ_OR))
    )
    modifier = (
        pp.Literal("+").set_parse_action(pp.replace_with(MOD_REQ))
        | (pp.Literal("-") | pp.Literal("!") | _keyword("NOT")).set_parse_action(
            pp.replace_with(MOD_NOT)
        )
    )
    
    word = pp.Regex(_TERM_START + _TERM_CHAR + "*")
    word.add_parse_action(_reject_keyword)
    
    term = (word + pp.Opt(tilde + pp.Opt(number, default=None), default="-")).set_parse_action(
        lambda t: _Word(t[0]) if t[1] == "-" else _Fuzzy(t[0], t[1])
    )
    
    phrase = (
        pp.Regex(r'"(?:\\.|[^"\\])*"')
        + pp.Opt(tilde + pp.Opt(pp.Regex(r"\d+").leave_whitespace(), default=None), default=None)
    ).set_parse_action(lambda t: _Phrase(t[0][1:-1], t[1]))
    
    bound = pp.Regex(r"(?:\\.|[^\s\]}\\])+")
    range_ = (
        pp.one_of("[ {")
        + bound
        + pp.Suppress(_keyword("TO"))
        + bound
        + pp.one_of("] }")
    ).set_parse_action(lambda t: _Range(t[1], t[2], t[0] == "["))
    
    query = pp.Forward()
    group = (pp.Suppress("(") + query + pp.Suppress(")")).set_parse_action(
        lambda t: _Group(list(t))
    )
    
    field_prefix = pp.Regex(_FIELD_START + _FIELD_CHAR + "*") + pp.Suppress(
        pp.Literal(":").leave_whitespace()
    )
    boost = pp.Suppress(pp.Literal("^").leave_whitespace()) + number
    
    clause = (
        pp.Opt(field_prefix, default=None)
        + (group | phrase | range_ | term)
        + pp.Opt(boost, default=None)
    ).set_parse_action(lambda t: _Clause(t[0], t[1], t[2]))
    
    item = pp.Group(
        pp.Opt(conj, default=CONJ_NONE)
        + pp.Opt(modifier, default=MOD_NONE)
        + clause
    )
    query <<= pp.OneOrMore(item)
    
    return query


def _unescape(text: str) -> str:
    return _UNESCAPE_RE.sub(r"\1", text)


class QueryParser:
    """
    Parser for Lucene-style query text.
    
    Example:
        >>> parser = QueryParser()
        >>> parser.parse('title:("red apple"~3)')
        PhraseQuery(field='title', terms=('red', 'apple'), slop=3, boost=1.0)
    """
    
    _grammar: Optional[pp.ParserElement] = None
    
    @classmethod
    def grammar(cls) -> pp.ParserElement:
        if cls._grammar is None:
            cls._grammar = _build_grammar()
        return cls._grammar
    
    def parse(self, text: str) -> Query:
        """
        Parse query text into a query node.
        
        Args:
            text: Query-language text
            
        Returns:
            Query node; blank text yields an empty BooleanQuery
            
        Raises:
            QueryParseError: If the text is not valid query syntax
        """
        if not isinstance(text, str):
            raise QueryParseError(
                f"Query text must be a string, got {type(text).__name__}"
            )
        
        if not text.strip():
            return BooleanQuery()
        
        try:
            items = self.grammar().parse_string(text, parse_all=True)
        except pp.ParseBaseException as e:
            raise QueryParseError(
                f"Cannot parse query {text!r}: {e.msg} (at char {e.loc})",
                query=text,
                position=e.loc,
            ) from e
        
        return self._build_query(list(items), None, text)
    
    def _build_query(self, items: List[Any], field: Optional[str], text: str) -> Query:
        clauses: List[BooleanClause] = []
        
        for conj, mod, clause in items:
            node = self._build_clause(clause, field, text)
            self._add_clause(clauses, conj, mod, node)
        
        if len(clauses) == 1 and clauses[0].sign is Sign.SHOULD:
            return clauses[0].query
        
        return BooleanQuery(clauses)
    
    @staticmethod
    def _add_clause(
        clauses: List[BooleanClause],
        conj: str,
        mod: str,
        query: Query,
    ) -> None:
        if clauses and conj == CONJ_AND:
            last = clauses[-1]
            if last.sign is not Sign.MUST_NOT:
                last.sign = Sign.MUST
        
        prohibited = mod == MOD_NOT
        required = mod == MOD_REQ
        if conj == CONJ_AND and not prohibited:
            required = True
        
        clauses.append(BooleanClause(query, Sign.from_flags(required, prohibited)))
    
    def _build_clause(self, clause: _Clause, field: Optional[str], text: str) -> Query:
        if clause.field is not None:
            field = _unescape(clause.field)
        
        body = clause.body
        
        if isinstance(body, _Group):
            node = self._build_query(body.items, field, text)
        elif isinstance(body, _Phrase):
            node = self._build_phrase(body, field)
        elif isinstance(body, _Range):
            node = RangeQuery(
                field,
                None if body.lower == "*" else _unescape(body.lower),
                None if body.upper == "*" else _unescape(body.upper),
                body.inclusive,
            )
        elif isinstance(body, _Fuzzy):
            node = self._build_fuzzy(body, field, text)
        elif _WILDCARD_RE.search(body.raw):
            node = WildcardQuery(field, _unescape(body.raw))
        else:
            node = TermQuery(field, _unescape(body.raw))
        
        if clause.boost is not None:
            node.boost = float(clause.boost)
        
        return node
    
    @staticmethod
    def _build_phrase(body: _Phrase, field: Optional[str]) -> PhraseQuery:
        words = [_PHRASE_FUZZY_RE.sub("", raw) for raw in body.raw.split()]
        terms = tuple(_unescape(w) for w in words if w)
        slop = int(body.slop) if body.slop else 0
        return PhraseQuery(field, terms, slop)
    
    @staticmethod
    def _build_fuzzy(body: _Fuzzy, field: Optional[str], text: str) -> FuzzyQuery:
        similarity = None
        if body.similarity is not None:
            similarity = float(body.similarity)
            if similarity > 1:
                raise QueryParseError(
                    f"Fuzzy similarity must be in [0, 1], got {body.similarity} in {text!r}",
                    query=text,
                )
        return FuzzyQuery(field, _unescape(body.raw), similarity)


# Convenience function
def parse_query(text: str) -> Query:
    """
    Parse query text.
    
    Args:
        text: Query-language text
        
    Returns:
        Query node
    """
    return QueryParser().parse(text)
