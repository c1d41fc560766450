"""
Structured query nodes.

These are the objects the query parser produces and the index executes.
Nodes compare by value, serialize to plain dictionaries (``to_dict``)
and render back to query-language text (``str(query)``).

Example:
    >>> q = BooleanQuery()
    >>> _ = q.add_subquery(TermQuery("title", "apple"), Sign.MUST)
    >>> _ = q.add_subquery(PhraseQuery(None, ("green", "pear")), Sign.MUST_NOT)
    >>> str(q)
    '+title:apple -"green pear"'
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple, Union

from .clauses import Sign
from .escaping import escape_special_chars


class Query(ABC):
    """Abstract base class for all query nodes."""
    
    boost: float = 1.0
    
    @abstractmethod
    def to_dict(self) -> Dict[str, Any]:
        """Convert the query to a dictionary representation."""
        pass
    
    @abstractmethod
    def _render(self) -> str:
        """Query-language text without the boost suffix."""
        pass
    
    def __str__(self) -> str:
        text = self._render()
        if self.boost != 1.0:
            text = f"{text}^{_format_number(self.boost)}"
        return text


def _format_number(value: float) -> str:
    if float(value).is_integer():
        return str(int(value))
    return str(value)


def _prefix(field_name: Optional[str], text: str) -> str:
    return f"{field_name}:{text}" if field_name else text


def _escape_wildcard(pattern: str) -> str:
    return "".join(
        ch if ch in "*?" else escape_special_chars(ch)
        for ch in pattern
    )


@dataclass
class TermQuery(Query):
    """Single term, optionally restricted to one field."""
    field: Optional[str]
    text: str
    boost: float = 1.0
    
    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": "term",
            "field": self.field,
            "text": self.text,
            "boost": self.boost,
        }
    
    def _render(self) -> str:
        return _prefix(self.field, escape_special_chars(self.text))


@dataclass
class PhraseQuery(Query):
    """Ordered sequence of terms, matched within ``slop`` positions."""
    field: Optional[str]
    terms: Tuple[str, ...]
    slop: int = 0
    boost: float = 1.0
    
    def __post_init__(self):
        self.terms = tuple(self.terms)
    
    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": "phrase",
            "field": self.field,
            "terms": list(self.terms),
            "slop": self.slop,
            "boost": self.boost,
        }
    
    def _render(self) -> str:
        body = " ".join(t.replace("\\", "\\\\").replace('"', '\\"') for t in self.terms)
        text = f'"{body}"'
        if self.slop:
            text = f"{text}~{self.slop}"
        return _prefix(self.field, text)


@dataclass
class FuzzyQuery(Query):
    """
    Term matched by edit-distance similarity.
    
    ``similarity`` is the minimum similarity in [0, 1]; ``None`` means the
    index default.
    """
    field: Optional[str]
    text: str
    similarity: Optional[float] = None
    boost: float = 1.0
    
    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": "fuzzy",
            "field": self.field,
            "text": self.text,
            "similarity": self.similarity,
            "boost": self.boost,
        }
    
    def _render(self) -> str:
        suffix = "~" if self.similarity is None else f"~{_format_number(self.similarity)}"
        return _prefix(self.field, escape_special_chars(self.text) + suffix)


@dataclass
class WildcardQuery(Query):
    """Term pattern with ``*`` (any run) and ``?`` (one character)."""
    field: Optional[str]
    pattern: str
    boost: float = 1.0
    
    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": "wildcard",
            "field": self.field,
            "pattern": self.pattern,
            "boost": self.boost,
        }
    
    def _render(self) -> str:
        return _prefix(self.field, _escape_wildcard(self.pattern))


@dataclass
class RangeQuery(Query):
    """Lexicographic term range; ``None`` bounds are open (``*``)."""
    field: Optional[str]
    lower: Optional[str]
    upper: Optional[str]
    inclusive: bool = True
    boost: float = 1.0
    
    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": "range",
            "field": self.field,
            "lower": self.lower,
            "upper": self.upper,
            "inclusive": self.inclusive,
            "boost": self.boost,
        }
    
    def _render(self) -> str:
        lower = "*" if self.lower is None else escape_special_chars(self.lower)
        upper = "*" if self.upper is None else escape_special_chars(self.upper)
        opening, closing = ("[", "]") if self.inclusive else ("{", "}")
        return _prefix(self.field, f"{opening}{lower} TO {upper}{closing}")


@dataclass
class BooleanClause:
    """A subquery together with its occurrence."""
    query: Query
    sign: Sign = Sign.SHOULD
    
    def to_dict(self) -> Dict[str, Any]:
        return {"sign": self.sign.value, "query": self.query.to_dict()}


_SIGN_PREFIX = {Sign.MUST: "+", Sign.MUST_NOT: "-", Sign.SHOULD: ""}


@dataclass
class BooleanQuery(Query):
    """
    Combination of subqueries with must / must-not / should occurrence.
    
    A document matches when it matches every MUST clause and no MUST_NOT
    clause; if there are no MUST clauses it has to match at least one
    SHOULD clause.
    """
    clauses: List[BooleanClause] = field(default_factory=list)
    boost: float = 1.0
    
    def add_subquery(
        self,
        query: Query,
        sign: Union[Sign, bool, None] = None,
    ) -> "BooleanQuery":
        """
        Append a subquery.
        
        Args:
            query: Subquery node
            sign: ``Sign`` or tri-state ``True``/``False``/``None``
            
        Returns:
            self, for chaining
        """
        self.clauses.append(BooleanClause(query, Sign.coerce(sign)))
        return self
    
    @property
    def subqueries(self) -> List[Query]:
        return [c.query for c in self.clauses]
    
    @property
    def signs(self) -> List[Optional[bool]]:
        return [c.sign.to_bool() for c in self.clauses]
    
    def __len__(self) -> int:
        return len(self.clauses)
    
    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": "boolean",
            "clauses": [c.to_dict() for c in self.clauses],
            "boost": self.boost,
        }
    
    def _render(self) -> str:
        parts = []
        for clause in self.clauses:
            text = str(clause.query)
            if isinstance(clause.query, BooleanQuery) and clause.query.boost == 1.0:
                text = f"({text})"
            parts.append(_SIGN_PREFIX[clause.sign] + text)
        return " ".join(parts)
    
    def __str__(self) -> str:
        text = self._render()
        if self.boost != 1.0:
            text = f"({text})^{_format_number(self.boost)}"
        return text


def query_from_dict(data: Dict[str, Any]) -> Query:
    """Create a query node from its dictionary representation."""
    query_type = data.get("type")
    boost = data.get("boost", 1.0)
    
    if query_type == "term":
        return TermQuery(data["field"], data["text"], boost=boost)
    elif query_type == "phrase":
        return PhraseQuery(data["field"], tuple(data["terms"]), data.get("slop", 0), boost=boost)
    elif query_type == "fuzzy":
        return FuzzyQuery(data["field"], data["text"], data.get("similarity"), boost=boost)
    elif query_type == "wildcard":
        return WildcardQuery(data["field"], data["pattern"], boost=boost)
    elif query_type == "range":
        return RangeQuery(
            data["field"],
            data.get("lower"),
            data.get("upper"),
            data.get("inclusive", True),
            boost=boost,
        )
    elif query_type == "boolean":
        clauses = [
            BooleanClause(query_from_dict(c["query"]), Sign(c["sign"]))
            for c in data.get("clauses", [])
        ]
        return BooleanQuery(clauses, boost=boost)
    else:
        raise ValueError(f"Unknown query type: {query_type}")
