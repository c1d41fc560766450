"""
In-memory inverted index.

Stores per-field postings (term -> document -> positions) and executes
query nodes by computing dense numpy score vectors over all document
slots. Deleted documents keep their slot but are masked out.

Scoring:
    term     sqrt(tf) * idf, idf = log(1 + N / df)
    phrase   sum of term idfs, damped by the slop actually used
    fuzzy    term score of each similar vocabulary term * similarity
    wildcard sum of term scores of the matching vocabulary terms
    range    constant 1.0
    boolean  sum of the matching required and optional clause scores
Every score is multiplied by the node's boost.
"""

from __future__ import annotations

from typing import Any, Dict, Iterable, List, Optional, Tuple, Union
import math
import re

import numpy as np
from numpy.typing import NDArray

from ..core.exceptions import SearchIndexError
from ..query.clauses import Sign
from ..query.nodes import (
    BooleanQuery,
    FuzzyQuery,
    PhraseQuery,
    Query,
    RangeQuery,
    TermQuery,
    WildcardQuery,
)
from ..query.parser import QueryParser
from ..utils.logging import get_logger
from .analysis import Analyzer
from .base import Document, Hit, SearchIndex
from .fuzzy import find_similar_terms


logger = get_logger(__name__)

# Positions of one term: doc_id -> [position, ...]
Postings = Dict[int, List[int]]

DEFAULT_FUZZY_MIN_SIMILARITY = 0.5


class InMemoryIndex(SearchIndex):
    """
    Inverted index held in memory.
    
    Example:
        >>> index = InMemoryIndex()
        >>> index.add(Document("Product", 1, {"name": "Red apple"}))
        0
        >>> index.find("name:apple")
        [Hit(Product#1, score=...)]
    """
    
    def __init__(
        self,
        analyzer: Optional[Analyzer] = None,
        fuzzy_min_similarity: float = DEFAULT_FUZZY_MIN_SIMILARITY,
        parser: Optional[QueryParser] = None,
    ):
        """
        Initialize the index.
        
        Args:
            analyzer: Tokenizer for documents and query terms
            fuzzy_min_similarity: Similarity used by fuzzy terms that
                do not specify one
            parser: Parser for query-language strings
        """
        super().__init__()
        if not 0 <= fuzzy_min_similarity <= 1:
            raise SearchIndexError(
                f"fuzzy_min_similarity must be in [0, 1], got {fuzzy_min_similarity}"
            )
        self.analyzer = analyzer or Analyzer()
        self.fuzzy_min_similarity = fuzzy_min_similarity
        self._parser = parser or QueryParser()
        
        self._documents: List[Optional[Document]] = []
        self._alive: NDArray[np.bool_] = np.zeros(0, dtype=bool)
        self._keys: Dict[Tuple[str, Any], List[int]] = {}
        self._postings: Dict[str, Dict[str, Postings]] = {}
    
    # =========================================================================
    # PROPERTIES
    # =========================================================================
    
    @property
    def fields(self) -> List[str]:
        """Names of all indexed fields."""
        return sorted(self._postings)
    
    def __len__(self) -> int:
        return int(self._alive.sum())
    
    def get_document(self, doc_id: int) -> Optional[Document]:
        """Document stored in slot ``doc_id`` (None if deleted)."""
        if 0 <= doc_id < len(self._documents):
            return self._documents[doc_id]
        return None
    
    def stats(self) -> Dict[str, Any]:
        return {
            "documents": len(self),
            "slots": len(self._documents),
            "fields": self.fields,
            "terms": sum(len(terms) for terms in self._postings.values()),
        }
    
    # =========================================================================
    # WRITES
    # =========================================================================
    
    def add(self, document: Document) -> int:
        with self._lock:
            doc_id = len(self._documents)
            self._documents.append(document)
            self._alive = np.append(self._alive, True)
            self._keys.setdefault(document.key, []).append(doc_id)
            
            for name, text in document.fields.items():
                terms = self._postings.setdefault(name, {})
                for position, token in enumerate(self.analyzer.tokenize(text)):
                    terms.setdefault(token, {}).setdefault(doc_id, []).append(position)
            
            return doc_id
    
    def delete_by_key(self, model_type: str, model_id: Any) -> int:
        with self._lock:
            doc_ids = self._keys.pop((model_type, model_id), [])
            for doc_id in doc_ids:
                self._remove_postings(doc_id)
                self._documents[doc_id] = None
                self._alive[doc_id] = False
            
            if doc_ids:
                logger.debug("Removed %d documents of %s#%s", len(doc_ids), model_type, model_id)
            return len(doc_ids)
    
    def clear(self) -> None:
        with self._lock:
            self._documents = []
            self._alive = np.zeros(0, dtype=bool)
            self._keys = {}
            self._postings = {}
    
    def _remove_postings(self, doc_id: int) -> None:
        document = self._documents[doc_id]
        if document is None:
            return
        for name, text in document.fields.items():
            terms = self._postings.get(name, {})
            for token in set(self.analyzer.tokenize(text)):
                postings = terms.get(token)
                if postings is None:
                    continue
                postings.pop(doc_id, None)
                if not postings:
                    del terms[token]
    
    # =========================================================================
    # SEARCH
    # =========================================================================
    
    def find(self, query: Union[str, Query]) -> List[Hit]:
        if isinstance(query, str):
            query = self._parser.parse(query)
        elif not isinstance(query, Query):
            raise SearchIndexError(
                f"Query must be a string or Query, got {type(query).__name__}"
            )
        
        with self._lock:
            scores, matched = self._evaluate(query)
            doc_ids = np.flatnonzero(matched & self._alive)
            
            # Descending score, then insertion order
            order = np.lexsort((doc_ids, -scores[doc_ids]))
            
            hits = []
            for doc_id in doc_ids[order]:
                document = self._documents[doc_id]
                hits.append(Hit(
                    doc_id=int(doc_id),
                    score=float(scores[doc_id]),
                    model_type=document.model_type,
                    model_id=document.model_id,
                ))
            return hits
    
    def _empty(self) -> Tuple[NDArray[np.float64], NDArray[np.bool_]]:
        n = len(self._documents)
        return np.zeros(n, dtype=np.float64), np.zeros(n, dtype=bool)
    
    def _evaluate(self, query: Query) -> Tuple[NDArray[np.float64], NDArray[np.bool_]]:
        """Score vector and match mask of ``query`` over all slots."""
        if isinstance(query, BooleanQuery):
            scores, matched = self._evaluate_boolean(query)
        elif isinstance(query, TermQuery):
            scores, matched = self._evaluate_terms(query.field, self.analyzer.tokenize(query.text), 0)
        elif isinstance(query, PhraseQuery):
            tokens = self.analyzer.tokenize(" ".join(query.terms))
            scores, matched = self._evaluate_terms(query.field, tokens, query.slop)
        elif isinstance(query, FuzzyQuery):
            scores, matched = self._evaluate_fuzzy(query)
        elif isinstance(query, WildcardQuery):
            scores, matched = self._evaluate_wildcard(query)
        elif isinstance(query, RangeQuery):
            scores, matched = self._evaluate_range(query)
        else:
            raise SearchIndexError(f"Unsupported query type: {type(query).__name__}")
        
        if query.boost != 1.0:
            scores = scores * query.boost
        return scores, matched
    
    def _evaluate_boolean(self, query: BooleanQuery) -> Tuple[NDArray[np.float64], NDArray[np.bool_]]:
        required = [c.query for c in query.clauses if c.sign is Sign.MUST]
        optional = [c.query for c in query.clauses if c.sign is Sign.SHOULD]
        prohibited = [c.query for c in query.clauses if c.sign is Sign.MUST_NOT]
        
        scores, matched = self._empty()
        if not required and not optional:
            return scores, matched
        
        if required:
            matched[:] = True
            for sub in required:
                sub_scores, sub_matched = self._evaluate(sub)
                matched &= sub_matched
                scores += sub_scores
        
        for sub in optional:
            sub_scores, sub_matched = self._evaluate(sub)
            if not required:
                matched |= sub_matched
            scores += np.where(sub_matched, sub_scores, 0.0)
        
        for sub in prohibited:
            _, sub_matched = self._evaluate(sub)
            matched &= ~sub_matched
        
        return np.where(matched, scores, 0.0), matched
    
    def _search_fields(self, field: Optional[str]) -> List[str]:
        if field:
            return [field] if field in self._postings else []
        return list(self._postings)
    
    def _idf(self, df: int) -> float:
        return math.log(1.0 + max(len(self), 1) / max(df, 1))
    
    def _add_term_scores(
        self,
        postings: Postings,
        weight: float,
        scores: NDArray[np.float64],
        matched: NDArray[np.bool_],
    ) -> None:
        if not postings:
            return
        doc_ids = np.fromiter(postings.keys(), dtype=np.int64, count=len(postings))
        tf = np.fromiter((len(p) for p in postings.values()), dtype=np.float64, count=len(postings))
        scores[doc_ids] += np.sqrt(tf) * self._idf(len(postings)) * weight
        matched[doc_ids] = True
    
    def _evaluate_terms(
        self,
        field: Optional[str],
        tokens: List[str],
        slop: int,
    ) -> Tuple[NDArray[np.float64], NDArray[np.bool_]]:
        """Single token: term match. Several tokens: phrase within ``slop``."""
        scores, matched = self._empty()
        if not tokens:
            return scores, matched
        
        for name in self._search_fields(field):
            terms = self._postings[name]
            
            if len(tokens) == 1:
                self._add_term_scores(terms.get(tokens[0], {}), 1.0, scores, matched)
                continue
            
            position_maps = [terms.get(token) for token in tokens]
            if any(not p for p in position_maps):
                continue
            
            idf_sum = sum(self._idf(len(p)) for p in position_maps)
            candidates = set(position_maps[0])
            for p in position_maps[1:]:
                candidates &= set(p)
            
            for doc_id in candidates:
                distance = phrase_distance([p[doc_id] for p in position_maps], slop)
                if distance is not None:
                    scores[doc_id] += idf_sum / (1.0 + distance)
                    matched[doc_id] = True
        
        return scores, matched
    
    def _evaluate_fuzzy(self, query: FuzzyQuery) -> Tuple[NDArray[np.float64], NDArray[np.bool_]]:
        scores, matched = self._empty()
        tokens = self.analyzer.tokenize(query.text)
        if not tokens:
            return scores, matched
        
        min_similarity = self.fuzzy_min_similarity if query.similarity is None else query.similarity
        term = "".join(tokens)
        
        for name in self._search_fields(query.field):
            terms = self._postings[name]
            for candidate, similarity in find_similar_terms(term, terms, min_similarity):
                self._add_term_scores(terms[candidate], similarity, scores, matched)
        
        return scores, matched
    
    def _evaluate_wildcard(self, query: WildcardQuery) -> Tuple[NDArray[np.float64], NDArray[np.bool_]]:
        scores, matched = self._empty()
        pattern = wildcard_to_regex(query.pattern.lower())
        
        for name in self._search_fields(query.field):
            terms = self._postings[name]
            for term in _matching_terms(terms, pattern.fullmatch):
                self._add_term_scores(terms[term], 1.0, scores, matched)
        
        return scores, matched
    
    def _evaluate_range(self, query: RangeQuery) -> Tuple[NDArray[np.float64], NDArray[np.bool_]]:
        scores, matched = self._empty()
        lower = None if query.lower is None else query.lower.lower()
        upper = None if query.upper is None else query.upper.lower()
        
        def in_range(term: str) -> bool:
            if lower is not None and (term < lower or (not query.inclusive and term == lower)):
                return False
            if upper is not None and (term > upper or (not query.inclusive and term == upper)):
                return False
            return True
        
        for name in self._search_fields(query.field):
            terms = self._postings[name]
            for term in _matching_terms(terms, in_range):
                doc_ids = np.fromiter(terms[term].keys(), dtype=np.int64)
                matched[doc_ids] = True
        
        scores[matched] = 1.0
        return scores, matched


def _matching_terms(terms: Dict[str, Postings], predicate) -> Iterable[str]:
    return [term for term in terms if predicate(term)]


def wildcard_to_regex(pattern: str) -> "re.Pattern[str]":
    """Compile a ``*``/``?`` wildcard pattern into a regex."""
    parts = []
    for ch in pattern:
        if ch == "*":
            parts.append(".*")
        elif ch == "?":
            parts.append(".")
        else:
            parts.append(re.escape(ch))
    return re.compile("".join(parts), re.DOTALL)


def phrase_distance(positions: List[List[int]], slop: int) -> Optional[int]:
    """
    Smallest positional spread of an occurrence of the phrase.
    
    Each term's position is shifted by its index in the phrase, so an
    exact phrase has spread 0. For every position of the first term the
    closest position of each other term is taken.
    
    Args:
        positions: Positions of each phrase term in one document
        slop: Largest accepted spread
        
    Returns:
        The spread, or None if no occurrence is within ``slop``
    """
    best: Optional[int] = None
    
    for anchor in positions[0]:
        offsets = [anchor]
        for i, term_positions in enumerate(positions[1:], start=1):
            closest = min(term_positions, key=lambda p: abs(p - i - anchor))
            offsets.append(closest - i)
        
        spread = max(offsets) - min(offsets)
        if spread <= slop and (best is None or spread < best):
            best = spread
            if best == 0:
                break
    
    return best
