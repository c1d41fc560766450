"""
Result-count cache keyed by query identity.

The identity of a query is the md5 digest of its msgpack serialization:
raw query strings are packed as-is, query nodes through ``to_dict()``.
Two value-equal queries therefore share an entry, and any change to a
query produces a new key.
"""

from __future__ import annotations

from typing import Any, Dict, Optional, Union
import hashlib

import msgpack

from .nodes import Query


QueryLike = Union[str, Query]


def query_identity(query: QueryLike) -> str:
    """
    Compute the identity key of a query.
    
    Args:
        query: Raw query string or query node
        
    Returns:
        Hex digest identifying the query's content
    """
    if isinstance(query, Query):
        payload: Any = {"query": query.to_dict()}
    elif isinstance(query, str):
        payload = {"raw": query}
    else:
        payload = {"repr": repr(query)}
    
    packed = msgpack.packb(payload, use_bin_type=True)
    return hashlib.md5(packed).hexdigest()


class ResultCache:
    """
    Total hit counts per query identity.
    
    Entries live as long as the cache and are never evicted.
    """
    
    def __init__(self):
        self._totals: Dict[str, int] = {}
        self.hits = 0
        self.misses = 0
    
    def get(self, query: QueryLike) -> Optional[int]:
        """Cached total for ``query``, or None."""
        total = self._totals.get(query_identity(query))
        if total is None:
            self.misses += 1
        else:
            self.hits += 1
        return total
    
    def store(self, query: QueryLike, total: int) -> None:
        """Remember the total hit count of ``query``."""
        self._totals[query_identity(query)] = total
    
    def __contains__(self, query: QueryLike) -> bool:
        return query_identity(query) in self._totals
    
    def __len__(self) -> int:
        return len(self._totals)
    
    def stats(self) -> Dict[str, int]:
        return {
            "entries": len(self._totals),
            "hits": self.hits,
            "misses": self.misses,
        }
