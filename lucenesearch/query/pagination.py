"""
Paginated result pages.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List
import math


@dataclass
class Page:
    """
    One page of search results.
    
    Attributes:
        items: Records on this page
        total: Total number of matches across all pages
        per_page: Page size
        current_page: 1-based page number
    """
    
    items: List[Any] = field(default_factory=list)
    total: int = 0
    per_page: int = 25
    current_page: int = 1
    
    @property
    def last_page(self) -> int:
        return max(1, math.ceil(self.total / self.per_page))
    
    @property
    def has_more_pages(self) -> bool:
        return self.current_page < self.last_page
    
    @property
    def from_index(self) -> int:
        """1-based position of the first item on this page (0 when empty)."""
        if not self.items:
            return 0
        return (self.current_page - 1) * self.per_page + 1
    
    @property
    def to_index(self) -> int:
        """1-based position of the last item on this page (0 when empty)."""
        if not self.items:
            return 0
        return self.from_index + len(self.items) - 1
    
    def __iter__(self) -> Iterator[Any]:
        return iter(self.items)
    
    def __len__(self) -> int:
        return len(self.items)
    
    def to_dict(self) -> Dict[str, Any]:
        return {
            "items": self.items,
            "total": self.total,
            "per_page": self.per_page,
            "current_page": self.current_page,
            "last_page": self.last_page,
            "from": self.from_index,
            "to": self.to_index,
        }


def page_offset(page: int, per_page: int) -> int:
    """Offset of the first record on ``page``; pages below 1 count as 1."""
    return (max(1, page) - 1) * per_page
