"""
Abstract base class for search index implementations.

An index stores analyzed documents and executes structured queries
(or query-language strings) against them, returning ranked hits.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, List, Union
import threading

from ..query.nodes import Query


@dataclass
class Document:
    """
    A model's indexable content.
    
    Attributes:
        model_type: Registered model name
        model_id: Primary key of the model
        fields: Field name -> text
    """
    
    model_type: str
    model_id: Any
    fields: Dict[str, str] = field(default_factory=dict)
    
    @property
    def key(self) -> tuple:
        return (self.model_type, self.model_id)


@dataclass
class Hit:
    """
    One match returned by an index.
    
    Attributes:
        doc_id: Internal document number
        score: Relevance score (higher = better)
        model_type: Registered model name of the document
        model_id: Primary key of the document's model
    """
    
    doc_id: int
    score: float
    model_type: str
    model_id: Any
    
    def to_dict(self) -> Dict[str, Any]:
        return {
            "doc_id": self.doc_id,
            "score": self.score,
            "model_type": self.model_type,
            "model_id": self.model_id,
        }
    
    def __repr__(self) -> str:
        return f"Hit({self.model_type}#{self.model_id}, score={self.score:.4f})"


class SearchIndex(ABC):
    """
    Abstract base class for search indices.
    
    Thread Safety:
        Implementations guard their state with ``self._lock``.
    """
    
    def __init__(self):
        self._lock = threading.RLock()
    
    @abstractmethod
    def add(self, document: Document) -> int:
        """
        Add a document.
        
        Args:
            document: Document to index
            
        Returns:
            Internal document number
        """
        pass
    
    @abstractmethod
    def delete_by_key(self, model_type: str, model_id: Any) -> int:
        """
        Remove every document of one model.
        
        Returns:
            Number of documents removed
        """
        pass
    
    @abstractmethod
    def find(self, query: Union[str, Query]) -> List[Hit]:
        """
        Execute a query.
        
        Args:
            query: Query node or query-language text
            
        Returns:
            Hits ordered by descending score
        """
        pass
    
    @abstractmethod
    def clear(self) -> None:
        """Remove all documents."""
        pass
    
    @abstractmethod
    def __len__(self) -> int:
        """Number of live documents."""
        pass
    
    def update(self, document: Document) -> int:
        """Replace the document of a model."""
        with self._lock:
            self.delete_by_key(document.model_type, document.model_id)
            return self.add(document)
