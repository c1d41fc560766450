"""
Search index implementations.
"""

from .analysis import Analyzer
from .base import Document, Hit, SearchIndex
from .fuzzy import levenshtein_distance, similarity, find_similar_terms
from .memory import InMemoryIndex, phrase_distance, wildcard_to_regex

__all__ = [
    "Analyzer",
    "Document",
    "Hit",
    "SearchIndex",
    "InMemoryIndex",
    "levenshtein_distance",
    "similarity",
    "find_similar_terms",
    "phrase_distance",
    "wildcard_to_regex",
]
