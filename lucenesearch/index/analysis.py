"""
Text analysis for indexing and querying.
"""

from __future__ import annotations

from typing import List, Optional, Sequence
import re


class Analyzer:
    """
    Lowercasing word tokenizer.
    
    Splits text on anything that is not a word character or apostrophe,
    then drops apostrophes, so ``"Don't"`` becomes ``"dont"``.
    """
    
    def __init__(
        self,
        pattern: str = r"[\w']+",
        stopwords: Optional[Sequence[str]] = None,
    ):
        self.pattern = re.compile(pattern, re.UNICODE)
        self.stopwords = frozenset(w.lower() for w in (stopwords or ()))
    
    def tokenize(self, text: str) -> List[str]:
        """Tokens of ``text`` in order; positions are list indices."""
        if not text:
            return []
        tokens = []
        for match in self.pattern.finditer(str(text)):
            token = match.group(0).replace("'", "").lower()
            if token and token not in self.stopwords:
                tokens.append(token)
        return tokens
    
    def __call__(self, text: str) -> List[str]:
        return self.tokenize(text)
