"""Corpus-wide document frequency and IDF tables."""

import math
from collections.abc import Iterable

from pydantic import BaseModel, Field

from .utils.tokenizer import tokenize


class Vocabulary(BaseModel):
    """
    Global corpus statistics.

    ``doc_frequency`` counts chunks containing each term. ``idf`` is derived
    from it and the chunk count by ``recompute_idf`` and must be refreshed
    whenever either changes.
    """

    doc_frequency: dict[str, int] = Field(default_factory=dict)
    idf: dict[str, float] = Field(default_factory=dict)
    total_documents: int = Field(default=0, description="Logical documents ingested")

    @classmethod
    def from_texts(cls, texts: Iterable[str], total_documents: int = 0) -> "Vocabulary":
        """Build document frequencies from scratch over chunk texts."""
        vocabulary = cls(total_documents=total_documents)
        for text in texts:
            vocabulary.observe(text)
        return vocabulary

    def observe(self, text: str) -> None:
        """Count each distinct term of one chunk once."""
        for term in set(tokenize(text)):
            self.doc_frequency[term] = self.doc_frequency.get(term, 0) + 1

    def recompute_idf(self, total_chunks: int) -> None:
        """
        Rebuild the IDF table.

        Args:
            total_chunks: Number of chunks currently in the index
        """
        n = max(total_chunks, 1)
        self.idf = {
            term: math.log(n / (1 + count)) + 1
            for term, count in self.doc_frequency.items()
        }

    def fallback_weight(self) -> float:
        """Weight used for terms that were never observed."""
        return math.log(self.total_documents + 1)

    def weight(self, term: str) -> float:
        """IDF of a term, or the fallback weight for unseen terms."""
        idf = self.idf.get(term)
        return idf if idf is not None else self.fallback_weight()

    @property
    def size(self) -> int:
        """Number of terms with an IDF weight."""
        return len(self.idf)
