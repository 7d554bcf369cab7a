"""Chunk and search result schemas."""

from typing import Any

from pydantic import BaseModel, Field


class Chunk(BaseModel):
    """A retrievable span of text with its TF-IDF vector."""

    id: str = Field(description="Hash of text prefix and chunk index")
    text: str = Field(description="Trimmed chunk text")
    source: str = Field(description="Absolute file path or caller-supplied tag")
    metadata: dict[str, Any] = Field(
        default_factory=dict, description="Free-form metadata, always has chunkIndex"
    )
    vector: dict[str, float] = Field(
        default_factory=dict, description="Sparse term -> TF-IDF weight"
    )

    @property
    def chunk_index(self) -> int:
        """Ordinal position of this chunk within its source."""
        return int(self.metadata.get("chunkIndex", 0))


class SearchResult(BaseModel):
    """A chunk scored against a query."""

    text: str
    source: str
    metadata: dict[str, Any] = Field(default_factory=dict)
    score: float = Field(description="Cosine similarity in [0, 1]")
