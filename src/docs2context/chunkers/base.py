"""Base chunker abstract class."""

import hashlib
from abc import ABC, abstractmethod
from typing import Any, Optional

from ..schemas.chunk import Chunk


def generate_chunk_id(text: str, chunk_index: int) -> str:
    """
    Derive a stable chunk identifier.

    Args:
        text: Chunk text (only the first 100 characters are hashed)
        chunk_index: Position of the chunk within its source

    Returns:
        Identifier of the form ``chunk_<12 hex chars>``
    """
    digest = hashlib.md5(f"{text[:100]}{chunk_index}".encode("utf-8")).hexdigest()
    return f"chunk_{digest[:12]}"


class BaseChunker(ABC):
    """Abstract base class for chunking strategies."""

    chunker_name: str = "base"

    @abstractmethod
    def chunk(
        self, text: str, source: str, metadata: Optional[dict[str, Any]] = None
    ) -> list[Chunk]:
        """
        Split text into chunks.

        Args:
            text: Full text content to chunk
            source: Source identifier stored on every chunk
            metadata: Extra metadata copied onto every chunk

        Returns:
            List of Chunk objects with empty vectors
        """
        pass

    def _create_chunk(
        self,
        text: str,
        source: str,
        chunk_index: int,
        metadata: Optional[dict[str, Any]],
    ) -> Chunk:
        """Create a Chunk object with metadata."""
        return Chunk(
            id=generate_chunk_id(text, chunk_index),
            text=text.strip(),
            source=source,
            metadata={**(metadata or {}), "chunkIndex": chunk_index},
        )
