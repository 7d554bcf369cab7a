"""Fixed-size word window chunker with overlap."""

from typing import Any, Optional

import structlog

from ..config import settings
from ..schemas.chunk import Chunk
from .base import BaseChunker

logger = structlog.get_logger(__name__)


class WindowChunker(BaseChunker):
    """
    Chunk text into overlapping windows of words.

    Consecutive windows share ``overlap`` words so a passage that straddles
    a window boundary still appears whole in at least one chunk.
    """

    chunker_name = "window"

    def __init__(self, chunk_size: Optional[int] = None, overlap: Optional[int] = None):
        self.chunk_size = settings.chunk_size if chunk_size is None else chunk_size
        self.overlap = settings.chunk_overlap if overlap is None else overlap

        if self.chunk_size <= 0:
            raise ValueError(f"chunk_size must be positive, got {self.chunk_size}")
        if self.overlap < 0:
            raise ValueError(f"overlap must be non-negative, got {self.overlap}")
        if self.overlap >= self.chunk_size:
            raise ValueError(
                f"overlap must be smaller than chunk_size, got {self.overlap} >= {self.chunk_size}"
            )

    def chunk(
        self, text: str, source: str, metadata: Optional[dict[str, Any]] = None
    ) -> list[Chunk]:
        """
        Split text into word windows.

        Args:
            text: Full text
            source: Source identifier
            metadata: Extra metadata for every chunk

        Returns:
            List of Chunk objects (a single chunk for short text)
        """
        words = text.split()

        if len(words) <= self.chunk_size:
            return [self._create_chunk(text, source, 0, metadata)]

        chunks = []
        start = 0
        chunk_index = 0

        while start < len(words):
            end = min(start + self.chunk_size, len(words))
            window_text = " ".join(words[start:end])
            chunks.append(self._create_chunk(window_text, source, chunk_index, metadata))

            if end >= len(words):
                break

            chunk_index += 1
            start = end - self.overlap

        logger.debug(
            "Window chunking complete",
            source=source,
            words=len(words),
            chunks=len(chunks),
        )
        return chunks
