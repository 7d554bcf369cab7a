"""Pydantic schemas for the retrieval engine."""

from .chunk import Chunk, SearchResult
from .index import ChunksFile, IndexStats, IngestResult, VocabularyFile

__all__ = [
    "Chunk",
    "SearchResult",
    "ChunksFile",
    "VocabularyFile",
    "IngestResult",
    "IndexStats",
]
