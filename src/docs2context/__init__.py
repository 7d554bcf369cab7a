"""Docs2Context - local TF-IDF retrieval for prompt context enrichment."""

from .errors import (
    Docs2ContextError,
    ExtractionError,
    FileTooLargeError,
    IngestionError,
    UnsupportedFileError,
)
from .schemas import Chunk, IndexStats, IngestResult, SearchResult
from .store import IndexState, IndexStore

__version__ = "0.1.0"

__all__ = [
    "IndexStore",
    "IndexState",
    "Chunk",
    "SearchResult",
    "IngestResult",
    "IndexStats",
    "Docs2ContextError",
    "IngestionError",
    "UnsupportedFileError",
    "FileTooLargeError",
    "ExtractionError",
]
