"""Chunking strategies for indexed text."""

from .base import BaseChunker, generate_chunk_id
from .window_chunker import WindowChunker

__all__ = ["BaseChunker", "WindowChunker", "generate_chunk_id"]
