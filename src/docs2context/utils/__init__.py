"""Utility modules for the retrieval engine."""

from .file_utils import get_file_size_mb, walk_directory
from .logging_setup import setup_logging
from .tokenizer import STOP_WORDS, is_stop_word, tokenize

__all__ = [
    "setup_logging",
    "walk_directory",
    "get_file_size_mb",
    "tokenize",
    "is_stop_word",
    "STOP_WORDS",
]
