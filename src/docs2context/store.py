"""
Index store: the authoritative collection of chunks plus the vocabulary.

Every mutation stages a copy of the current state, applies its changes,
recomputes IDF and all chunk vectors, swaps the new state in and persists
it before returning. Writers are serialized by a lock; searches read
whichever state was current when they started and never see a partially
recomputed vocabulary.
"""

import os
import threading
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any, Optional

import structlog

from .chunkers import BaseChunker, WindowChunker
from .config import Settings, settings as default_settings
from .errors import (
    ExtractionError,
    FileTooLargeError,
    IngestionError,
    UnsupportedFileError,
)
from .extractors import ExtractorRegistry, default_registry
from .persistence import IndexPersistence
from .schemas.chunk import Chunk, SearchResult
from .schemas.index import IndexStats, IngestResult
from .search import format_context, search
from .utils.file_utils import get_file_size_mb, walk_directory
from .vectorizer import vectorize
from .vocabulary import Vocabulary

logger = structlog.get_logger(__name__)

# Extensions that need an extractor; everything else is read as UTF-8 text
BINARY_EXTENSIONS = {".pdf", ".docx"}


@dataclass(frozen=True)
class IndexState:
    """Immutable snapshot of the index at one version."""

    chunks: tuple[Chunk, ...] = ()
    vocabulary: Vocabulary = field(default_factory=Vocabulary)
    version: int = 0


class IndexStore:
    """
    TF-IDF retrieval index over ingested documents.

    Ingestion: index_text, index_file, index_directory, remove_file, clear.
    Queries: search, get_context, stats.
    """

    def __init__(
        self,
        config: Optional[Settings] = None,
        persistence: Optional[IndexPersistence] = None,
        extractors: Optional[ExtractorRegistry] = None,
        chunker: Optional[BaseChunker] = None,
    ):
        """
        Initialize the store and load any persisted snapshot.

        Args:
            config: Settings (default: module settings)
            persistence: Snapshot reader/writer (default: under config.index_dir)
            extractors: Extractor registry for binary formats (default: MarkItDown)
            chunker: Chunking strategy (default: WindowChunker from config)
        """
        self.settings = config or default_settings
        self.persistence = persistence or IndexPersistence(self.settings.index_dir)
        self.extractors = extractors if extractors is not None else default_registry()
        self.chunker = chunker or WindowChunker(
            chunk_size=self.settings.chunk_size,
            overlap=self.settings.chunk_overlap,
        )

        self._lock = threading.Lock()
        self._state = self.persistence.load()

    @property
    def state(self) -> IndexState:
        """Current index snapshot."""
        return self._state

    @property
    def version(self) -> int:
        """Incremented on every committed mutation."""
        return self._state.version

    # ------------------------------------------------------------------
    # Ingestion
    # ------------------------------------------------------------------

    def index_text(
        self,
        text: str,
        source: str = "user_input",
        metadata: Optional[dict[str, Any]] = None,
    ) -> int:
        """
        Index raw text under a source tag.

        Args:
            text: Text to index
            source: Identifier grouping the produced chunks
            metadata: Extra metadata for every chunk

        Returns:
            Number of chunks added (0 if the text is too short)
        """
        with self._lock:
            chunks, vocabulary = self._stage()
            added = self._add_text(chunks, vocabulary, text, source, metadata)
            if added:
                self._commit(chunks, vocabulary)

        logger.info("Indexed text", source=source, chunks=added)
        return added

    def index_file(self, path: Path | str, metadata: Optional[dict[str, Any]] = None) -> int:
        """
        Index a single file, replacing any chunks previously indexed from it.

        Args:
            path: File to index
            metadata: Extra metadata for every chunk

        Returns:
            Number of chunks added

        Raises:
            UnsupportedFileError: Extension not indexable or no extractor registered
            FileTooLargeError: File exceeds max_file_size_mb
            ExtractionError: File could not be read or converted
        """
        file_path = Path(path).resolve()
        text = self._read_file(file_path)

        with self._lock:
            chunks, vocabulary = self._stage()
            chunks, removed = self._remove_source(chunks, {str(file_path)})
            added = self._add_text(chunks, vocabulary, text, str(file_path), metadata)
            if removed or added:
                self._commit(chunks, vocabulary, rebuild_frequencies=bool(removed))

        logger.info("Indexed file", file=file_path.name, chunks=added, replaced=removed)
        return added

    def index_directory(
        self,
        root: Path | str | None = None,
        max_depth: Optional[int] = None,
        metadata: Optional[dict[str, Any]] = None,
    ) -> IngestResult:
        """
        Recursively index every eligible file under a directory.

        Files are read in parallel; the index is then updated serially in
        walk order and recomputed once. A failing file is recorded in the
        result and does not stop the walk.

        Args:
            root: Directory to walk (default: settings.documents_dir)
            max_depth: Recursion limit (default: settings.max_depth)
            metadata: Extra metadata for every chunk

        Returns:
            IngestResult with indexed/skipped counts and per-file errors
        """
        start_time = datetime.now()
        root_dir = Path(root or self.settings.documents_dir).resolve()
        depth = self.settings.max_depth if max_depth is None else max_depth
        result = IngestResult()

        if not root_dir.is_dir():
            logger.warning("Directory not found", directory=str(root_dir))
            result.errors.append(f"{root_dir}: directory not found")
            return result

        files = list(walk_directory(root_dir, max_depth=depth, ignore_dirs=self.settings.ignore_dirs))
        logger.info("Found files", directory=str(root_dir), files=len(files))

        with ThreadPoolExecutor(max_workers=max(1, self.settings.read_workers)) as pool:
            futures = [pool.submit(self._read_file, file_path) for file_path in files]

        with self._lock:
            chunks, vocabulary = self._stage()
            any_removed = False
            changed = False

            for file_path, future in zip(files, futures):
                try:
                    text = future.result()
                except (UnsupportedFileError, FileTooLargeError) as e:
                    logger.debug("Skipping file", file=file_path.name, reason=e.message)
                    result.skipped += 1
                    continue
                except IngestionError as e:
                    logger.warning("Failed to read file", file=file_path.name, error=e.message)
                    result.errors.append(str(e))
                    continue

                chunks, removed = self._remove_source(chunks, {str(file_path)})
                added = self._add_text(chunks, vocabulary, text, str(file_path), metadata)
                any_removed = any_removed or bool(removed)
                changed = changed or bool(removed or added)
                result.indexed += 1

            if changed:
                self._commit(chunks, vocabulary, rebuild_frequencies=any_removed)

        duration = (datetime.now() - start_time).total_seconds()
        logger.info(
            "Directory indexed",
            directory=str(root_dir),
            indexed=result.indexed,
            skipped=result.skipped,
            errors=len(result.errors),
            total_chunks=len(self._state.chunks),
            duration_seconds=f"{duration:.1f}",
        )
        return result

    def remove_file(self, path: Path | str) -> bool:
        """
        Remove every chunk indexed from a file or source tag.

        Args:
            path: File path (resolved) or the exact source tag

        Returns:
            True if any chunk was removed
        """
        sources = {str(path), str(Path(path).resolve())}

        with self._lock:
            chunks, vocabulary = self._stage()
            chunks, removed = self._remove_source(chunks, sources)
            if removed:
                self._commit(chunks, vocabulary, rebuild_frequencies=True)

        logger.info("Removed source", source=str(path), chunks=removed)
        return removed > 0

    def clear(self) -> None:
        """Empty the whole index and persist the empty state."""
        with self._lock:
            self._state = IndexState(version=self._state.version + 1)
            self.persistence.save(self._state)
        logger.info("Index cleared")

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def search(
        self,
        query: str,
        top_k: Optional[int] = None,
        min_score: Optional[float] = None,
        source_filter: Optional[str] = None,
    ) -> list[SearchResult]:
        """
        Find the chunks most similar to a query.

        Args:
            query: Query text
            top_k: Maximum results (default: settings.default_top_k)
            min_score: Minimum cosine score (default: settings.default_min_score)
            source_filter: Only chunks whose source contains this string

        Returns:
            Results sorted by descending score
        """
        return search(
            self._state,
            query,
            top_k=self.settings.default_top_k if top_k is None else top_k,
            min_score=self.settings.default_min_score if min_score is None else min_score,
            source_filter=source_filter,
        )

    def get_context(
        self,
        query: str,
        top_k: Optional[int] = None,
        min_score: Optional[float] = None,
        source_filter: Optional[str] = None,
    ) -> str:
        """Search and format the results as a prompt context block ("" if none)."""
        return format_context(self.search(query, top_k, min_score, source_filter))

    def stats(self) -> IndexStats:
        """Aggregate statistics over the current index."""
        state = self._state
        sources = list(dict.fromkeys(c.source for c in state.chunks))
        return IndexStats(
            total_chunks=len(state.chunks),
            total_sources=len(sources),
            total_documents=state.vocabulary.total_documents,
            vocabulary_size=state.vocabulary.size,
            sources=[os.path.basename(s) for s in sources],
        )

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _stage(self) -> tuple[list[Chunk], Vocabulary]:
        """Mutable copies of the current chunks and vocabulary."""
        state = self._state
        return list(state.chunks), state.vocabulary.model_copy(deep=True)

    def _add_text(
        self,
        chunks: list[Chunk],
        vocabulary: Vocabulary,
        text: str,
        source: str,
        metadata: Optional[dict[str, Any]],
    ) -> int:
        """Chunk text into the staged lists. Returns the number of chunks added."""
        if not text or len(text.strip()) < self.settings.min_content_chars:
            logger.debug("Text below minimum length, not indexed", source=source)
            return 0

        new_chunks = self.chunker.chunk(text, source, metadata)
        chunks.extend(new_chunks)
        vocabulary.total_documents += 1
        for chunk in new_chunks:
            vocabulary.observe(chunk.text)
        return len(new_chunks)

    def _remove_source(self, chunks: list[Chunk], sources: set[str]) -> tuple[list[Chunk], int]:
        """Drop staged chunks belonging to any of the given sources."""
        kept = [c for c in chunks if c.source not in sources]
        return kept, len(chunks) - len(kept)

    def _commit(
        self,
        chunks: list[Chunk],
        vocabulary: Vocabulary,
        rebuild_frequencies: bool = False,
    ) -> IndexState:
        """
        Recompute IDF and every vector, swap the new state in and persist it.

        Must be called with the lock held.
        """
        if rebuild_frequencies:
            vocabulary = Vocabulary.from_texts(
                (c.text for c in chunks),
                total_documents=vocabulary.total_documents,
            )

        vocabulary.recompute_idf(len(chunks))
        vectorized = tuple(
            c.model_copy(update={"vector": vectorize(c.text, vocabulary)}) for c in chunks
        )

        self._state = IndexState(
            chunks=vectorized,
            vocabulary=vocabulary,
            version=self._state.version + 1,
        )

        if not self.persistence.save(self._state):
            logger.warning("Index kept in memory only", version=self._state.version)
        return self._state

    def _read_file(self, file_path: Path) -> str:
        """
        Read a file as plain text, using an extractor for binary formats.

        Raises:
            UnsupportedFileError, FileTooLargeError, ExtractionError
        """
        extension = file_path.suffix.lower()

        if extension not in self.settings.supported_extensions:
            raise UnsupportedFileError(file_path, f"unsupported extension '{extension}'")

        try:
            size_mb = get_file_size_mb(file_path)
        except OSError as e:
            raise ExtractionError(file_path, f"cannot stat file: {e}") from e

        if size_mb > self.settings.max_file_size_mb:
            raise FileTooLargeError(
                file_path,
                f"file is {size_mb:.1f} MB, limit is {self.settings.max_file_size_mb} MB",
            )

        extractor = self.extractors.get(extension)
        if extractor is None and extension in BINARY_EXTENSIONS:
            raise UnsupportedFileError(file_path, f"no extractor registered for '{extension}'")

        try:
            if extractor is None:
                return file_path.read_text(encoding="utf-8", errors="replace")
            data = file_path.read_bytes()
        except OSError as e:
            raise ExtractionError(file_path, f"cannot read file: {e}") from e

        try:
            return extractor.extract(data, extension)
        except Exception as e:
            raise ExtractionError(
                file_path, f"{extractor.extractor_name} failed on '{extension}': {e}"
            ) from e
