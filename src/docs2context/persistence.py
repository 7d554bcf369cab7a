"""
Snapshot persistence for the index.

The index is stored as two co-located JSON files that form one logical
snapshot:

- ``chunks.json``: ``{chunks, totalDocuments, updatedAt}``
- ``vocab.json``: ``{vocabulary, docFrequency}``

Write failures are logged and reported through the return value. The
in-memory index stays authoritative.
"""

import json
import os
import tempfile
import time
from pathlib import Path
from typing import TYPE_CHECKING, Optional

import structlog

from .config import settings
from .schemas.index import ChunksFile, VocabularyFile
from .vectorizer import vectorize
from .vocabulary import Vocabulary

if TYPE_CHECKING:
    from .store import IndexState

logger = structlog.get_logger(__name__)

CHUNKS_FILENAME = "chunks.json"
VOCAB_FILENAME = "vocab.json"


class IndexPersistence:
    """Reads and writes index snapshots under a directory."""

    def __init__(self, index_dir: Optional[Path] = None):
        self.index_dir = Path(index_dir or settings.index_dir)

    @property
    def chunks_path(self) -> Path:
        return self.index_dir / CHUNKS_FILENAME

    @property
    def vocab_path(self) -> Path:
        return self.index_dir / VOCAB_FILENAME

    def load(self) -> "IndexState":
        """
        Load the persisted snapshot.

        A missing file leaves that part empty. A corrupt snapshot is logged
        and an empty state is returned. When the vocabulary is missing or its
        frequencies do not match the loaded chunks, it is rebuilt from the
        chunk texts and every vector is recomputed.

        Returns:
            IndexState built from disk
        """
        from .store import IndexState

        has_vocab = self.vocab_path.exists()
        try:
            chunks_file = ChunksFile()
            if self.chunks_path.exists():
                raw = json.loads(self.chunks_path.read_text(encoding="utf-8"))
                chunks_file = ChunksFile.from_json_dict(raw)

            vocab_file = VocabularyFile()
            if has_vocab:
                raw = json.loads(self.vocab_path.read_text(encoding="utf-8"))
                vocab_file = VocabularyFile.model_validate(raw)

        # ValueError covers UnicodeDecodeError, JSONDecodeError and ValidationError
        except (OSError, ValueError) as e:
            logger.error("Failed to load index, starting empty", index_dir=str(self.index_dir), error=str(e))
            return IndexState()

        chunks = tuple(chunks_file.chunks)
        rebuilt = Vocabulary.from_texts(
            (c.text for c in chunks),
            total_documents=chunks_file.total_documents,
        )

        if has_vocab and rebuilt.doc_frequency == vocab_file.doc_frequency:
            vocabulary = Vocabulary(
                doc_frequency=vocab_file.doc_frequency,
                idf=vocab_file.vocabulary,
                total_documents=chunks_file.total_documents,
            )
        else:
            if chunks:
                logger.warning(
                    "Vocabulary missing or out of date, rebuilding from chunks",
                    index_dir=str(self.index_dir),
                    chunks=len(chunks),
                )
            vocabulary = rebuilt
            vocabulary.recompute_idf(len(chunks))
            chunks = tuple(
                c.model_copy(update={"vector": vectorize(c.text, vocabulary)}) for c in chunks
            )

        logger.info(
            "Index loaded",
            chunks=len(chunks),
            vocabulary=vocabulary.size,
            documents=vocabulary.total_documents,
        )
        return IndexState(chunks=chunks, vocabulary=vocabulary)

    def save(self, state: "IndexState") -> bool:
        """
        Write both snapshot files.

        Args:
            state: Index state to persist

        Returns:
            True if both files were written
        """
        try:
            chunks_json = ChunksFile(
                chunks=list(state.chunks),
                total_documents=state.vocabulary.total_documents,
                updated_at=int(time.time() * 1000),
            ).model_dump_json(by_alias=True)
            vocab_json = VocabularyFile(
                vocabulary=state.vocabulary.idf,
                doc_frequency=state.vocabulary.doc_frequency,
            ).model_dump_json(by_alias=True)

            self.index_dir.mkdir(parents=True, exist_ok=True)
            self._write_atomic(self.chunks_path, chunks_json)
            self._write_atomic(self.vocab_path, vocab_json)
        # PydanticSerializationError is a ValueError
        except (OSError, ValueError) as e:
            logger.error("Failed to save index", index_dir=str(self.index_dir), error=str(e))
            return False

        logger.debug("Index saved", chunks=len(state.chunks), index_dir=str(self.index_dir))
        return True

    def _write_atomic(self, path: Path, content: str) -> None:
        """Write to a temporary file in the same directory, then rename over the target."""
        fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(content)
            os.replace(tmp_name, path)
        except OSError:
            Path(tmp_name).unlink(missing_ok=True)
            raise
