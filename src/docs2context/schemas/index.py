"""Index-level schemas: persisted snapshot files, ingestion results and stats."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from .chunk import Chunk


class ChunksFile(BaseModel):
    """On-disk layout of chunks.json."""

    model_config = ConfigDict(populate_by_name=True)

    chunks: list[Chunk] = Field(default_factory=list)
    total_documents: int = Field(default=0, alias="totalDocuments")
    updated_at: int = Field(default=0, alias="updatedAt", description="Epoch milliseconds")

    @classmethod
    def from_json_dict(cls, data: Any) -> "ChunksFile":
        """Validate raw JSON, accepting the older ``totalDocs`` key."""
        if isinstance(data, dict) and "totalDocuments" not in data and "totalDocs" in data:
            data = {**data, "totalDocuments": data["totalDocs"]}
        return cls.model_validate(data)


class VocabularyFile(BaseModel):
    """On-disk layout of vocab.json."""

    model_config = ConfigDict(populate_by_name=True)

    vocabulary: dict[str, float] = Field(default_factory=dict, description="term -> idf")
    doc_frequency: dict[str, int] = Field(default_factory=dict, alias="docFrequency")


class IngestResult(BaseModel):
    """Outcome of a directory-wide ingestion."""

    indexed: int = Field(default=0)
    skipped: int = Field(default=0)
    errors: list[str] = Field(default_factory=list)

    def summary(self) -> str:
        """Get a one-line summary."""
        return f"indexed={self.indexed} skipped={self.skipped} errors={len(self.errors)}"


class IndexStats(BaseModel):
    """Aggregate statistics over the index."""

    total_chunks: int
    total_sources: int
    total_documents: int
    vocabulary_size: int
    sources: list[str] = Field(default_factory=list, description="Source basenames")
