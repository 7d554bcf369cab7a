"""Configuration management for the retrieval engine."""

from pathlib import Path
from typing import Literal

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Retrieval engine configuration loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # I/O Paths
    documents_dir: Path = Field(default=Path("./Documentos"))
    index_dir: Path = Field(default=Path("./memory/rag_index"))
    log_dir: Path = Field(default=Path("./logs"))

    # Chunking Configuration
    chunk_size: int = Field(default=512, description="Words per chunk window")
    chunk_overlap: int = Field(default=64, description="Words shared by consecutive windows")

    # Ingestion
    max_file_size_mb: float = Field(default=5.0)
    min_content_chars: int = Field(default=10, description="Shorter text is not indexed")
    max_depth: int = Field(default=5, description="Directory recursion limit")
    read_workers: int = Field(default=4, description="Threads used to read files")
    supported_extensions: list[str] = Field(
        default=[
            ".txt", ".md", ".json", ".js", ".ts", ".html", ".css",
            ".py", ".yaml", ".yml", ".csv", ".xml", ".env", ".log",
            ".pdf", ".docx",
        ]
    )
    ignore_dirs: list[str] = Field(
        default=[
            "node_modules", ".git", "dist", "build", ".cache",
            "rag_index", ".next", "__pycache__",
        ]
    )

    # Search
    default_top_k: int = Field(default=5)
    default_min_score: float = Field(default=0.05)

    # Logging
    log_level: str = Field(default="INFO")
    log_format: Literal["json", "text", "both"] = Field(default="both")

    @property
    def max_file_size_bytes(self) -> int:
        """Maximum indexable file size in bytes."""
        return int(self.max_file_size_mb * 1024 * 1024)

    @model_validator(mode="after")
    def check_chunk_window(self) -> "Settings":
        """Reject chunk windows that cannot advance."""
        if self.chunk_size <= 0:
            raise ValueError(f"chunk_size must be positive, got {self.chunk_size}")
        if not 0 <= self.chunk_overlap < self.chunk_size:
            raise ValueError(
                f"chunk_overlap must be in [0, chunk_size), got {self.chunk_overlap} "
                f"with chunk_size {self.chunk_size}"
            )
        return self


def get_settings() -> Settings:
    """Get settings instance. Creates new instance each time to pick up env changes."""
    return Settings()


# Default singleton
settings = Settings()
