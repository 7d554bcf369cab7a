"""Shared fixtures for index store tests."""

from pathlib import Path

import pytest

from docs2context.config import Settings
from docs2context.extractors import ExtractorRegistry
from docs2context.persistence import IndexPersistence
from docs2context.store import IndexStore


def make_settings(tmp_path: Path, **overrides) -> Settings:
    """Settings isolated from the environment and pointed at tmp_path."""
    values = {
        "index_dir": tmp_path / "index",
        "documents_dir": tmp_path / "docs",
        "log_dir": tmp_path / "logs",
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


def make_store(tmp_path: Path, extractors: ExtractorRegistry | None = None, **overrides) -> IndexStore:
    config = make_settings(tmp_path, **overrides)
    return IndexStore(
        config=config,
        persistence=IndexPersistence(config.index_dir),
        extractors=extractors if extractors is not None else ExtractorRegistry(),
    )


@pytest.fixture
def store(tmp_path: Path) -> IndexStore:
    return make_store(tmp_path)
