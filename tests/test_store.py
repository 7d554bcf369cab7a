"""Tests for IndexStore ingestion, removal and search."""

from pathlib import Path

import pytest

from docs2context.errors import ExtractionError, FileTooLargeError, UnsupportedFileError
from docs2context.extractors import BaseExtractor, ExtractorRegistry
from docs2context.store import IndexStore

from conftest import make_store


class FakePdfExtractor(BaseExtractor):
    """Returns canned text for PDFs and records what it was given."""

    supported_extensions = [".pdf"]
    extractor_name = "fake"

    def __init__(self, text: str = "quarterly revenue grew across every region"):
        self.text = text
        self.calls: list[tuple[bytes, str]] = []

    def extract(self, data: bytes, extension: str) -> str:
        self.calls.append((data, extension))
        return self.text


class BrokenExtractor(BaseExtractor):
    supported_extensions = [".pdf"]
    extractor_name = "broken"

    def extract(self, data: bytes, extension: str) -> str:
        raise RuntimeError("corrupt xref table")


def _write(path: Path, text: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    return path


# --- End-to-end ---


def test_cat_and_dogs_scenario(store: IndexStore):
    """Searching 'cat' ranks doc1 first; an unknown term returns nothing."""
    store.index_text("the cat sat on the mat", source="doc1")
    store.index_text("dogs bark at cats", source="doc2")

    results = store.search("cat")
    assert results
    assert results[0].source == "doc1"
    assert all(r.score < results[0].score for r in results[1:])

    assert store.search("zebra") == []


def test_identical_query_scores_near_one(store: IndexStore):
    text = "tf idf vectors rank retrieval chunks by cosine similarity"
    store.index_text(text, source="a")
    store.index_text("completely different words about gardening tomatoes", source="b")

    results = store.search(text)
    assert results[0].source == "a"
    assert results[0].score == pytest.approx(1.0)


def test_all_stop_word_query_returns_empty(store: IndexStore):
    store.index_text("the cat sat on the mat", source="doc1")
    assert store.search("the and of") == []


def test_search_on_empty_index(store: IndexStore):
    assert store.search("anything") == []
    assert store.get_context("anything") == ""


# --- index_text ---


def test_short_text_is_not_indexed(store: IndexStore):
    assert store.index_text("tiny", source="noise") == 0
    assert store.index_text("          ", source="noise") == 0
    assert store.stats().total_chunks == 0
    assert store.version == 0


def test_index_text_updates_counts(store: IndexStore):
    added = store.index_text("python retrieval engine notes", source="notes", metadata={"lang": "en"})

    assert added == 1
    stats = store.stats()
    assert stats.total_chunks == 1
    assert stats.total_documents == 1
    assert stats.vocabulary_size == 4
    chunk = store.state.chunks[0]
    assert chunk.metadata == {"lang": "en", "chunkIndex": 0}
    assert set(chunk.vector) == {"python", "retrieval", "engine", "notes"}


def test_vectors_never_stale_after_mutation(store: IndexStore):
    """Every stored vector matches the current IDF table."""
    from docs2context.vectorizer import vectorize

    store.index_text("alpha beta gamma delta", source="one")
    store.index_text("alpha epsilon zeta eta", source="two")

    state = store.state
    for chunk in state.chunks:
        assert chunk.vector == pytest.approx(vectorize(chunk.text, state.vocabulary))


def test_mutation_swaps_in_new_state(store: IndexStore):
    """Readers holding an old state are unaffected by later writes."""
    store.index_text("first document about rivers", source="one")
    before = store.state

    store.index_text("second document about mountains", source="two")

    assert len(before.chunks) == 1
    assert len(store.state.chunks) == 2
    assert store.version == before.version + 1


# --- index_file ---


def test_reindexing_same_file_is_idempotent(store: IndexStore, tmp_path: Path):
    path = _write(tmp_path / "notes.txt", "meeting notes about the retrieval roadmap")

    store.index_file(path)
    first = [(c.id, c.text) for c in store.state.chunks]
    store.index_file(path)
    second = [(c.id, c.text) for c in store.state.chunks]

    assert first == second
    assert store.stats().total_chunks == 1
    assert store.state.chunks[0].source == str(path.resolve())


def test_reindex_replaces_changed_content(store: IndexStore, tmp_path: Path):
    path = _write(tmp_path / "notes.txt", "original content mentions walruses")
    store.index_file(path)

    _write(path, "updated content mentions penguins")
    store.index_file(path)

    assert store.search("walruses") == []
    assert store.search("penguins")[0].source == str(path.resolve())
    assert "walruses" not in store.state.vocabulary.doc_frequency


def test_reindex_with_empty_content_drops_old_chunks(store: IndexStore, tmp_path: Path):
    path = _write(tmp_path / "notes.txt", "content that will be erased later")
    store.index_file(path)

    _write(path, "")
    assert store.index_file(path) == 0
    assert store.stats().total_chunks == 0


def test_index_file_unsupported_extension(store: IndexStore, tmp_path: Path):
    path = tmp_path / "image.png"
    path.write_bytes(b"\x89PNG")
    with pytest.raises(UnsupportedFileError):
        store.index_file(path)


def test_index_file_too_large(tmp_path: Path):
    store = make_store(tmp_path, max_file_size_mb=0.0001)
    path = _write(tmp_path / "big.txt", "word " * 200)
    with pytest.raises(FileTooLargeError):
        store.index_file(path)


def test_index_file_missing(store: IndexStore, tmp_path: Path):
    with pytest.raises(ExtractionError):
        store.index_file(tmp_path / "missing.txt")


def test_pdf_without_extractor_is_unsupported(store: IndexStore, tmp_path: Path):
    path = tmp_path / "report.pdf"
    path.write_bytes(b"%PDF-1.4")
    with pytest.raises(UnsupportedFileError):
        store.index_file(path)


def test_registered_extractor_receives_bytes(tmp_path: Path):
    extractor = FakePdfExtractor()
    store = make_store(tmp_path, extractors=ExtractorRegistry([extractor]))
    path = tmp_path / "report.pdf"
    path.write_bytes(b"%PDF-1.4 binary")

    assert store.index_file(path) == 1
    assert extractor.calls == [(b"%PDF-1.4 binary", ".pdf")]
    assert store.search("revenue")[0].source == str(path.resolve())


def test_extractor_failure_becomes_extraction_error(tmp_path: Path):
    store = make_store(tmp_path, extractors=ExtractorRegistry([BrokenExtractor()]))
    path = tmp_path / "report.pdf"
    path.write_bytes(b"%PDF-1.4")

    with pytest.raises(ExtractionError) as exc_info:
        store.index_file(path)
    assert "corrupt xref table" in str(exc_info.value)


# --- Overlap retrieval ---


def test_fact_on_chunk_boundary_is_retrievable(store: IndexStore):
    """A sentence straddling word 512 appears whole in the next window."""
    words = [f"w{i}" for i in range(1000)]
    fact = "quokka zanzibar eats purple mangoes every tuesday".split()
    words[506 : 506 + len(fact)] = fact

    store.index_text(" ".join(words), source="long")
    assert store.stats().total_chunks == 3

    results = store.search("quokka zanzibar mangoes tuesday", top_k=5, min_score=0.0)
    assert any(" ".join(fact) in r.text for r in results)


# --- remove_file ---


def test_remove_file(store: IndexStore, tmp_path: Path):
    path = _write(tmp_path / "axolotl.txt", "axolotl salamanders regrow limbs")
    store.index_file(path)
    store.index_text("salamanders live in water", source="other")
    assert store.stats().total_sources == 2

    assert store.remove_file(path) is True

    assert all(r.source != str(path.resolve()) for r in store.search("salamanders", min_score=0.0))
    assert store.stats().total_sources == 1
    assert "axolotl" not in store.state.vocabulary.doc_frequency
    assert "axolotl" not in store.state.vocabulary.idf
    assert store.state.vocabulary.doc_frequency["salamanders"] == 1


def test_remove_unknown_source(store: IndexStore):
    store.index_text("something worth keeping around", source="keep")
    version = store.version

    assert store.remove_file("/nowhere/file.txt") is False
    assert store.version == version


def test_remove_source_tag(store: IndexStore):
    store.index_text("the cat sat on the mat", source="doc1")
    assert store.remove_file("doc1") is True
    assert store.stats().total_chunks == 0


# --- clear / stats ---


def test_clear(store: IndexStore):
    store.index_text("the cat sat on the mat", source="doc1")
    store.clear()

    stats = store.stats()
    assert stats.total_chunks == 0
    assert stats.total_documents == 0
    assert stats.vocabulary_size == 0
    assert stats.sources == []


def test_stats_sources_are_basenames(store: IndexStore, tmp_path: Path):
    path = _write(tmp_path / "sub" / "guide.md", "# Guide\n\nInstall the package first")
    store.index_file(path)
    store.index_text("ad hoc text from the user", source="user_input")

    stats = store.stats()
    assert stats.sources == ["guide.md", "user_input"]
    assert stats.total_documents == 2


# --- index_directory ---


def test_index_directory_isolates_failures(tmp_path: Path):
    store = make_store(
        tmp_path,
        extractors=ExtractorRegistry([BrokenExtractor()]),
        max_file_size_mb=0.001,
    )
    docs = tmp_path / "docs"
    _write(docs / "a.txt", "python snakes and lizards are reptiles")
    _write(docs / "sub" / "b.md", "lizards bask on warm rocks")
    _write(docs / "node_modules" / "c.txt", "dependency code that must be ignored")
    (docs / "image.png").write_bytes(b"\x89PNG")
    _write(docs / "big.txt", "lizard " * 500)
    (docs / "report.pdf").write_bytes(b"%PDF-1.4")

    result = store.index_directory(docs)

    assert result.indexed == 2
    assert result.skipped == 2
    assert len(result.errors) == 1
    assert "report.pdf" in result.errors[0]
    assert "corrupt xref table" in result.errors[0]

    sources = {Path(c.source).name for c in store.state.chunks}
    assert sources == {"a.txt", "b.md"}
    assert store.search("lizards", min_score=0.0)


def test_index_directory_respects_max_depth(store: IndexStore, tmp_path: Path):
    docs = tmp_path / "docs"
    _write(docs / "top.txt", "top level document content")
    _write(docs / "l1" / "mid.txt", "first level document content")
    _write(docs / "l1" / "l2" / "deep.txt", "second level document content")

    result = store.index_directory(docs, max_depth=1)

    assert result.indexed == 2
    assert sorted(store.stats().sources) == ["mid.txt", "top.txt"]


def test_index_directory_commits_once(store: IndexStore, tmp_path: Path):
    docs = tmp_path / "docs"
    for i in range(5):
        _write(docs / f"doc{i}.txt", f"document number {i} about topic{i}")

    store.index_directory(docs)

    assert store.version == 1
    assert store.stats().total_chunks == 5


def test_index_directory_reindex_is_idempotent(store: IndexStore, tmp_path: Path):
    docs = tmp_path / "docs"
    _write(docs / "a.txt", "stable content for idempotency check")

    store.index_directory(docs)
    store.index_directory(docs)

    assert store.stats().total_chunks == 1
    assert store.state.vocabulary.doc_frequency["stable"] == 1


def test_index_directory_defaults_to_documents_dir(store: IndexStore, tmp_path: Path):
    _write(tmp_path / "docs" / "a.txt", "default documents directory content")
    result = store.index_directory()
    assert result.indexed == 1


def test_index_directory_missing_root(store: IndexStore, tmp_path: Path):
    result = store.index_directory(tmp_path / "nope")
    assert result.indexed == 0
    assert len(result.errors) == 1


# --- Search options ---


def test_source_filter(store: IndexStore):
    store.index_text("shared keyword appears here", source="notes-alpha")
    store.index_text("shared keyword appears there too", source="notes-beta")

    results = store.search("keyword", source_filter="alpha", min_score=0.0)
    assert [r.source for r in results] == ["notes-alpha"]


def test_top_k_truncates(store: IndexStore):
    for i in range(8):
        store.index_text(f"common term plus unique{i} filler", source=f"s{i}")

    assert len(store.search("common", top_k=3, min_score=0.0)) == 3


def test_get_context(store: IndexStore):
    store.index_text("the cat sat on the mat", source="doc1")
    store.index_text("dogs bark at cats", source="doc2")

    block = store.get_context("cat")
    assert "[Source: doc1 | Relevance:" in block
    assert "the cat sat on the mat" in block
    assert store.get_context("zebra") == ""
