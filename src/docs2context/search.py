"""Cosine similarity search and prompt context formatting."""

import math
import os
from typing import TYPE_CHECKING, Optional

import structlog

from .schemas.chunk import SearchResult
from .vectorizer import vectorize

if TYPE_CHECKING:
    from .store import IndexState

logger = structlog.get_logger(__name__)

CONTEXT_HEADER = "--- DOCUMENT CONTEXT ---"
CONTEXT_FOOTER = "--- END OF CONTEXT ---"


def cosine_similarity(vec_a: dict[str, float], vec_b: dict[str, float]) -> float:
    """
    Cosine similarity between two sparse vectors.

    Returns 0.0 when either vector has zero norm.
    """
    if len(vec_b) < len(vec_a):
        small, large = vec_b, vec_a
    else:
        small, large = vec_a, vec_b

    dot = sum(value * large[term] for term, value in small.items() if term in large)
    norm_a = math.sqrt(sum(v * v for v in vec_a.values()))
    norm_b = math.sqrt(sum(v * v for v in vec_b.values()))

    if norm_a == 0 or norm_b == 0:
        return 0.0
    return min(dot / (norm_a * norm_b), 1.0)


def search(
    state: "IndexState",
    query: str,
    top_k: int = 5,
    min_score: float = 0.05,
    source_filter: Optional[str] = None,
) -> list[SearchResult]:
    """
    Rank indexed chunks against a query.

    Args:
        state: Index state to search
        query: Query text
        top_k: Maximum number of results
        min_score: Results scoring below this are dropped
        source_filter: Only consider chunks whose source contains this string

    Returns:
        Results sorted by descending score
    """
    if not state.chunks:
        return []

    query_vector = vectorize(query, state.vocabulary)
    if not query_vector:
        logger.debug("Query has no index terms", query=query[:80])
        return []

    results = []
    for chunk in state.chunks:
        if source_filter and source_filter not in chunk.source:
            continue
        score = cosine_similarity(query_vector, chunk.vector)
        if score >= min_score:
            results.append(
                SearchResult(
                    text=chunk.text,
                    source=chunk.source,
                    metadata=chunk.metadata,
                    score=score,
                )
            )

    results.sort(key=lambda r: r.score, reverse=True)
    return results[:top_k]


def format_context(results: list[SearchResult]) -> str:
    """
    Format search results as a context block for an LLM prompt.

    Returns an empty string when there is nothing to inject.
    """
    if not results:
        return ""

    parts = [CONTEXT_HEADER, ""]
    for r in results:
        source_name = os.path.basename(r.source)
        parts.append(f"[Source: {source_name} | Relevance: {r.score * 100:.0f}%]")
        parts.append(r.text.strip())
        parts.append("")
    parts.append(CONTEXT_FOOTER)
    return "\n".join(parts) + "\n"
