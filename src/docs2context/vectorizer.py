"""Sparse TF-IDF vectorization."""

from collections import Counter

from .utils.tokenizer import tokenize
from .vocabulary import Vocabulary


def vectorize(text: str, vocabulary: Vocabulary) -> dict[str, float]:
    """
    Turn text into a sparse TF-IDF vector.

    Term frequency is augmented (``0.5 + 0.5 * count / max_count``) so long,
    repetitive chunks do not dominate purely by repetition.

    Args:
        text: Chunk or query text
        vocabulary: Current IDF model

    Returns:
        Mapping of term to weight, only for terms present in the text
    """
    counts = Counter(tokenize(text))
    if not counts:
        return {}

    max_tf = max(counts.values())
    return {
        term: (0.5 + 0.5 * (count / max_tf)) * vocabulary.weight(term)
        for term, count in counts.items()
    }
