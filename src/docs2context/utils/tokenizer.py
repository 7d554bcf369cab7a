"""Text normalization into index terms."""

import re

# Anything outside word characters, whitespace and accented Latin letters
_NON_TERM_CHARS = re.compile(r"[^a-z0-9_\sàáâãéèêíìóòôõúùûçñ]")

STOP_WORDS = frozenset(
    {
        # Portuguese
        "de", "da", "do", "em", "um", "uma", "que", "para", "com",
        "por", "se", "na", "no", "ao", "ou", "os", "as", "dos",
        "das", "mais", "mas", "como", "nos", "nas", "seu", "sua",
        "foi", "ser", "ter", "tem", "era", "este", "esta", "isso",
        "ele", "ela", "eles", "elas", "meu", "minha", "teu", "tua",
        # English
        "the", "is", "at", "which", "on", "and", "or", "an", "be",
        "to", "of", "in", "it", "for", "not", "are", "but", "was",
        "has", "had", "have", "this", "that", "with", "from", "they",
        "his", "her", "its", "you", "we", "our", "can", "will",
        # Code
        "var", "let", "const", "function", "return", "true", "false",
        "null", "undefined", "new", "class", "if", "else",
    }
)


def is_stop_word(word: str) -> bool:
    """Check whether a lower-cased word is a stop word."""
    return word in STOP_WORDS


def tokenize(text: str) -> list[str]:
    """
    Normalize text into a list of index terms.

    Lower-cases, replaces unsupported characters with spaces, splits on
    whitespace and drops single-character tokens and stop words.

    Args:
        text: Raw text

    Returns:
        Terms in order of appearance (duplicates kept)
    """
    if not text:
        return []
    cleaned = _NON_TERM_CHARS.sub(" ", text.lower())
    return [w for w in cleaned.split() if len(w) > 1 and not is_stop_word(w)]
