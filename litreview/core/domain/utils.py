"""Text helpers shared by the document loaders and the retriever."""

import re
import unicodedata

_COMBINING_MARKS = re.compile(r"[\u0300-\u036f]")


def clean_text(text: str, *, normalize: bool = True) -> str:
    """Remove BOM markers and replacement characters, optionally NFKC-normalize.

    Args:
        text: Input text that may contain BOM or special characters.
        normalize: Whether to apply NFKC normalization.

    Returns:
        Cleaned text.
    """
    if not text:
        return ""

    cleaned = text.replace("\ufeff", "").replace("\ufffd", "")
    if normalize:
        cleaned = unicodedata.normalize("NFKC", cleaned)
    return cleaned


def collapse_whitespace(text: str) -> str:
    """Collapse every whitespace run to a single space and trim."""
    return re.sub(r"\s+", " ", text).strip()


def strip_accents_lower(text: str) -> str:
    """Decompose (NFD), drop combining diacritics and lowercase."""
    return _COMBINING_MARKS.sub("", unicodedata.normalize("NFD", text)).lower()
