"""Text segmentation for retrieval and for chunked extraction.

Two strategies live here:

* :func:`segment_text` is paragraph-aware and produces ~1000 character
  retrieval units with a word-based overlap between consecutive chunks.
* :func:`chunk_text` cuts fixed-size character windows with a fixed overlap.
  It has no notion of words or sentences and is meant for the extraction
  model, which tolerates ragged boundaries.
"""

import logging
import re

logger = logging.getLogger(__name__)

# Words carried from the end of a flushed chunk into the next one
OVERLAP_WORDS = 20

PARAGRAPH_SEPARATOR = "\n\n"
SENTENCE_SEPARATOR = ". "


def segment_text(text: str, max_chunk_size: int = 1000, overlap: int = 100) -> list[str]:
    """Split text into overlapping, paragraph-aligned chunks for retrieval.

    Paragraphs are packed greedily until the next one would push the running
    buffer past ``max_chunk_size``. The buffer is then flushed and the next
    chunk starts with the last ``OVERLAP_WORDS`` words of the flushed one.

    The size bound is soft. A single paragraph longer than ``max_chunk_size``
    is kept whole unless it exceeds twice that size, in which case it is cut
    on sentence boundaries. Chunks are never truncated mid-sentence to hit
    the exact size.

    Args:
        text: Raw document text.
        max_chunk_size: Target chunk size in characters.
        overlap: Nominal overlap budget. The actual overlap is a fixed word
            count (``OVERLAP_WORDS``), not a character count.

    Returns:
        Ordered list of chunks; empty for empty or whitespace-only input.
    """
    if not text:
        return []

    clean = text.replace("\r\n", "\n")
    clean = re.sub(r"\n{3,}", PARAGRAPH_SEPARATOR, clean)

    chunks: list[str] = []
    current = ""

    for raw_paragraph in clean.split(PARAGRAPH_SEPARATOR):
        paragraph = raw_paragraph.strip()
        if not paragraph:
            continue

        if len(current) + len(paragraph) <= max_chunk_size:
            current = f"{current}{PARAGRAPH_SEPARATOR}{paragraph}" if current else paragraph
            continue

        if current:
            chunks.append(current)
            overlap_text = " ".join(current.split(" ")[-OVERLAP_WORDS:])
            current = f"{overlap_text}{PARAGRAPH_SEPARATOR}{paragraph}"
        elif len(paragraph) > max_chunk_size * 2:
            current = _split_sentences(paragraph, max_chunk_size, chunks)
        else:
            current = paragraph

    if current:
        chunks.append(current)

    logger.debug(
        f"Segmented {len(text)} chars into {len(chunks)} chunks (max_chunk_size={max_chunk_size})"
    )
    return chunks


def _split_sentences(paragraph: str, max_chunk_size: int, chunks: list[str]) -> str:
    """Pack the sentences of an oversized paragraph into ``chunks``.

    Full sub-buffers are appended to ``chunks`` with their trailing period
    restored. The last partial sub-buffer is returned so the caller keeps
    accumulating from it.
    """
    sub_chunk = ""
    for sentence in paragraph.split(SENTENCE_SEPARATOR):
        if len(sub_chunk) + len(sentence) > max_chunk_size:
            # A lone sentence longer than the bound is kept whole
            if sub_chunk:
                chunks.append(sub_chunk + ".")
            sub_chunk = sentence
        else:
            sub_chunk = f"{sub_chunk}{SENTENCE_SEPARATOR}{sentence}" if sub_chunk else sentence
    return sub_chunk


def chunk_text(text: str, chunk_size: int = 12000, chunk_overlap: int = 500) -> list[str]:
    """Split text into fixed-size, overlapping character windows.

    Consecutive windows start ``chunk_size - chunk_overlap`` characters apart,
    so every character of ``text`` falls in at least one window.

    Args:
        text: Text to chunk.
        chunk_size: Window length in characters (must be positive).
        chunk_overlap: Characters shared by consecutive windows (must be less
            than chunk_size).

    Returns:
        ``[text]`` when the text fits in one window (including the empty
        string), otherwise the list of windows.

    Raises:
        ValueError: If chunk_overlap >= chunk_size or parameters are invalid.
    """
    if chunk_size <= 0:
        raise ValueError("chunk_size must be positive")
    if chunk_overlap < 0:
        raise ValueError("chunk_overlap must be non-negative")
    if chunk_overlap >= chunk_size:
        raise ValueError("chunk_overlap must be less than chunk_size to avoid infinite loop")

    if len(text) <= chunk_size:
        return [text]

    step = chunk_size - chunk_overlap
    return [text[start : start + chunk_size] for start in range(0, len(text), step)]
