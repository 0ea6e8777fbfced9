"""Keyword retriever over evidence-card chunks and metadata.

Scoring is a plain term-overlap heuristic. There is no TF-IDF weighting and
no length normalization, so scores are unbounded and favor long or
repetitive chunks. Per query term, a chunk earns:

* 3 points if the term occurs anywhere in the chunk (substring), plus
* 2 points for every whole-word (``\\bterm\\b``) occurrence.

Both rules fire for the same occurrence, which biases the ranking toward
exact word matches over partial hits. Card metadata (title, topic, summary,
key findings) earns 5 points per term found and surfaces as a separate
``[METADATA MATCH]`` entry.
"""

import logging
import re
from collections.abc import Iterable

from ..domain import RetrievableCard, RetrievedChunk
from ..domain.utils import strip_accents_lower

logger = logging.getLogger(__name__)

# Spanish grammatical function words only. Content words such as "autor"
# or verbs such as "busca" stay searchable.
STOP_WORDS = frozenset(
    {
        "el", "la", "los", "las", "un", "una", "unos", "unas",
        "y", "o", "pero", "si", "no", "ni", "que", "qué", "cual", "cuál",
        "de", "del", "a", "al", "en", "con", "por", "para", "sin", "sobre", "entre",
        "es", "son", "fue", "fueron", "era", "eran", "ser", "estar",
        "se", "su", "sus", "mi", "mis", "tu", "tus",
        "este", "esta", "estos", "estas", "eso", "esto",
        "como", "donde", "cuando",
    }
)  # fmt: skip

MIN_TERM_LENGTH = 2

SUBSTRING_POINTS = 3
WHOLE_WORD_POINTS = 2
METADATA_POINTS = 5.0

METADATA_MARKER = "[METADATA MATCH]"

NO_CONTEXT_MESSAGE = (
    "No se encontraron fragmentos relevantes en las fuentes cargadas para esta consulta."
)


def normalize_for_search(text: str) -> str:
    """Strip diacritics and lowercase so "Educación" matches "educacion"."""
    return strip_accents_lower(text or "")


def tokenize_query(query: str) -> list[str]:
    """Turn a free-text query into search terms.

    Punctuation is removed, tokens shorter than two characters and stop
    words are dropped. If stop-word removal leaves nothing, the unfiltered
    whitespace tokens of the normalized query are used instead, so a query
    with any token never yields zero terms.
    """
    normalized = normalize_for_search(query)
    terms = [
        word
        for word in re.sub(r"[^\w\s]", "", normalized).split()
        if len(word) >= MIN_TERM_LENGTH and word not in STOP_WORDS
    ]
    if terms:
        return terms
    return [word for word in normalized.split() if len(word) >= MIN_TERM_LENGTH]


def score_chunk(chunk: str, terms: list[str]) -> int:
    """Score one chunk against the query terms.

    Args:
        chunk: Raw chunk text.
        terms: Normalized query terms from :func:`tokenize_query`.

    Returns:
        Substring plus whole-word points summed over all terms.
    """
    normalized = normalize_for_search(chunk)
    score = 0
    for term in terms:
        if term in normalized:
            score += SUBSTRING_POINTS
        try:
            matches = re.findall(rf"\b{term}\b", normalized)
        except re.error:
            # Fallback-only terms may keep punctuation that breaks the pattern
            if f" {term} " in normalized:
                score += WHOLE_WORD_POINTS
            continue
        score += len(matches) * WHOLE_WORD_POINTS
    return score


def metadata_text(card: RetrievableCard) -> str:
    """Concatenate the searchable metadata fields of a card."""
    return " ".join(
        [
            card.source or "",
            card.topic or "",
            card.summary or "",
            card.key_findings or "",
        ]
    )


def score_metadata(card: RetrievableCard, terms: list[str]) -> float:
    """Score a card's metadata: a flat weight per term found as a substring."""
    normalized = normalize_for_search(metadata_text(card))
    return sum(METADATA_POINTS for term in terms if term in normalized)


def format_metadata_match(card: RetrievableCard) -> str:
    """Render the synthetic retrieval text for a metadata hit."""
    return (
        f"{METADATA_MARKER} TÍTULO: {card.source}\n"
        f"TEMA: {card.topic}\n"
        f"RESUMEN: {card.summary}\n"
        f"HALLAZGOS: {card.key_findings}"
    )


def retrieve_relevant_chunks(
    query: str,
    cards: Iterable[RetrievableCard],
    top_k: int = 8,
) -> list[RetrievedChunk]:
    """Return the ``top_k`` highest-scoring distinct text spans for ``query``.

    Chunk hits and metadata hits are pooled, deduplicated by exact text
    (keeping the higher score) and sorted by score, descending. Ties keep
    their pooling order.

    Args:
        query: Free-text user query.
        cards: Records exposing ``chunks`` and the four metadata fields.
        top_k: Maximum number of results.

    Returns:
        Ranked results; empty when the query has no usable terms.
    """
    terms = tokenize_query(query)
    if not terms:
        return []

    pool: list[RetrievedChunk] = []
    for card in cards:
        for chunk in card.chunks or []:
            score = score_chunk(chunk, terms)
            if score > 0:
                pool.append(RetrievedChunk(text=chunk, source=card.source, score=score))

        meta_score = score_metadata(card, terms)
        if meta_score > 0:
            pool.append(
                RetrievedChunk(
                    text=format_metadata_match(card), source=card.source, score=meta_score
                )
            )

    unique: dict[str, RetrievedChunk] = {}
    for item in pool:
        existing = unique.get(item.text)
        if existing is None or existing.score < item.score:
            unique[item.text] = item

    ranked = sorted(unique.values(), key=lambda item: item.score, reverse=True)
    return ranked[:top_k]


class RetrievalService:
    """Retrieves grounding context from evidence cards for chat/RAG prompts."""

    def __init__(self, top_k: int = 8, max_context_chars: int = 8000) -> None:
        """Initialize the retriever.

        Args:
            top_k: Default number of results per query.
            max_context_chars: Soft character budget for :meth:`build_context`.
        """
        self.top_k = top_k
        self.max_context_chars = max_context_chars

    def retrieve(
        self,
        query: str,
        cards: Iterable[RetrievableCard],
        top_k: int | None = None,
    ) -> list[RetrievedChunk]:
        """Rank card chunks for a query (see :func:`retrieve_relevant_chunks`)."""
        limit = top_k if top_k is not None else self.top_k
        results = retrieve_relevant_chunks(query, cards, limit)

        if results:
            logger.debug(
                f"Retrieved {len(results)} chunks for query {query[:80]!r} "
                f"(top score: {results[0].score})"
            )
        else:
            logger.info(f"No relevant chunks for query {query[:80]!r}")
        return results

    def build_context(
        self,
        query: str,
        cards: Iterable[RetrievableCard],
        top_k: int | None = None,
    ) -> str:
        """Render the ranked chunks as a source-tagged prompt context block.

        Chunks are added in rank order until the character budget is spent;
        the first chunk is always included.

        Returns:
            Context string, or an informative message if nothing matched.
        """
        results = self.retrieve(query, cards, top_k)
        if not results:
            return NO_CONTEXT_MESSAGE

        parts = []
        char_count = 0
        for result in results:
            if parts and char_count + len(result.text) > self.max_context_chars:
                break
            parts.append(f"[Fuente: {result.source}]\n{result.text}")
            char_count += len(result.text)

        return "\n\n---\n\n".join(parts)
