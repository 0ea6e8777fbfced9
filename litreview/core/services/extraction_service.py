"""Chunked structured extraction for documents larger than one model call.

Long documents are cut into fixed windows (:func:`chunk_text`), each window
is extracted on its own, and the partial records are merged into one
evidence record. Model calls run strictly one after another, in chunk
order, so progress is reported in order and the provider's rate limit is
not hit by a burst of parallel requests.

Failure policy is strict: the first fragment that fails aborts the whole
extraction. There is no retry, no skipping and no partial result.
"""

import logging
from collections.abc import Callable
from dataclasses import replace

from ..domain import CardExtraction, ConsolidatedSummary
from ..domain.exceptions import (
    ChunkExtractionError,
    ConsolidationError,
    InvalidConfigurationError,
)
from ..ports.extraction_port import ExtractionPort
from .segmenter import chunk_text

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[str], None]

# Fields whose per-fragment values are concatenated as a bullet list
BULLET_FIELDS = ("key_findings", "key_evidence")

# Fields whose per-fragment values are concatenated as paragraphs
PROSE_FIELDS = (
    "usage_details",
    "comparative_notes",
    "challenges_opportunities",
    "contextual_factors",
)

MAX_TAGS = 5


def join_bullets(values: list[str]) -> str:
    """Join non-empty values as a ``- `` bullet list."""
    items = [value for value in values if value]
    if not items:
        return ""
    return "- " + "\n- ".join(items)


def join_paragraphs(values: list[str]) -> str:
    """Join non-empty values separated by a blank line."""
    return "\n\n".join(value for value in values if value)


def merge_tags(partials: list[CardExtraction], limit: int = MAX_TAGS) -> str:
    """Deduplicate tags across partials in first-seen order and cap them."""
    seen: dict[str, None] = {}
    for partial in partials:
        for tag in partial.tag_list():
            seen.setdefault(tag, None)
    return ", ".join(list(seen)[:limit])


def consolidate_partials(
    partials: list[CardExtraction],
    summary: ConsolidatedSummary,
    full_text: str,
) -> CardExtraction:
    """Merge partial extractions into one record.

    Identity fields (source, role, evidence type) come from the first
    partial. List-like fields are concatenated, tags deduplicated, and the
    synthesized ``summary`` triple replaces topic, summary and conclusions.
    """
    first = partials[0] if partials else CardExtraction(participant_role="Ambos")

    merged: dict[str, str] = {
        "source": first.source,
        "participant_role": first.participant_role,
        "evidence_type": first.evidence_type,
        "topic": summary.topic,
        "summary": summary.summary,
        "conclusions": summary.conclusions,
        "tags": merge_tags(partials),
        "full_text": full_text,
    }
    for name in BULLET_FIELDS:
        merged[name] = join_bullets([getattr(p, name) for p in partials])
    for name in PROSE_FIELDS:
        merged[name] = join_paragraphs([getattr(p, name) for p in partials])

    return CardExtraction(**merged)


class ExtractionService:
    """Extracts one structured record from a document of any length."""

    def __init__(
        self,
        port: ExtractionPort,
        chunk_size: int = 12000,
        chunk_overlap: int = 500,
    ) -> None:
        """Initialize the service.

        Args:
            port: Structured-extraction provider.
            chunk_size: Fixed window size for long documents.
            chunk_overlap: Overlap between consecutive windows.

        Raises:
            InvalidConfigurationError: If the windows would never advance.
        """
        if chunk_size <= 0 or not 0 <= chunk_overlap < chunk_size:
            raise InvalidConfigurationError(
                "Extraction windows need chunk_size > chunk_overlap >= 0",
                context={"chunk_size": chunk_size, "chunk_overlap": chunk_overlap},
            )
        self.port = port
        self.chunk_size = chunk_size
        self.chunk_overlap = chunk_overlap

    async def extract(
        self,
        text: str,
        on_progress: ProgressCallback | None = None,
    ) -> CardExtraction:
        """Extract a complete record from ``text``.

        Args:
            text: Full document text.
            on_progress: Optional callback receiving one message per fragment.

        Returns:
            The extracted record, carrying ``text`` as its ``full_text``.

        Raises:
            ChunkExtractionError: A fragment could not be extracted.
            ConsolidationError: The final synthesis call failed.
        """
        chunks = chunk_text(text, self.chunk_size, self.chunk_overlap)

        if len(chunks) <= 1:
            logger.info(f"Extracting document of {len(text)} chars in a single call")
            result = await self._extract_one(chunks[0], 1, 0)
            return replace(result, full_text=text)

        logger.info(f"Extracting document of {len(text)} chars in {len(chunks)} fragments")
        partials: list[CardExtraction] = []
        for index, chunk in enumerate(chunks):
            if on_progress:
                on_progress(f"Procesando fragmento {index + 1}/{len(chunks)}...")
            partial = await self._extract_one(chunk, len(chunks), index)
            if partial is not None:
                partials.append(partial)

        summary = await self._consolidate(partials)
        return consolidate_partials(partials, summary, text)

    async def _extract_one(self, chunk: str, total: int, index: int) -> CardExtraction:
        fragment = f"fragmento {index + 1} de {total}"
        try:
            return await self.port.extract_chunk(chunk, total, index)
        except Exception as e:
            logger.error(f"Extraction failed for {fragment}: {e}")
            raise ChunkExtractionError(
                f"No se pudo procesar el {fragment}. Detalles: {e}",
                cause=e,
                context={"stage": fragment, "chunk_index": index, "total_chunks": total},
            ) from e

    async def _consolidate(self, partials: list[CardExtraction]) -> ConsolidatedSummary:
        try:
            return await self.port.consolidate(partials)
        except Exception as e:
            logger.error(f"Consolidation of {len(partials)} fragments failed: {e}")
            raise ConsolidationError(
                f"No se pudo completar la consolidación. Detalles: {e}",
                cause=e,
                context={"stage": "consolidación", "partials": len(partials)},
            ) from e
