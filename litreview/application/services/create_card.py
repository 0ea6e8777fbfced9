"""Use-case service for turning a document into a stored evidence card."""

from __future__ import annotations

import logging
from uuid import uuid4

from ...core.domain import EvidenceCard
from ...core.ports.card_repository_port import CardRepositoryPort
from ...core.services.extraction_service import ExtractionService, ProgressCallback
from ...core.services.segmenter import segment_text

logger = logging.getLogger(__name__)


class CreateCardService:
    """Application service orchestrating extraction, segmentation and storage."""

    def __init__(
        self,
        extraction_service: ExtractionService,
        segment_chunk_size: int = 1000,
        segment_overlap: int = 100,
        repository: CardRepositoryPort | None = None,
    ) -> None:
        self.extraction_service = extraction_service
        self.segment_chunk_size = segment_chunk_size
        self.segment_overlap = segment_overlap
        self.repository = repository

    async def create(
        self,
        text: str,
        on_progress: ProgressCallback | None = None,
    ) -> EvidenceCard:
        """Extract a card from ``text`` and attach its retrieval chunks.

        The card is appended to the repository when one is configured.
        """
        if not text or not text.strip():
            raise ValueError("Document text cannot be empty or whitespace only")

        extraction = await self.extraction_service.extract(text, on_progress=on_progress)
        chunks = segment_text(text, self.segment_chunk_size, self.segment_overlap)
        card = EvidenceCard.from_extraction(extraction, card_id=uuid4().hex, chunks=chunks)

        logger.info(f"Created card {card.id} ({card.source!r}) with {len(chunks)} chunks")

        if self.repository is not None:
            self.repository.add_cards([card])
        return card
