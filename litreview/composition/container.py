"""Composition root wiring adapters to the application services."""

from __future__ import annotations

import logging
from functools import lru_cache

from ..adapters.common.rate_limiter import AsyncRateLimiter
from ..adapters.outbound.llm.gemini_adapter import GeminiExtractionAdapter
from ..adapters.outbound.storage.json_card_repository import JsonCardRepository
from ..application.services.create_card import CreateCardService
from ..config import resolve_credential, settings
from ..core.services.extraction_service import ExtractionService
from ..core.services.retrieval_service import RetrievalService

logger = logging.getLogger(__name__)


@lru_cache
def get_extraction_adapter() -> GeminiExtractionAdapter:
    logger.info("Initializing GeminiExtractionAdapter (composition root)...")
    rate_limiter = AsyncRateLimiter(settings.llm_requests_per_minute)
    return GeminiExtractionAdapter(
        resolve_credential=resolve_credential,
        model=settings.llm_model,
        temperature=settings.extraction_temperature,
        rate_limiter=rate_limiter,
    )


@lru_cache
def get_extraction_service() -> ExtractionService:
    logger.info("Initializing ExtractionService...")
    return ExtractionService(
        get_extraction_adapter(),
        chunk_size=settings.extraction_chunk_size,
        chunk_overlap=settings.extraction_chunk_overlap,
    )


@lru_cache
def get_retrieval_service() -> RetrievalService:
    return RetrievalService(
        top_k=settings.retrieval_top_k,
        max_context_chars=settings.retrieval_context_chars,
    )


@lru_cache
def get_card_repository() -> JsonCardRepository:
    return JsonCardRepository(settings.cards_file)


@lru_cache
def get_create_card_service() -> CreateCardService:
    logger.info("Initializing CreateCardService...")
    return CreateCardService(
        get_extraction_service(),
        segment_chunk_size=settings.segment_chunk_size,
        segment_overlap=settings.segment_overlap,
        repository=get_card_repository(),
    )
