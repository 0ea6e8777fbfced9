"""Unit tests for the card-creation use case."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from litreview.application.services.create_card import CreateCardService
from litreview.core.ports.card_repository_port import CardRepositoryPort
from litreview.core.services.extraction_service import ExtractionService

pytestmark = pytest.mark.unit


@pytest.fixture
def extraction_service(sample_extraction):
    service = AsyncMock(spec=ExtractionService)
    service.extract.return_value = sample_extraction
    return service


@pytest.mark.asyncio
async def test_create_builds_card_with_chunks_and_tags(extraction_service):
    text = "Primer parrafo.\n\nSegundo parrafo."
    service = CreateCardService(extraction_service)

    card = await service.create(text)

    assert card.id
    assert card.source.startswith("García (2023)")
    assert card.tags == ["IA", "docentes", "planificación"]
    assert card.chunks == ["Primer parrafo.\n\nSegundo parrafo."]
    extraction_service.extract.assert_awaited_once_with(text, on_progress=None)


@pytest.mark.asyncio
async def test_create_uses_segment_settings(extraction_service):
    paragraphs = "\n\n".join("parrafo " * 10 for _ in range(5))
    service = CreateCardService(extraction_service, segment_chunk_size=100)

    card = await service.create(paragraphs)

    assert len(card.chunks) > 1


@pytest.mark.asyncio
async def test_create_assigns_unique_ids(extraction_service):
    service = CreateCardService(extraction_service)

    first = await service.create("texto")
    second = await service.create("texto")

    assert first.id != second.id


@pytest.mark.asyncio
async def test_create_forwards_progress_callback(extraction_service):
    callback = MagicMock()

    await CreateCardService(extraction_service).create("texto", on_progress=callback)

    extraction_service.extract.assert_awaited_once_with("texto", on_progress=callback)


@pytest.mark.asyncio
async def test_create_stores_card_when_repository_is_configured(extraction_service):
    repository = MagicMock(spec=CardRepositoryPort)
    service = CreateCardService(extraction_service, repository=repository)

    card = await service.create("texto")

    repository.add_cards.assert_called_once_with([card])


@pytest.mark.asyncio
async def test_create_rejects_blank_text(extraction_service):
    with pytest.raises(ValueError, match="empty"):
        await CreateCardService(extraction_service).create("   ")

    extraction_service.extract.assert_not_awaited()
