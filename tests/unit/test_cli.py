"""Unit tests for the typer CLI."""

import asyncio
import json
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from rich.console import Console
from typer.testing import CliRunner

from litreview.adapters.inbound.cli import commands
from litreview.adapters.outbound.llm.gemini_adapter import GeminiExtractionAdapter
from litreview.adapters.outbound.storage.json_card_repository import JsonCardRepository
from litreview.application.services.create_card import CreateCardService
from litreview.core.domain import EvidenceCard
from litreview.core.domain.exceptions import ChunkExtractionError
from litreview.core.services.extraction_service import ExtractionService

pytestmark = pytest.mark.unit

runner = CliRunner()


@pytest.fixture(autouse=True)
def plain_console(monkeypatch, tmp_path):
    """Uncolored output and no logging handlers bound to the runner's streams."""
    monkeypatch.chdir(tmp_path)
    console = Console(force_terminal=False, no_color=True, width=200)
    monkeypatch.setattr(commands, "console", console)
    monkeypatch.setattr(commands, "setup_logging", MagicMock())


@pytest.fixture
def repository(monkeypatch, tmp_cards_file):
    repo = JsonCardRepository(tmp_cards_file)
    monkeypatch.setattr(commands, "get_card_repository", lambda: repo)
    return repo


def test_segment_prints_chunks(tmp_path):
    path = tmp_path / "doc.txt"
    path.write_text("Primer parrafo.\n\nSegundo parrafo.", encoding="utf-8")

    result = runner.invoke(commands.app, ["segment", str(path)])

    assert result.exit_code == 0
    assert "Primer parrafo." in result.output
    assert "1 chunks" in result.output


def test_segment_reports_unsupported_file(tmp_path):
    path = tmp_path / "foto.jpg"
    path.write_bytes(b"\xff\xd8")

    result = runner.invoke(commands.app, ["segment", str(path)])

    assert result.exit_code == 3
    assert "LR_DAT_002" in result.output


def test_ingest_creates_and_reports_card(monkeypatch, tmp_path):
    path = tmp_path / "articulo.txt"
    path.write_text("La IA ayuda a los docentes en el aula.", encoding="utf-8")
    card = EvidenceCard(id="abc", source="Estudio A", tags=["IA"], chunks=["uno"])
    service = MagicMock()
    service.create = AsyncMock(return_value=card)
    monkeypatch.setattr(commands, "get_create_card_service", lambda: service)

    result = runner.invoke(commands.app, ["ingest", str(path)])

    assert result.exit_code == 0
    assert "Estudio A (1 chunks)" in result.output
    assert "Tags: IA" in result.output
    assert service.create.await_args.args[0] == "La IA ayuda a los docentes en el aula."


def test_ingest_runs_every_file_on_one_event_loop(monkeypatch, tmp_path, tmp_cards_file):
    loops = []

    async def generate_content(**kwargs):
        loops.append(asyncio.get_running_loop())
        payload = {"source": "Estudio", "topic": "IA", "suggestedTags": ["IA"]}
        return MagicMock(text=json.dumps(payload))

    client = MagicMock()
    client.aio.models.generate_content = generate_content
    repo = JsonCardRepository(tmp_cards_file)
    service = CreateCardService(
        ExtractionService(GeminiExtractionAdapter(lambda: "key-1")), repository=repo
    )
    monkeypatch.setattr(commands, "get_create_card_service", lambda: service)
    paths = []
    for name in ("uno.txt", "dos.txt"):
        path = tmp_path / name
        path.write_text(f"Documento {name} sobre IA en el aula.", encoding="utf-8")
        paths.append(str(path))

    with patch(
        "litreview.adapters.outbound.llm.gemini_adapter.genai.Client", return_value=client
    ) as client_cls:
        result = runner.invoke(commands.app, ["ingest", *paths])

    assert result.exit_code == 0
    assert result.output.count("OK Estudio (1 chunks)") == 2
    assert len(loops) == 2
    assert loops[0] is loops[1]
    client_cls.assert_called_once_with(api_key="key-1")
    assert len(repo.list_cards()) == 2


def test_ingest_surfaces_extraction_errors(monkeypatch, tmp_path):
    path = tmp_path / "articulo.txt"
    path.write_text("texto", encoding="utf-8")
    service = MagicMock()
    error = ChunkExtractionError("No se pudo procesar el fragmento 2 de 3")
    service.create = AsyncMock(side_effect=error)
    monkeypatch.setattr(commands, "get_create_card_service", lambda: service)

    result = runner.invoke(commands.app, ["ingest", str(path)])

    assert result.exit_code == 5
    assert "LR_EXT_002" in result.output
    assert "fragmento 2 de 3" in result.output


def test_search_lists_ranked_chunks(repository):
    chunk = "La IA ayuda a los docentes en el aula."
    repository.add_cards([EvidenceCard(id="1", source="Estudio A", chunks=[chunk])])

    result = runner.invoke(commands.app, ["search", "docentes IA"])

    assert result.exit_code == 0
    assert "Estudio A" in result.output
    assert "10" in result.output


def test_search_without_matches(repository):
    result = runner.invoke(commands.app, ["search", "docentes"])

    assert result.exit_code == 0
    assert "No matching chunks" in result.output


def test_search_context_output(repository):
    repository.add_cards([EvidenceCard(id="1", source="Estudio A", chunks=["docentes y IA"])])

    result = runner.invoke(commands.app, ["search", "docentes", "--context"])

    assert result.exit_code == 0
    assert "[Fuente: Estudio A]" in result.output


def test_status_reports_store(repository):
    repository.add_cards([EvidenceCard(id="1", chunks=["a", "b"]), EvidenceCard(id="2")])

    result = runner.invoke(commands.app, ["status"])

    assert result.exit_code == 0
    assert "2 cards, 2 chunks" in result.output


def test_status_with_empty_store(repository):
    result = runner.invoke(commands.app, ["status"])

    assert result.exit_code == 0
    assert "No cards yet" in result.output
