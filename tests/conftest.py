"""
Pytest configuration and shared fixtures.
"""

import pytest

from litreview.core.domain import CardExtraction, EvidenceCard


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests (no external dependencies)")
    config.addinivalue_line("markers", "integration: Integration tests (require API keys)")


@pytest.fixture
def sample_extraction():
    """A complete single-document extraction."""
    return CardExtraction(
        source="García (2023). IA generativa en el aula universitaria",
        topic="Uso de IA generativa por docentes",
        participant_role="Docente",
        evidence_type="Estudio de caso",
        key_findings="Los docentes usan IA para planificar clases",
        usage_details="Generación de rúbricas",
        summary="El estudio analiza el uso de IA por docentes.",
        conclusions="La IA reduce la carga de planificación.",
        comparative_notes="Coincide con estudios previos",
        challenges_opportunities="Falta de formación",
        contextual_factors="Universidad pública",
        key_evidence="85% de los docentes reportan ahorro de tiempo",
        tags="IA, docentes, planificación",
    )


@pytest.fixture
def make_card():
    """Factory for evidence cards with only retrieval-relevant fields set."""

    def _make(card_id="c1", source="Fuente", chunks=None, **fields):
        return EvidenceCard(id=card_id, source=source, chunks=list(chunks or []), **fields)

    return _make


@pytest.fixture
def tmp_cards_file(tmp_path):
    """Path for a card store inside a temporary directory."""
    return tmp_path / "store" / "cards.json"
