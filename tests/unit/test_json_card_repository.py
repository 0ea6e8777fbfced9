"""Unit tests for the JSON-file card store."""

import json

import pytest

from litreview.adapters.outbound.storage.json_card_repository import JsonCardRepository
from litreview.core.domain import EvidenceCard
from litreview.core.domain.exceptions import CardStoreError

pytestmark = pytest.mark.unit


def test_missing_file_lists_no_cards(tmp_cards_file):
    assert JsonCardRepository(tmp_cards_file).list_cards() == []


def test_add_cards_persists_and_returns_total(tmp_cards_file):
    repository = JsonCardRepository(tmp_cards_file)

    assert repository.add_cards([EvidenceCard(id="1", source="A", chunks=["uno"])]) == 1
    assert repository.add_cards([EvidenceCard(id="2", source="B")]) == 2

    cards = JsonCardRepository(tmp_cards_file).list_cards()
    assert [card.id for card in cards] == ["1", "2"]
    assert cards[0].chunks == ["uno"]


def test_file_layout_uses_cards_key(tmp_cards_file):
    JsonCardRepository(tmp_cards_file).add_cards([EvidenceCard(id="1", topic="Tema")])

    payload = json.loads(tmp_cards_file.read_text(encoding="utf-8"))

    assert payload["cards"][0]["id"] == "1"
    assert payload["cards"][0]["topic"] == "Tema"
    assert not (tmp_cards_file.parent / "cards.json.tmp").exists()


def test_bare_list_backup_is_accepted(tmp_cards_file):
    tmp_cards_file.parent.mkdir(parents=True)
    tmp_cards_file.write_text(json.dumps([{"id": "x", "source": "S"}]), encoding="utf-8")

    cards = JsonCardRepository(tmp_cards_file).list_cards()

    assert [card.source for card in cards] == ["S"]


def test_invalid_entries_are_skipped(tmp_cards_file):
    tmp_cards_file.parent.mkdir(parents=True)
    payload = {"cards": [{"source": "sin id"}, "basura", {"id": "ok"}]}
    tmp_cards_file.write_text(json.dumps(payload), encoding="utf-8")

    cards = JsonCardRepository(tmp_cards_file).list_cards()

    assert [card.id for card in cards] == ["ok"]


def test_corrupt_file_raises(tmp_cards_file):
    tmp_cards_file.parent.mkdir(parents=True)
    tmp_cards_file.write_text("{no es json", encoding="utf-8")

    with pytest.raises(CardStoreError, match="No se pudo leer"):
        JsonCardRepository(tmp_cards_file).list_cards()
