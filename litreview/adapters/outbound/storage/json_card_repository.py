"""JSON-file adapter for evidence-card persistence."""

import json
import logging
from pathlib import Path

from ....core.domain import EvidenceCard
from ....core.domain.exceptions import CardStoreError, InvalidRecordError
from ....core.ports.card_repository_port import CardRepositoryPort

logger = logging.getLogger(__name__)


class JsonCardRepository(CardRepositoryPort):
    """Stores cards as one JSON document: ``{"cards": [...]}``.

    The layout matches the ``cards`` array of the browser app's backup files,
    so an exported backup can be loaded directly.
    """

    def __init__(self, path: str | Path) -> None:
        """Initialize the repository.

        Args:
            path: Location of the JSON file. Created on first write.
        """
        self.path = Path(path)

    def list_cards(self) -> list[EvidenceCard]:
        if not self.path.exists():
            return []

        try:
            payload = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            raise CardStoreError(
                f"No se pudo leer el almacén de fichas: {self.path}",
                cause=e,
                context={"path": str(self.path)},
            ) from e

        raw_cards = payload.get("cards", []) if isinstance(payload, dict) else payload
        cards = []
        for raw in raw_cards:
            if not isinstance(raw, dict):
                logger.warning(f"Skipping non-object card entry in {self.path}")
                continue
            try:
                cards.append(EvidenceCard.from_dict(raw))
            except InvalidRecordError as e:
                logger.warning(f"Skipping invalid card in {self.path}: {e}")
        return cards

    def add_cards(self, cards: list[EvidenceCard]) -> int:
        all_cards = self.list_cards() + list(cards)
        self._write(all_cards)
        logger.info(f"Stored {len(cards)} new cards ({len(all_cards)} total) in {self.path}")
        return len(all_cards)

    def _write(self, cards: list[EvidenceCard]) -> None:
        payload = {"cards": [card.to_dict() for card in cards]}
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
            tmp_path.write_text(json.dumps(payload, ensure_ascii=False, indent=2), encoding="utf-8")
            tmp_path.replace(self.path)
        except OSError as e:
            raise CardStoreError(
                f"No se pudo escribir el almacén de fichas: {self.path}",
                cause=e,
                context={"path": str(self.path)},
            ) from e
