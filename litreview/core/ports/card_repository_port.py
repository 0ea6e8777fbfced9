"""Card repository port."""

from abc import ABC, abstractmethod

from ..domain import EvidenceCard


class CardRepositoryPort(ABC):
    """Abstract interface for evidence-card persistence."""

    @abstractmethod
    def list_cards(self) -> list[EvidenceCard]:
        """Return every stored card, in insertion order."""
        ...

    @abstractmethod
    def add_cards(self, cards: list[EvidenceCard]) -> int:
        """Append cards and return the new total."""
        ...
