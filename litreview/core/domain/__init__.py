"""Domain models for litreview.

- evidence_card: CardExtraction, ConsolidatedSummary, EvidenceCard
- document: RetrievedChunk produced by the retriever

    from litreview.core.domain import EvidenceCard, RetrievedChunk
"""

from .document import RetrievedChunk
from .evidence_card import (
    PARTICIPANT_ROLES,
    CardExtraction,
    ConsolidatedSummary,
    EvidenceCard,
    RetrievableCard,
    split_tags,
)

__all__ = [
    # Card models
    "PARTICIPANT_ROLES",
    "CardExtraction",
    "ConsolidatedSummary",
    "EvidenceCard",
    "RetrievableCard",
    "split_tags",
    # Retrieval models
    "RetrievedChunk",
]
