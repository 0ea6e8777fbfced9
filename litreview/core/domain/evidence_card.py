"""Evidence card models: partial extractions, consolidated records, stored cards."""

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field, fields
from typing import Any, Protocol

from .exceptions import InvalidRecordError

logger = logging.getLogger(__name__)

PARTICIPANT_ROLES = ("Docente", "Estudiante", "Ambos")

# Python attribute -> camelCase key used by the model schema and stored backups
FIELD_KEYS: dict[str, str] = {
    "source": "source",
    "topic": "topic",
    "participant_role": "participantRole",
    "evidence_type": "evidenceType",
    "key_findings": "keyFindings",
    "usage_details": "usageDetails",
    "summary": "summary",
    "conclusions": "conclusions",
    "comparative_notes": "comparativeNotes",
    "challenges_opportunities": "challengesOpportunities",
    "contextual_factors": "contextualFactors",
    "key_evidence": "keyEvidence",
}


def _normalize_role(value: Any) -> str:
    """Map a model-provided role onto one of PARTICIPANT_ROLES."""
    if not value:
        return "Ambos"
    for role in PARTICIPANT_ROLES:
        if str(value).strip().lower() == role.lower():
            return role
    logger.debug(f"Unknown participant role {value!r}, using 'Ambos'")
    return "Ambos"


def split_tags(tags: str) -> list[str]:
    """Split a comma-separated tag string, dropping blanks."""
    return [tag.strip() for tag in tags.split(",") if tag.strip()]


@dataclass
class CardExtraction:
    """Structured fields extracted from a document (or one of its fragments).

    Every field has a defined default so a partial extraction is always a
    complete value. ``tags`` is a comma-separated string, as returned by the
    extraction step; :class:`EvidenceCard` holds the split list.
    """

    source: str = ""
    topic: str = ""
    participant_role: str = "Docente"
    evidence_type: str = ""
    key_findings: str = ""
    usage_details: str = ""
    summary: str = ""
    conclusions: str = ""
    comparative_notes: str = ""
    challenges_opportunities: str = ""
    contextual_factors: str = ""
    key_evidence: str = ""
    tags: str = ""
    full_text: str = ""

    def __post_init__(self) -> None:
        for f in fields(self):
            value = getattr(self, f.name)
            if not isinstance(value, str):
                raise InvalidRecordError(
                    f"Field '{f.name}' must be a string",
                    context={"field": f.name, "type": type(value).__name__},
                )
        if self.participant_role not in PARTICIPANT_ROLES:
            raise InvalidRecordError(
                f"Invalid participant role: {self.participant_role!r}",
                context={"allowed": list(PARTICIPANT_ROLES)},
            )

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "CardExtraction":
        """Build an extraction from the model's camelCase JSON object.

        Missing or falsy fields fall back to empty strings, a missing role to
        ``"Ambos"``, and the ``suggestedTags`` list is joined with ``", "``.
        """
        values: dict[str, str] = {}
        for attr, key in FIELD_KEYS.items():
            raw = data.get(key)
            values[attr] = str(raw) if raw else ""
        values["participant_role"] = _normalize_role(data.get("participantRole"))

        raw_tags = data.get("suggestedTags") or []
        if isinstance(raw_tags, str):
            raw_tags = split_tags(raw_tags)
        values["tags"] = ", ".join(str(tag) for tag in raw_tags if tag)
        return cls(**values)

    def tag_list(self) -> list[str]:
        """Return the tags as a list."""
        return split_tags(self.tags)


@dataclass
class ConsolidatedSummary:
    """The synthesized topic/summary/conclusions triple of a multi-fragment document."""

    topic: str = ""
    summary: str = ""
    conclusions: str = ""

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "ConsolidatedSummary":
        return cls(
            topic=str(data.get("topic") or ""),
            summary=str(data.get("summary") or ""),
            conclusions=str(data.get("conclusions") or ""),
        )


class RetrievableCard(Protocol):
    """What the retriever needs from a record: chunks plus four metadata fields."""

    source: str
    topic: str
    summary: str
    key_findings: str
    chunks: list[str]


@dataclass
class EvidenceCard:
    """A persisted evidence card built from one source document.

    The card owns its retrieval ``chunks``; they are written once at creation
    time and read by the retriever afterwards.
    """

    id: str
    source: str = ""
    topic: str = ""
    participant_role: str = "Docente"
    evidence_type: str = ""
    key_findings: str = ""
    usage_details: str = ""
    summary: str = ""
    conclusions: str = ""
    comparative_notes: str = ""
    challenges_opportunities: str = ""
    contextual_factors: str = ""
    key_evidence: str = ""
    tags: list[str] = field(default_factory=list)
    chunks: list[str] = field(default_factory=list)
    full_text: str = ""

    @classmethod
    def from_extraction(
        cls, extraction: CardExtraction, card_id: str, chunks: list[str]
    ) -> "EvidenceCard":
        """Create a card from a final extraction and its retrieval chunks."""
        values = {attr: getattr(extraction, attr) for attr in FIELD_KEYS}
        return cls(
            id=card_id,
            tags=extraction.tag_list(),
            chunks=list(chunks),
            full_text=extraction.full_text,
            **values,
        )

    def to_dict(self) -> dict[str, Any]:
        """Serialize using the camelCase keys of the original card backups."""
        data: dict[str, Any] = {"id": self.id}
        for attr, key in FIELD_KEYS.items():
            data[key] = getattr(self, attr)
        data["tags"] = list(self.tags)
        data["chunks"] = list(self.chunks)
        if self.full_text:
            data["fullText"] = self.full_text
        return data

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "EvidenceCard":
        """Load a card from its stored form; unknown keys are ignored."""
        if not data.get("id"):
            raise InvalidRecordError("Stored card has no id", context={"keys": sorted(data)})
        values = {attr: str(data.get(key) or "") for attr, key in FIELD_KEYS.items()}
        values["participant_role"] = _normalize_role(data.get("participantRole"))
        tags = data.get("tags") or []
        if isinstance(tags, str):
            tags = split_tags(tags)
        return cls(
            id=str(data["id"]),
            tags=[str(tag) for tag in tags],
            chunks=[str(chunk) for chunk in data.get("chunks") or []],
            full_text=str(data.get("fullText") or ""),
            **values,
        )
