"""Retrieval result model."""

from dataclasses import dataclass


@dataclass
class RetrievedChunk:
    """A scored text span returned by the retriever.

    Created fresh for each query and never persisted.

    Attributes:
        text: The chunk text, or a synthesized metadata block.
        source: Display label of the card the text came from.
        score: Non-negative relevance score, higher is more relevant.
            Scores are unbounded heuristics, not probabilities.
    """

    text: str
    source: str
    score: float
