"""Extraction port: the generative model as seen by the extraction pipeline."""

from abc import ABC, abstractmethod
from collections.abc import Callable

from ..domain import CardExtraction, ConsolidatedSummary

# Returns the API credential to use for the next request, or None if unset
CredentialResolver = Callable[[], str | None]


class ExtractionPort(ABC):
    """Abstract interface for structured-extraction providers.

    Implementations raise an ``LLMError`` subclass on quota, auth, transport
    or parse failures.
    """

    @abstractmethod
    async def extract_chunk(
        self, chunk_text: str, total_chunks: int, chunk_index: int
    ) -> CardExtraction:
        """Extract structured card fields from one fragment of a document."""
        ...

    @abstractmethod
    async def consolidate(self, partials: list[CardExtraction]) -> ConsolidatedSummary:
        """Synthesize one topic/summary/conclusions triple from partial extractions."""
        ...
