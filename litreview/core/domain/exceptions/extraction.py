"""Exceptions raised by the chunked extraction pipeline."""

from .base import LitReviewError


class ExtractionError(LitReviewError):
    """Structured extraction of a document failed."""

    error_code = "LR_EXT_001"


class ChunkExtractionError(ExtractionError):
    """Extraction of one fragment failed; the whole document is aborted."""

    error_code = "LR_EXT_002"


class ConsolidationError(ExtractionError):
    """The consolidation call over all partial extractions failed."""

    error_code = "LR_EXT_003"
