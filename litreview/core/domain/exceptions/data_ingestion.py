"""Document ingestion exceptions."""

from .base import LitReviewError


class DataIngestionError(LitReviewError):
    """Error while loading a source document."""

    error_code = "LR_DAT_001"


class DocumentLoadError(DataIngestionError):
    """The source file could not be read or parsed."""

    error_code = "LR_DAT_002"


class EmptyDocumentError(DataIngestionError):
    """The document has no usable text (e.g. scanned PDF without OCR)."""

    error_code = "LR_DAT_003"


class CardStoreError(DataIngestionError):
    """Evidence cards could not be loaded from or saved to storage."""

    error_code = "LR_DAT_004"
