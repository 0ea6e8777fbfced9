"""Custom exception hierarchy for litreview.

Each exception includes:
- Error codes for quick identification
- Automatic capture of class, method, file, and line number
- Cause chaining for underlying exceptions
- JSON serialization for structured logging

Import from this package directly:

    from litreview.core.domain.exceptions import LitReviewError, ChunkExtractionError
"""

# Base classes
from .base import ExceptionContext, LitReviewError

# Configuration exceptions
from .configuration import (
    ConfigurationError,
    InvalidConfigurationError,
    MissingAPIKeyError,
)

# Data ingestion exceptions
from .data_ingestion import (
    CardStoreError,
    DataIngestionError,
    DocumentLoadError,
    EmptyDocumentError,
)

# Extraction exceptions
from .extraction import (
    ChunkExtractionError,
    ConsolidationError,
    ExtractionError,
)

# LLM exceptions
from .llm import (
    LLMConnectionError,
    LLMError,
    LLMGenerationError,
    LLMRateLimitError,
)

# Validation exceptions
from .validation import (
    InvalidRecordError,
    ValidationError,
)

__all__ = [
    # Base
    "ExceptionContext",
    "LitReviewError",
    # Configuration
    "ConfigurationError",
    "MissingAPIKeyError",
    "InvalidConfigurationError",
    # LLM
    "LLMError",
    "LLMConnectionError",
    "LLMRateLimitError",
    "LLMGenerationError",
    # Extraction
    "ExtractionError",
    "ChunkExtractionError",
    "ConsolidationError",
    # Data Ingestion
    "DataIngestionError",
    "DocumentLoadError",
    "EmptyDocumentError",
    "CardStoreError",
    # Validation
    "ValidationError",
    "InvalidRecordError",
]
