"""LLM exceptions raised by the generative-model adapters."""

from .base import LitReviewError


class LLMError(LitReviewError):
    """Base error for LLM operations."""

    error_code = "LR_LLM_001"


class LLMConnectionError(LLMError):
    """Failed to connect to LLM provider.

    Common causes:
    - Invalid API key
    - Network issues
    - Service unavailable
    """

    error_code = "LR_LLM_002"


class LLMRateLimitError(LLMError):
    """Rate limit or quota exceeded on LLM provider."""

    error_code = "LR_LLM_003"


class LLMGenerationError(LLMError):
    """Failed to generate or parse an LLM response.

    Common causes:
    - Content filtered by safety settings
    - Token limit exceeded (truncated JSON)
    - Response did not match the requested schema
    """

    error_code = "LR_LLM_004"
