"""Configuration-related exceptions."""

from .base import LitReviewError


class ConfigurationError(LitReviewError):
    """Configuration or environment variable errors.

    Raised when required configuration is missing or invalid.
    """

    error_code = "LR_CFG_001"


class MissingAPIKeyError(ConfigurationError):
    """No Gemini API key could be resolved for the request."""

    error_code = "LR_CFG_002"


class InvalidConfigurationError(ConfigurationError):
    """Configuration value is invalid."""

    error_code = "LR_CFG_003"
