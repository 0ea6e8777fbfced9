"""Validation exceptions."""

from .base import LitReviewError


class ValidationError(LitReviewError):
    """Input validation failed."""

    error_code = "LR_VAL_001"


class InvalidRecordError(ValidationError):
    """A structured record has a field of the wrong type or value."""

    error_code = "LR_VAL_002"
