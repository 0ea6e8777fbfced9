"""Ports (abstract interfaces) implemented by the adapters."""

from .card_repository_port import CardRepositoryPort
from .extraction_port import CredentialResolver, ExtractionPort

__all__ = ["CardRepositoryPort", "CredentialResolver", "ExtractionPort"]
