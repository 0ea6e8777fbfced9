"""Configuration package: settings and logging."""

from .settings import Settings, resolve_credential, settings

__all__ = ["Settings", "resolve_credential", "settings"]
