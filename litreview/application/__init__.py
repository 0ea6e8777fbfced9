"""Application layer: use cases composed from core services and ports."""
