"""Application use-case services."""
