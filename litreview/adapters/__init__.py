"""Adapters around the core ports."""
