"""Outbound storage adapters."""
