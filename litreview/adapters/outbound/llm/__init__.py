"""Outbound LLM adapters."""
