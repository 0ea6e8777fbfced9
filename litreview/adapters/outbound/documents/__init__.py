"""Outbound document loaders."""
