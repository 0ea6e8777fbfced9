"""Core layer: domain models, ports and services."""
