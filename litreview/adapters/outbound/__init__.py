"""Outbound adapters: model provider, storage, document loading."""
