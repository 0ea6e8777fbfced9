"""Core services: segmentation, retrieval and chunked extraction."""

from .extraction_service import ExtractionService, consolidate_partials
from .json_repair import loads_lenient, repair_truncated_json
from .retrieval_service import RetrievalService, retrieve_relevant_chunks
from .segmenter import chunk_text, segment_text

__all__ = [
    "ExtractionService",
    "RetrievalService",
    "chunk_text",
    "consolidate_partials",
    "loads_lenient",
    "repair_truncated_json",
    "retrieve_relevant_chunks",
    "segment_text",
]
