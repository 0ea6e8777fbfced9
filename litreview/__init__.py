"""litreview: evidence-card extraction, segmentation and retrieval for literature reviews."""

__version__ = "0.1.0"
