"""Heading-aware chunking of paged text into token-bounded pieces, with reports and a thread pool."""

__version__ = "0.1.0"

__all__ = ["chunker", "passes", "report", "threadpool"]