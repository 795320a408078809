"""Keepsake - corpus ingestion and indexing for personal document collections."""

__version__ = "0.1.0"
