"""Anime quote search: offline enrichment pipeline for the quote dataset."""

__version__ = "0.1.0"
