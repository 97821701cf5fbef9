"""
Custom exceptions for the anime quotes project.

This module defines project-specific exceptions for better error handling
and debugging across the enrichment scripts and the dataset store.
"""


class QuoteSearchError(Exception):
    """Base exception for all anime quotes errors."""

    pass


class ConfigurationError(QuoteSearchError):
    """Raised when required configuration (e.g. an API key) is missing."""

    pass


class DataValidationError(QuoteSearchError):
    """Raised when the dataset is not in the state a pipeline requires."""

    pass


class DatasetStoreError(QuoteSearchError):
    """Raised when reading or writing the quote dataset fails."""

    pass


class DatasetLockedError(DatasetStoreError):
    """Raised when another run already holds the dataset lock."""

    pass


class AnnotationError(QuoteSearchError):
    """Raised when an LLM annotation response cannot be used."""

    pass

