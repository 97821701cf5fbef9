"""
Local persistence for a user's saved (bookmarked) quotes.

Saved quotes are full copies of quote records kept under a single namespaced
key in a JSON file: {"quote-search-saved-quotes": [...]}. The file is read
once when the store is created and rewritten on every change. Other keys in
the file are preserved.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Union

logger = logging.getLogger(__name__)

SAVED_QUOTES_KEY = "quote-search-saved-quotes"


class SavedQuotesStore:
    """Bookmarked quotes for one browsing session, keyed by objectID."""

    def __init__(self, path: Union[str, Path], namespace: str = SAVED_QUOTES_KEY) -> None:
        self.path = Path(path)
        self.namespace = namespace
        self._quotes: List[Dict[str, Any]] = self._load()

    def _read_file(self) -> Dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.error(f"Error loading quotes from {self.path}: {e}")
            return {}
        if not isinstance(data, dict):
            logger.error(f"Error loading quotes from {self.path}: expected a JSON object")
            return {}
        return data

    def _load(self) -> List[Dict[str, Any]]:
        saved = self._read_file().get(self.namespace, [])
        if not isinstance(saved, list):
            logger.error(f"Ignoring malformed saved quotes under '{self.namespace}'")
            return []
        return [quote for quote in saved if isinstance(quote, dict) and "objectID" in quote]

    def _persist(self) -> None:
        data = self._read_file()
        data[self.namespace] = self._quotes
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.path, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2, ensure_ascii=False)
        except OSError as e:
            # Saved quotes stay in memory for the session even if the write fails
            logger.error(f"Error saving quotes to {self.path}: {e}")

    def list_saved(self) -> List[Dict[str, Any]]:
        return list(self._quotes)

    def is_saved(self, object_id: str) -> bool:
        return any(quote["objectID"] == object_id for quote in self._quotes)

    def save_quote(self, quote: Dict[str, Any]) -> bool:
        """
        Add a quote to the saved collection.

        Returns:
            True if added, False if it was already saved

        Raises:
            ValueError: If the quote has no objectID
        """
        if "objectID" not in quote:
            raise ValueError("Quote must have an objectID to be saved")
        if self.is_saved(quote["objectID"]):
            return False
        self._quotes.append(dict(quote))
        self._persist()
        logger.info(f"Quote {quote['objectID']} added to saved collection")
        return True

    def remove_quote(self, object_id: str) -> bool:
        """Remove a saved quote; returns False if it was not saved."""
        remaining = [quote for quote in self._quotes if quote["objectID"] != object_id]
        if len(remaining) == len(self._quotes):
            return False
        self._quotes = remaining
        self._persist()
        logger.info(f"Quote {object_id} removed from saved collection")
        return True

    def toggle(self, quote: Dict[str, Any]) -> bool:
        """Save or unsave a quote; returns True if the quote is now saved."""
        if self.is_saved(quote.get("objectID")):
            self.remove_quote(quote["objectID"])
            return False
        return self.save_quote(quote)
