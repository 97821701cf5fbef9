"""
Filtering helpers over the enriched quote collection.

Offline counterparts of the search page's filters: sentiment, emotion,
score range, tags, character and pagination.
"""

import math
from typing import Any, Dict, Iterable, List

HITS_PER_PAGE = 4


def filter_by_sentiment(quotes: List[Dict[str, Any]], sentiment_label: str) -> List[Dict[str, Any]]:
    return [quote for quote in quotes if quote.get("sentiment_label") == sentiment_label]


def filter_by_emotion(quotes: List[Dict[str, Any]], emotion: str) -> List[Dict[str, Any]]:
    return [quote for quote in quotes if quote.get("emotion") == emotion]


def filter_by_character(quotes: List[Dict[str, Any]], character: str) -> List[Dict[str, Any]]:
    return [quote for quote in quotes if quote.get("character") == character]


def filter_by_sentiment_score(
    quotes: List[Dict[str, Any]], min_score: int, max_score: int
) -> List[Dict[str, Any]]:
    """Quotes whose sentiment_score lies in [min_score, max_score]."""
    return [
        quote
        for quote in quotes
        if isinstance(quote.get("sentiment_score"), (int, float))
        and min_score <= quote["sentiment_score"] <= max_score
    ]


def search_by_tags(quotes: List[Dict[str, Any]], search_tags: Iterable[str]) -> List[Dict[str, Any]]:
    """Quotes with any tag containing any search tag (case-insensitive substring)."""
    needles = [tag.lower() for tag in search_tags]
    return [
        quote
        for quote in quotes
        if any(needle in tag.lower() for tag in quote.get("tags") or [] for needle in needles)
    ]


def get_all_tags(quotes: List[Dict[str, Any]]) -> List[str]:
    return sorted({tag for quote in quotes for tag in quote.get("tags") or []})


def get_emotion_stats(quotes: List[Dict[str, Any]]) -> Dict[str, int]:
    """Emotion -> count, most frequent first."""
    stats: Dict[str, int] = {}
    for quote in quotes:
        emotion = quote.get("emotion")
        if emotion:
            stats[emotion] = stats.get(emotion, 0) + 1
    return dict(sorted(stats.items(), key=lambda item: item[1], reverse=True))


def paginate(
    quotes: List[Dict[str, Any]], page: int = 0, hits_per_page: int = HITS_PER_PAGE
) -> Dict[str, Any]:
    """
    Slice one page of results (0-based page numbers).

    Returns:
        Dictionary with hits, page, nb_pages, nb_hits, hits_per_page

    Raises:
        ValueError: If page is negative or hits_per_page is not positive
    """
    if page < 0:
        raise ValueError(f"page must be >= 0, got {page}")
    if hits_per_page <= 0:
        raise ValueError(f"hits_per_page must be positive, got {hits_per_page}")

    start = page * hits_per_page
    return {
        "hits": quotes[start : start + hits_per_page],
        "page": page,
        "nb_pages": math.ceil(len(quotes) / hits_per_page),
        "nb_hits": len(quotes),
        "hits_per_page": hits_per_page,
    }
