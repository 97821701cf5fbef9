"""
Summary statistics for enriched quote collections.

Computes sentiment and emotion distributions, tag coverage and average
sentiment score with pandas, and logs them after each pipeline run.
"""

import logging
from typing import Any, Dict, List

import pandas as pd

logger = logging.getLogger(__name__)


def _distribution(quotes: List[Dict[str, Any]], column: str) -> List[Dict[str, Any]]:
    """Counts and percentages for one column, most frequent first."""
    if not quotes:
        return []

    df = pd.DataFrame({column: [quote.get(column) for quote in quotes]})
    # sort=False keeps first-seen order among equal counts (stable sort below)
    counts = df[column].value_counts(dropna=False, sort=False)
    counts = counts.sort_values(ascending=False, kind="stable")
    total = len(quotes)

    return [
        {
            "label": label if pd.notna(label) else None,
            "count": int(count),
            "percentage": round(float(count) / total * 100, 1),
        }
        for label, count in counts.items()
    ]


def sentiment_distribution(quotes: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Per-sentiment-label counts and percentages, sorted by count descending."""
    return _distribution(quotes, "sentiment_label")


def emotion_distribution(quotes: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Per-emotion counts and percentages, sorted by count descending."""
    return _distribution(quotes, "emotion")


def tag_summary(quotes: List[Dict[str, Any]], top_n: int = 10) -> Dict[str, Any]:
    """
    Summarize tag usage.

    Returns:
        Dictionary with unique_tags (int) and top_tags (list of (tag, count))
    """
    tags = pd.Series([tag for quote in quotes for tag in (quote.get("tags") or [])], dtype=object)
    if tags.empty:
        return {"unique_tags": 0, "top_tags": []}

    counts = tags.value_counts(sort=False).sort_values(ascending=False, kind="stable")
    return {
        "unique_tags": int(tags.nunique()),
        "top_tags": [(tag, int(count)) for tag, count in counts.head(top_n).items()],
    }


def average_sentiment_score(quotes: List[Dict[str, Any]]) -> float:
    """Mean sentiment score, 0.0 for an empty or unscored collection."""
    scores = pd.to_numeric(
        pd.Series([quote.get("sentiment_score") for quote in quotes], dtype=object),
        errors="coerce",
    ).dropna()
    if scores.empty:
        return 0.0
    return round(float(scores.mean()), 2)


def summarize(quotes: List[Dict[str, Any]]) -> Dict[str, Any]:
    """Aggregate statistics for an enriched collection."""
    return {
        "total_quotes": len(quotes),
        "sentiment": sentiment_distribution(quotes),
        "emotions": emotion_distribution(quotes),
        "tags": tag_summary(quotes),
        "average_sentiment_score": average_sentiment_score(quotes),
        "defaulted": sum(1 for quote in quotes if quote.get("annotation_status") == "defaulted"),
    }


def log_distribution(title: str, distribution: List[Dict[str, Any]]) -> None:
    logger.info(title)
    for row in distribution:
        logger.info(f"  {row['label']}: {row['count']} quotes ({row['percentage']:.1f}%)")


def log_summary(summary: Dict[str, Any]) -> None:
    """Log summary statistics produced by summarize()."""
    logger.info("=" * 60)
    logger.info("📊 Summary Statistics:")
    log_distribution("Sentiment Distribution:", summary["sentiment"])
    log_distribution("Emotion Distribution:", summary["emotions"])
    logger.info(f"Average sentiment score: {summary['average_sentiment_score']:.2f}/10")
    logger.info(f"Total unique tags: {summary['tags']['unique_tags']}")
    top_tags = ", ".join(tag for tag, _ in summary["tags"]["top_tags"])
    logger.info(f"Top tags: {top_tags}")
    if summary["defaulted"]:
        logger.warning(f"{summary['defaulted']} quotes fell back to default analysis")
    logger.info("=" * 60)
