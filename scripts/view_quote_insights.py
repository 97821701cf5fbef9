#!/usr/bin/env python3
"""
Print a tour of the enriched quote dataset.

Shows sentiment and emotion distributions, sample quotes per filter and the
available tags. Run after analyze-quotes.

Usage:
    python scripts/view_quote_insights.py
    python scripts/view_quote_insights.py --data-path data/quotes.json
"""
import argparse
import sys
from pathlib import Path

from anime_quotes.app.quote_filters import (
    filter_by_emotion,
    filter_by_sentiment,
    filter_by_sentiment_score,
    get_all_tags,
    get_emotion_stats,
    search_by_tags,
)
from anime_quotes.ingestion.dataset_store import QuoteDatasetStore
from anime_quotes.nlp.analyze_quotes import has_sentiment_analysis
from anime_quotes.nlp.quote_statistics import average_sentiment_score, sentiment_distribution
from anime_quotes.shared.config import QUOTES_DATA_PATH
from anime_quotes.shared.exceptions import DatasetStoreError


def print_samples(title, quotes, detail, limit=3):
    print(title)
    for index, quote in enumerate(quotes[:limit], start=1):
        print(f'  {index}. "{quote["quote"][:60]}..."')
        print(f"     {detail(quote)}\n")


def main():
    """Print dataset insights."""
    parser = argparse.ArgumentParser(description="Show insights from the enriched quotes")
    parser.add_argument("--data-path", type=Path, default=Path(QUOTES_DATA_PATH))
    args = parser.parse_args()

    try:
        quotes = QuoteDatasetStore(args.data_path).load()
    except DatasetStoreError as e:
        print(f"❌ Error loading quotes: {e}")
        sys.exit(1)

    if not has_sentiment_analysis(quotes):
        print("No analyzed quotes found. Please run the analysis script first:")
        print("analyze-quotes")
        sys.exit(1)

    print("🎯 Enhanced Quote Search Features Demo\n")
    print(f"📊 Total quotes: {len(quotes)}\n")

    print("📈 Sentiment Distribution:")
    for row in sentiment_distribution(quotes):
        print(f"  {row['label']}: {row['count']} quotes ({row['percentage']:.1f}%)")
    print(f"  Average sentiment score: {average_sentiment_score(quotes):.2f}/10\n")

    def score_and_tags(q):
        return f"Score: {q['sentiment_score']}/10, Tags: {', '.join(q['tags'])}"

    print_samples("😊 Sample Positive Quotes:", filter_by_sentiment(quotes, "positive"), score_and_tags)
    print_samples("😔 Sample Negative Quotes:", filter_by_sentiment(quotes, "negative"), score_and_tags)
    print_samples(
        "🌟 High Sentiment Quotes (8-10):",
        filter_by_sentiment_score(quotes, 8, 10),
        lambda q: f"Score: {q['sentiment_score']}/10, Label: {q['sentiment_label']}",
    )
    print_samples(
        "💕 Love-themed Quotes:",
        search_by_tags(quotes, ["love"]),
        lambda q: f"Tags: {', '.join(q['tags'])}, Emotion: {q.get('emotion')}",
    )
    print_samples("🌟 Inspiring Quotes:", filter_by_emotion(quotes, "Inspiring"), score_and_tags)

    all_tags = get_all_tags(quotes)
    print(f"🏷️  Available Tags ({len(all_tags)} total):")
    print(", ".join(all_tags[:20]))
    if len(all_tags) > 20:
        print(f"... and {len(all_tags) - 20} more")

    print("😊 Emotion Distribution:")
    for emotion, count in list(get_emotion_stats(quotes).items())[:10]:
        print(f"  {emotion}: {count} quotes")


if __name__ == "__main__":
    main()
