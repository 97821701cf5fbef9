"""
Add derived emotions to an already sentiment-analyzed quote dataset.

No API calls: the emotion comes from each quote's existing sentiment_label
and tags through the shared mapping in emotion_mapping.

Usage:
    add-emotions
    add-emotions --data-path data/quotes.json
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List

from anime_quotes.ingestion.dataset_store import QuoteDatasetStore
from anime_quotes.nlp.analyze_quotes import PROGRESS_EVERY, has_sentiment_analysis
from anime_quotes.nlp.emotion_mapping import MAPPING_VERSION, derive_emotion
from anime_quotes.nlp.quote_statistics import emotion_distribution, log_distribution
from anime_quotes.shared.config import LOG_LEVEL, QUOTES_BACKUP_PATH, QUOTES_DATA_PATH
from anime_quotes.shared.exceptions import DataValidationError, QuoteSearchError

logger = logging.getLogger(__name__)


def has_emotions(quotes: List[Dict[str, Any]], metadata: Dict[str, Any]) -> bool:
    """Emotions present: explicit metadata flag, else the first-record check."""
    if "emotions" in metadata:
        return bool(metadata["emotions"])
    return bool(quotes) and quotes[0].get("emotion") is not None


def add_emotions_to_quotes(
    quotes: List[Dict[str, Any]], progress_every: int = PROGRESS_EVERY
) -> List[Dict[str, Any]]:
    """Return new quote dicts with an `emotion` derived from label and tags."""
    enhanced_quotes = []
    for processed, quote in enumerate(quotes, start=1):
        enhanced_quotes.append(
            {**quote, "emotion": derive_emotion(quote.get("sentiment_label"), quote.get("tags"))}
        )
        if progress_every > 0 and processed % progress_every == 0:
            logger.info(f"Processed {processed}/{len(quotes)} quotes...")
    return enhanced_quotes


def run_add_emotions(store: QuoteDatasetStore) -> Dict[str, Any]:
    """
    Add emotions to the dataset in place (backup first).

    Returns:
        Dictionary with skipped, quote_count, emotions (distribution or None)

    Raises:
        DataValidationError: If the dataset has no sentiment analysis yet
        DatasetStoreError: If the dataset cannot be read or written
    """
    with store.run_lock():
        logger.info(f"Reading quotes from: {store.data_path}")
        raw = store.read_raw()
        quotes = store.load(raw)
        metadata = store.load_metadata(raw)
        logger.info(f"Found {len(quotes)} quotes to process")

        if not has_sentiment_analysis(quotes):
            raise DataValidationError(
                "Quotes do not have sentiment analysis. "
                "Please run the full analysis first: analyze-quotes"
            )

        if has_emotions(quotes, metadata):
            logger.info("✅ Quotes already have emotions. Skipping...")
            return {"skipped": True, "quote_count": len(quotes), "emotions": None}

        store.backup(raw)
        enhanced_quotes = add_emotions_to_quotes(quotes)
        store.save(
            enhanced_quotes,
            metadata={
                **metadata,
                "enriched": True,
                "emotions": True,
                "mapping_version": MAPPING_VERSION,
            },
        )

    logger.info(f"✅ Successfully added emotions to {len(enhanced_quotes)} quotes")
    distribution = emotion_distribution(enhanced_quotes)
    log_distribution("📊 Emotion Distribution:", distribution)

    return {"skipped": False, "quote_count": len(enhanced_quotes), "emotions": distribution}


def main() -> None:
    """Main entry point for the emotion-only script."""
    parser = argparse.ArgumentParser(
        description="Derive emotions for quotes that already have sentiment analysis"
    )
    parser.add_argument(
        "--data-path",
        type=Path,
        default=Path(QUOTES_DATA_PATH),
        help=f"Path to quotes JSON file (default: {QUOTES_DATA_PATH})",
    )
    parser.add_argument(
        "--backup-path",
        type=Path,
        default=Path(QUOTES_BACKUP_PATH) if QUOTES_BACKUP_PATH else None,
        help="Path for the backup (default: <data stem>.backup.json beside the data file)",
    )
    args = parser.parse_args()

    logging.basicConfig(
        level=getattr(logging, LOG_LEVEL.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    try:
        run_add_emotions(QuoteDatasetStore(args.data_path, args.backup_path))
    except DataValidationError as e:
        logger.error(f"❌ {e}")
        sys.exit(1)
    except QuoteSearchError as e:
        logger.error(f"✗ {e}")
        sys.exit(1)
    except Exception as e:
        logger.error(f"Fatal error: {e}")
        sys.exit(1)

    logger.info("🎉 Emotion addition completed successfully!")
    sys.exit(0)


if __name__ == "__main__":
    main()
