"""
Sentiment, tag and emotion enrichment of the anime quote dataset.

This module drives the full analysis: quotes are split into fixed-size
batches, every quote in a batch is annotated concurrently through the OpenAI
chat API, each result is merged with a derived emotion, and the pipeline
pauses between batches to stay under the API rate limit. On completion the
original dataset bytes are backed up, the enriched collection replaces the
canonical file, and summary statistics are logged.

Usage:
    analyze-quotes
    analyze-quotes --data-path data/quotes.json --batch-size 20 --verbose
"""

# Standard library imports
import argparse
import asyncio
import logging
import sys
from functools import partial
from pathlib import Path
from typing import Any, Awaitable, Callable, Dict, List, Optional

# Local imports
from anime_quotes.ingestion.dataset_store import QuoteDatasetStore
from anime_quotes.ingestion.load_to_duckdb import export_quotes
from anime_quotes.nlp.annotate_quotes import (
    Annotation,
    annotate,
    create_openai_client,
)
from anime_quotes.nlp.emotion_mapping import DEFAULT_EMOTION, MAPPING_VERSION, derive_emotion
from anime_quotes.nlp.quote_statistics import log_summary, summarize
from anime_quotes.nlp.rate_limiter import AsyncTokenBucket
from anime_quotes.shared.config import (
    ANALYSIS_BATCH_DELAY,
    ANALYSIS_BATCH_SIZE,
    ANALYSIS_RATE_LIMIT,
    ANALYSIS_TIMEOUT,
    DUCKDB_PATH,
    LOG_LEVEL,
    OPENAI_API_KEY,
    OPENAI_MODEL,
    QUOTES_BACKUP_PATH,
    QUOTES_DATA_PATH,
)
from anime_quotes.shared.exceptions import ConfigurationError, QuoteSearchError

logger = logging.getLogger(__name__)

# Constants
BATCH_SIZE = ANALYSIS_BATCH_SIZE
DELAY_BETWEEN_BATCHES = ANALYSIS_BATCH_DELAY  # seconds
PROGRESS_EVERY = 1000

Annotator = Callable[[Dict[str, Any]], Awaitable[Annotation]]
Sleeper = Callable[[float], Awaitable[Any]]


def create_batches(quotes: List[Dict[str, Any]], batch_size: int = BATCH_SIZE) -> List[List[Dict[str, Any]]]:
    """
    Split quotes into contiguous batches.

    Args:
        quotes: Quote dictionaries in dataset order
        batch_size: Number of quotes per batch

    Returns:
        List of batches; the last batch may be shorter

    Raises:
        ValueError: If batch_size is not positive

    Example:
        >>> [len(b) for b in create_batches([{}] * 25, batch_size=10)]
        [10, 10, 5]
    """
    if batch_size <= 0:
        raise ValueError(f"batch_size must be positive, got {batch_size}")
    return [quotes[i : i + batch_size] for i in range(0, len(quotes), batch_size)]


def has_sentiment_analysis(quotes: List[Dict[str, Any]]) -> bool:
    """Collection-level check: the first record carries a sentiment_score."""
    return bool(quotes) and quotes[0].get("sentiment_score") is not None


def is_dataset_enriched(quotes: List[Dict[str, Any]], metadata: Dict[str, Any]) -> bool:
    """
    Whether the dataset has already been through full analysis.

    The explicit metadata flag wins when present; legacy bare-array datasets
    fall back to the first-record check.
    """
    if "enriched" in metadata:
        return bool(metadata["enriched"])
    return has_sentiment_analysis(quotes)


def merge_annotation(quote: Dict[str, Any], annotation: Annotation) -> Dict[str, Any]:
    """
    Combine a quote with its annotation and derived emotion.

    Defaulted annotations get the "Neutral" emotion rather than the emotion
    derived from the default label.
    """
    if annotation.defaulted:
        emotion = DEFAULT_EMOTION
    else:
        emotion = derive_emotion(annotation.sentiment_label, annotation.tags)

    return {
        **quote,
        **annotation.as_dict(),
        "emotion": emotion,
        "annotation_status": annotation.status,
    }


def make_openai_annotator(
    client,
    model: str = OPENAI_MODEL,
    timeout: float = ANALYSIS_TIMEOUT,
    rate_limiter: Optional[AsyncTokenBucket] = None,
) -> Annotator:
    """Bind an OpenAI client and settings into a per-quote annotator."""
    call = partial(annotate, client, model=model, timeout=timeout, rate_limiter=rate_limiter)

    async def annotator(quote: Dict[str, Any]) -> Annotation:
        return await call(
            quote.get("quote", ""),
            quote.get("character", ""),
            quote.get("anime", ""),
        )

    return annotator


async def _annotate_safely(annotator: Annotator, quote: Dict[str, Any]) -> Annotation:
    # Custom annotators may raise; keep the per-item default contract regardless
    try:
        return await annotator(quote)
    except Exception as e:
        logger.error(f"✗ Failed to enhance quote {quote.get('objectID', '?')}: {e}")
        return Annotation.default(error=str(e))


async def process_quotes_in_batches(
    quotes: List[Dict[str, Any]],
    annotator: Annotator,
    batch_size: int = BATCH_SIZE,
    delay: float = DELAY_BETWEEN_BATCHES,
    sleep: Sleeper = asyncio.sleep,
    progress_every: int = PROGRESS_EVERY,
) -> List[Dict[str, Any]]:
    """
    Annotate all quotes batch by batch.

    Every quote in a batch is annotated concurrently and the batch completes
    once all of them settle. Results keep input order. The pipeline sleeps
    `delay` seconds between batches but not after the last one.

    Args:
        quotes: Quote dictionaries (not mutated)
        annotator: Async callable returning an Annotation for a quote
        batch_size: Quotes per batch
        delay: Pause between batches in seconds
        sleep: Async sleep function (injectable for tests)
        progress_every: Log progress every N processed quotes

    Returns:
        New list of enriched quote dictionaries
    """
    batches = create_batches(quotes, batch_size)
    enhanced_quotes: List[Dict[str, Any]] = []
    next_progress = progress_every

    for batch_number, batch in enumerate(batches, start=1):
        start = (batch_number - 1) * batch_size
        logger.info(
            f"Processing batch {batch_number}/{len(batches)} "
            f"(quotes {start + 1}-{start + len(batch)})"
        )

        annotations = await asyncio.gather(*(_annotate_safely(annotator, quote) for quote in batch))

        for offset, (quote, annotation) in enumerate(zip(batch, annotations)):
            enhanced = merge_annotation(quote, annotation)
            enhanced_quotes.append(enhanced)
            if annotation.defaulted:
                logger.warning(f"✗ Quote {start + offset + 1} fell back to default analysis")
            else:
                logger.debug(
                    f"✓ Enhanced quote {start + offset + 1}: "
                    f"\"{str(quote.get('quote', ''))[:50]}...\" ({enhanced['emotion']})"
                )

        while progress_every > 0 and len(enhanced_quotes) >= next_progress:
            logger.info(f"Processed {next_progress}/{len(quotes)} quotes...")
            next_progress += progress_every

        if batch_number < len(batches):
            logger.info(f"Waiting {delay}s before next batch...")
            await sleep(delay)

    return enhanced_quotes


async def enrich_quotes(
    quotes: List[Dict[str, Any]],
    annotator: Annotator,
    batch_size: int = BATCH_SIZE,
    delay: float = DELAY_BETWEEN_BATCHES,
    sleep: Sleeper = asyncio.sleep,
) -> List[Dict[str, Any]]:
    """
    Enrich a quote collection unless it already carries sentiment analysis.

    If the first quote already has a sentiment_score the input list is
    returned unchanged.
    """
    if has_sentiment_analysis(quotes):
        logger.info("Quotes already have sentiment analysis. Skipping...")
        return quotes
    return await process_quotes_in_batches(
        quotes, annotator, batch_size=batch_size, delay=delay, sleep=sleep
    )


def run_analysis(
    store: QuoteDatasetStore,
    api_key: Optional[str] = OPENAI_API_KEY,
    model: str = OPENAI_MODEL,
    batch_size: int = BATCH_SIZE,
    delay: float = DELAY_BETWEEN_BATCHES,
    timeout: float = ANALYSIS_TIMEOUT,
    rate_limit: int = ANALYSIS_RATE_LIMIT,
    annotator: Optional[Annotator] = None,
    sleep: Sleeper = asyncio.sleep,
) -> Dict[str, Any]:
    """
    Run full analysis against the dataset store.

    Args:
        store: Dataset store holding the canonical quotes file
        api_key: OpenAI API key (required unless `annotator` is given)
        model: Chat model name
        batch_size: Quotes per batch
        delay: Pause between batches in seconds
        timeout: Per-call timeout in seconds
        rate_limit: Max API calls per minute (0 disables the limiter)
        annotator: Override for the OpenAI annotator (tests, dry runs)
        sleep: Async sleep function used between batches

    Returns:
        Dictionary with skipped, quote_count, defaulted_count, statistics

    Raises:
        ConfigurationError: If no API key is configured
        DatasetStoreError: If the dataset cannot be read or written
    """
    if annotator is None and not api_key:
        raise ConfigurationError(
            "OPENAI_API_KEY environment variable is not set. "
            'Set it with: export OPENAI_API_KEY="your-api-key-here"'
        )

    with store.run_lock():
        logger.info(f"Reading quotes from: {store.data_path}")
        raw = store.read_raw()
        quotes = store.load(raw)
        metadata = store.load_metadata(raw)
        logger.info(f"Found {len(quotes)} quotes to analyze")

        if is_dataset_enriched(quotes, metadata):
            logger.info("Quotes already have sentiment analysis. Skipping...")
            return {"skipped": True, "quote_count": len(quotes), "defaulted_count": 0, "statistics": None}

        if annotator is None:
            limiter = AsyncTokenBucket(rate_limit, per=60.0) if rate_limit > 0 else None
            client = create_openai_client(api_key, timeout=timeout)
            annotator = make_openai_annotator(client, model=model, timeout=timeout, rate_limiter=limiter)

        enhanced_quotes = asyncio.run(
            enrich_quotes(quotes, annotator, batch_size=batch_size, delay=delay, sleep=sleep)
        )

        store.backup(raw)
        store.save(
            enhanced_quotes,
            metadata={
                **metadata,
                "enriched": True,
                "emotions": True,
                "mapping_version": MAPPING_VERSION,
                "model": model,
            },
        )

    logger.info(
        f"✅ Successfully enhanced {len(enhanced_quotes)} quotes with sentiment analysis and tags"
    )

    statistics = summarize(enhanced_quotes)
    log_summary(statistics)

    return {
        "skipped": False,
        "quote_count": len(enhanced_quotes),
        "defaulted_count": statistics["defaulted"],
        "statistics": statistics,
    }


def main() -> None:
    """Main entry point for quote analysis script with CLI."""
    parser = argparse.ArgumentParser(
        description="Enrich anime quotes with sentiment scores, tags and emotions via OpenAI"
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
        help="Path for the pre-enrichment backup (default: <data stem>.backup.json beside the data file)",
    )
    parser.add_argument(
        "--batch-size",
        type=int,
        default=BATCH_SIZE,
        help=f"Quotes annotated concurrently per batch (default: {BATCH_SIZE})",
    )
    parser.add_argument(
        "--delay",
        type=float,
        default=DELAY_BETWEEN_BATCHES,
        help=f"Seconds to wait between batches (default: {DELAY_BETWEEN_BATCHES})",
    )
    parser.add_argument(
        "--model",
        type=str,
        default=OPENAI_MODEL,
        help=f"OpenAI chat model (default: {OPENAI_MODEL})",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=ANALYSIS_TIMEOUT,
        help=f"Per-quote API timeout in seconds (default: {ANALYSIS_TIMEOUT})",
    )
    parser.add_argument(
        "--rate-limit",
        type=int,
        default=ANALYSIS_RATE_LIMIT,
        help="Max API calls per minute, 0 to disable (default: %(default)s)",
    )
    parser.add_argument(
        "--export-duckdb",
        action="store_true",
        help=f"Also load the enriched quotes into DuckDB ({DUCKDB_PATH})",
    )
    parser.add_argument("--verbose", action="store_true", help="Enable debug-level logging")

    args = parser.parse_args()

    log_level = logging.DEBUG if args.verbose else getattr(logging, LOG_LEVEL.upper(), logging.INFO)
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    store = QuoteDatasetStore(args.data_path, args.backup_path)

    try:
        result = run_analysis(
            store,
            api_key=OPENAI_API_KEY,
            model=args.model,
            batch_size=args.batch_size,
            delay=args.delay,
            timeout=args.timeout,
            rate_limit=args.rate_limit,
        )

        if args.export_duckdb and not result["skipped"]:
            export_quotes(store.load(), DUCKDB_PATH)

    except ConfigurationError as e:
        logger.error(f"Error: {e}")
        sys.exit(1)
    except QuoteSearchError as e:
        logger.error(f"✗ {e}")
        sys.exit(1)
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        sys.exit(1)
    except Exception as e:
        logger.error(f"Fatal error: {e}")
        sys.exit(1)

    sys.exit(0)


if __name__ == "__main__":
    main()
