"""
Load enriched quotes into DuckDB for ad-hoc analysis.

The raw.quotes table is idempotent (drop/recreate on each run) and includes
metadata columns (loaded_at, source).

Usage:
    python -m anime_quotes.ingestion.load_to_duckdb
    python -m anime_quotes.ingestion.load_to_duckdb --data-path data/quotes.json
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List

import pandas as pd

from anime_quotes.ingestion.dataset_store import QuoteDatasetStore
from anime_quotes.shared.config import DUCKDB_PATH, LOG_LEVEL, QUOTES_DATA_PATH
from anime_quotes.shared.database import get_duckdb_connection
from anime_quotes.shared.exceptions import QuoteSearchError

logger = logging.getLogger(__name__)

CREATE_QUOTES_TABLE = """
CREATE TABLE IF NOT EXISTS raw.quotes (
    object_id VARCHAR PRIMARY KEY,
    quote TEXT NOT NULL,
    "character" VARCHAR,
    anime VARCHAR,
    sentiment_score INTEGER,
    sentiment_label VARCHAR,
    tags VARCHAR[],
    emotion VARCHAR,
    annotation_status VARCHAR,
    loaded_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
    source VARCHAR DEFAULT 'quotes_json'
);
"""

QUOTE_COLUMNS = [
    "object_id",
    "quote",
    "character",
    "anime",
    "sentiment_score",
    "sentiment_label",
    "tags",
    "emotion",
    "annotation_status",
]


def create_quotes_table(conn) -> None:
    """Drop and recreate raw.quotes."""
    logger.info("Creating raw.quotes table...")
    conn.execute("DROP TABLE IF EXISTS raw.quotes")
    conn.execute(CREATE_QUOTES_TABLE)


def quotes_to_dataframe(quotes: List[Dict[str, Any]]) -> pd.DataFrame:
    """
    Flatten quote records into the raw.quotes column layout.

    Records without an objectID are skipped with a warning.
    """
    rows = []
    skipped = 0
    for quote in quotes:
        object_id = quote.get("objectID")
        if object_id is None:
            skipped += 1
            continue
        rows.append(
            {
                "object_id": str(object_id),
                "quote": quote.get("quote", ""),
                "character": quote.get("character"),
                "anime": quote.get("anime"),
                "sentiment_score": quote.get("sentiment_score"),
                "sentiment_label": quote.get("sentiment_label"),
                "tags": list(quote.get("tags") or []),
                "emotion": quote.get("emotion"),
                "annotation_status": quote.get("annotation_status"),
            }
        )

    if skipped:
        logger.warning(f"Skipped {skipped} quotes without objectID")

    df = pd.DataFrame(rows, columns=QUOTE_COLUMNS)
    df["sentiment_score"] = df["sentiment_score"].astype("Int64")
    return df


def load_quotes_to_duckdb(quotes: List[Dict[str, Any]], conn) -> int:
    """
    Load quote records into raw.quotes.

    Args:
        quotes: Quote dictionaries (enriched or not)
        conn: Open DuckDB connection

    Returns:
        Number of rows loaded
    """
    create_quotes_table(conn)
    quotes_df = quotes_to_dataframe(quotes)
    if quotes_df.empty:
        logger.warning("No quotes to load into DuckDB")
        return 0

    columns = ", ".join(f'"{column}"' for column in QUOTE_COLUMNS)
    conn.register("quotes_df", quotes_df)
    try:
        conn.execute(
            f"INSERT INTO raw.quotes ({columns}) SELECT {columns} FROM quotes_df"
        )
    finally:
        conn.unregister("quotes_df")

    logger.info(f"✓ Loaded {len(quotes_df)} quotes into raw.quotes")
    return len(quotes_df)


def export_quotes(quotes: List[Dict[str, Any]], db_path: str = DUCKDB_PATH) -> int:
    """Open the DuckDB database at db_path and load the quotes."""
    conn = get_duckdb_connection(db_path)
    try:
        return load_quotes_to_duckdb(quotes, conn)
    except Exception as e:
        logger.error(f"Failed to load quotes into DuckDB: {e}")
        raise
    finally:
        conn.close()


def main() -> None:
    """Main entry point for the DuckDB export script."""
    parser = argparse.ArgumentParser(description="Load quotes JSON into DuckDB raw.quotes")
    parser.add_argument(
        "--data-path",
        type=Path,
        default=Path(QUOTES_DATA_PATH),
        help=f"Path to quotes JSON file (default: {QUOTES_DATA_PATH})",
    )
    parser.add_argument(
        "--db-path",
        type=Path,
        default=Path(DUCKDB_PATH),
        help=f"Path to DuckDB database file (default: {DUCKDB_PATH})",
    )
    args = parser.parse_args()

    logging.basicConfig(
        level=getattr(logging, LOG_LEVEL.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    try:
        quotes = QuoteDatasetStore(args.data_path).load()
        export_quotes(quotes, str(args.db_path))
    except QuoteSearchError as e:
        logger.error(f"✗ {e}")
        sys.exit(1)
    except Exception as e:
        logger.error(f"Fatal error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
