"""Database connection utilities for DuckDB."""
from typing import Optional

import duckdb

from anime_quotes.shared.config import DUCKDB_PATH


def get_duckdb_connection(db_path: Optional[str] = None, read_only: bool = False):
    """
    Get DuckDB connection with schema creation.

    Args:
        db_path: Database file path (default: DUCKDB_PATH from config)
        read_only: If True, open database in read-only mode (default: False)

    Returns:
        duckdb.DuckDBPyConnection: Active DuckDB connection with schemas initialized
    """
    conn = duckdb.connect(str(db_path or DUCKDB_PATH), read_only=read_only)

    if not read_only:
        # Create schemas if they don't exist (only in write mode)
        conn.execute("CREATE SCHEMA IF NOT EXISTS raw")
        conn.execute("CREATE SCHEMA IF NOT EXISTS marts")

    return conn
