"""Unit tests for loading quotes into DuckDB."""
from unittest.mock import Mock, patch

import duckdb
import pytest

from anime_quotes.ingestion.load_to_duckdb import (
    QUOTE_COLUMNS,
    create_quotes_table,
    export_quotes,
    load_quotes_to_duckdb,
    quotes_to_dataframe,
)


@pytest.fixture
def memory_conn():
    conn = duckdb.connect(":memory:")
    conn.execute("CREATE SCHEMA IF NOT EXISTS raw")
    yield conn
    conn.close()


class TestQuotesToDataFrame:
    """Tests for quotes_to_dataframe function."""

    def test_columns_and_rows(self, enriched_quotes):
        df = quotes_to_dataframe(enriched_quotes)

        assert list(df.columns) == QUOTE_COLUMNS
        assert len(df) == 4
        assert df.iloc[0]["object_id"] == "e-1"
        assert df.iloc[1]["tags"] == ["Courage", "friendship", "belief"]

    def test_skips_quotes_without_object_id(self, enriched_quotes):
        del enriched_quotes[0]["objectID"]

        df = quotes_to_dataframe(enriched_quotes)

        assert len(df) == 3

    def test_unenriched_quotes_have_null_scores(self, sample_quotes):
        df = quotes_to_dataframe(sample_quotes)

        assert df["sentiment_score"].isna().all()
        assert df.iloc[0]["tags"] == []


class TestLoadQuotesToDuckDB:
    """Tests for load_quotes_to_duckdb function."""

    def test_load_enriched_quotes(self, memory_conn, enriched_quotes):
        count = load_quotes_to_duckdb(enriched_quotes, memory_conn)

        assert count == 4
        rows = memory_conn.execute(
            'SELECT object_id, "character", sentiment_score, tags, emotion, source '
            "FROM raw.quotes ORDER BY object_id"
        ).fetchall()
        assert rows[0] == (
            "e-1",
            "Edward Elric",
            6,
            ["pain", "growth", "sacrifice"],
            "Melancholic",
            "quotes_json",
        )

    def test_reload_is_idempotent(self, memory_conn, enriched_quotes):
        load_quotes_to_duckdb(enriched_quotes, memory_conn)
        load_quotes_to_duckdb(enriched_quotes, memory_conn)

        assert memory_conn.execute("SELECT COUNT(*) FROM raw.quotes").fetchone()[0] == 4

    def test_empty_collection(self, memory_conn):
        assert load_quotes_to_duckdb([], memory_conn) == 0

    def test_create_quotes_table_drops_first(self):
        conn = Mock()

        create_quotes_table(conn)

        statements = [str(call) for call in conn.execute.call_args_list]
        assert "DROP TABLE IF EXISTS raw.quotes" in statements[0]
        assert "CREATE TABLE IF NOT EXISTS raw.quotes" in statements[1]


class TestExportQuotes:
    """Tests for export_quotes function."""

    @patch("anime_quotes.ingestion.load_to_duckdb.get_duckdb_connection")
    def test_connection_closed_on_error(self, mock_get_conn):
        mock_connection = Mock()
        mock_connection.execute.side_effect = duckdb.Error("boom")
        mock_get_conn.return_value = mock_connection

        with pytest.raises(duckdb.Error):
            export_quotes([{"objectID": "1", "quote": "A"}], "test.duckdb")

        mock_connection.close.assert_called_once()

    def test_export_to_file(self, tmp_path, enriched_quotes):
        db_path = tmp_path / "quotes.duckdb"

        assert export_quotes(enriched_quotes, str(db_path)) == 4

        conn = duckdb.connect(str(db_path), read_only=True)
        try:
            assert conn.execute("SELECT COUNT(*) FROM raw.quotes").fetchone()[0] == 4
        finally:
            conn.close()
