# ============================================================================
# POSTGRESQL INFRASTRUCTURE TESTS
# ============================================================================
# STATUS: Tests - Query capability used by the database checks
# PURPOSE: Verify connection options, read-only cursors and probe query shape
# ============================================================================
"""
PostgreSQL Infrastructure Tests

psycopg.connect is patched; no server is needed.

Run with:
    pytest tests/test_postgresql.py -v
"""

import pytest
from unittest.mock import MagicMock, patch

import psycopg
from psycopg import sql
from psycopg.rows import dict_row

from infrastructure.postgresql import (
    PostgreSQLRepository,
    build_probe_query,
    mask_conninfo,
)


@pytest.fixture
def connection():
    """Patched psycopg.connect returning a mock connection and cursor."""
    conn = MagicMock()
    cursor = MagicMock()
    conn.cursor.return_value.__enter__.return_value = cursor
    with patch("infrastructure.postgresql.psycopg.connect", return_value=conn) as connect:
        yield connect, conn, cursor


# ============================================================================
# REPOSITORY
# ============================================================================

class TestPostgreSQLRepository:

    def test_fetch_one_returns_row(self, connection):
        connect, conn, cursor = connection
        cursor.fetchone.return_value = {"uid": 1}

        repo = PostgreSQLRepository("postgresql://monitor:secret@db/site")
        row = repo.fetch_one("SELECT uid FROM users WHERE uid = %s", (1,))

        assert row == {"uid": 1}
        cursor.execute.assert_called_once_with(
            "SELECT uid FROM users WHERE uid = %s", (1,),
        )

    def test_connection_bounded_by_timeouts(self, connection):
        connect, conn, cursor = connection

        PostgreSQLRepository("postgresql://db/site", timeout_seconds=2.5).fetch_one("SELECT 1")

        connect.assert_called_once_with(
            "postgresql://db/site",
            row_factory=dict_row,
            connect_timeout=2,
            options="-c statement_timeout=2500",
        )

    def test_connect_timeout_at_least_one_second(self, connection):
        connect, conn, cursor = connection

        PostgreSQLRepository("postgresql://db/site", timeout_seconds=0.5).fetch_one("SELECT 1")

        assert connect.call_args.kwargs["connect_timeout"] == 1
        assert connect.call_args.kwargs["options"] == "-c statement_timeout=500"

    def test_read_only_and_rolled_back(self, connection):
        connect, conn, cursor = connection

        PostgreSQLRepository("postgresql://db/site").fetch_one("SELECT 1")

        assert conn.read_only is True
        conn.rollback.assert_called_once()
        conn.close.assert_called_once()

    def test_connection_closed_when_query_fails(self, connection):
        connect, conn, cursor = connection
        cursor.execute.side_effect = psycopg.OperationalError("server closed the connection")

        with pytest.raises(psycopg.OperationalError):
            PostgreSQLRepository("postgresql://db/site").fetch_one("SELECT 1")

        conn.rollback.assert_not_called()
        conn.close.assert_called_once()

    def test_connect_failure_propagates(self):
        with patch(
            "infrastructure.postgresql.psycopg.connect",
            side_effect=psycopg.OperationalError("connection refused"),
        ):
            with pytest.raises(psycopg.OperationalError):
                PostgreSQLRepository("postgresql://db/site").fetch_one("SELECT 1")


# ============================================================================
# QUERY HELPERS
# ============================================================================

class TestBuildProbeQuery:

    def test_identifiers_quoted(self):
        query = build_probe_query("users", "uid")
        identifiers = [part for part in query.seq if isinstance(part, sql.Identifier)]
        assert identifiers == [
            sql.Identifier("uid"),
            sql.Identifier("users"),
            sql.Identifier("uid"),
        ]

    def test_key_is_a_parameter(self):
        query = build_probe_query("users", "uid")
        literal = [part for part in query.seq if isinstance(part, sql.SQL)]
        assert literal[-1] == sql.SQL(" = %s")

    def test_hostile_table_name_stays_an_identifier(self):
        query = build_probe_query("users; DROP TABLE users", "uid")
        assert sql.Identifier("users; DROP TABLE users") in query.seq
        assert not any(
            isinstance(part, sql.SQL) and "DROP" in repr(part)
            for part in query.seq
        )


class TestMaskConninfo:

    @pytest.mark.parametrize("conninfo,expected", [
        ("postgresql://monitor:secret@db:5432/site", "db:5432/site"),
        ("host=db dbname=site password=secret", "host=db dbname=site password=***"),
        ("host=db dbname=site", "host=db dbname=site"),
    ])
    def test_mask(self, conninfo, expected):
        assert mask_conninfo(conninfo) == expected
        assert "secret" not in mask_conninfo(conninfo)
