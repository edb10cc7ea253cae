# ============================================================================
# POSTGRESQL CONNECTION INFRASTRUCTURE
# ============================================================================
# STATUS: Infrastructure - PostgreSQL query capability
# PURPOSE: Short-lived, time-bounded reads for datastore health probes
# ============================================================================
"""
PostgreSQL Connection Infrastructure

Provides the query capability used by the database health checks:
- One connection per probe (no pooling, always a live round trip)
- Connect timeout and statement timeout bound every query
- Context managers for safe resource management

Usage:
    repo = PostgreSQLRepository(conninfo, timeout_seconds=5.0)
    row = repo.fetch_one("SELECT 1 AS ok")
"""

import logging
from typing import Any, Dict, Optional, Union
from contextlib import contextmanager

import psycopg
from psycopg import sql
from psycopg.rows import dict_row

logger = logging.getLogger(__name__)

Query = Union[str, sql.Composable]


def mask_conninfo(conninfo: str) -> str:
    """Strip credentials from a connection string for logging."""
    if "@" in conninfo:
        return conninfo.split("@")[-1]
    if "password=" in conninfo:
        return conninfo.split("password=")[0] + "password=***"
    return conninfo


class PostgreSQLRepository:
    """
    Read-only query access to one PostgreSQL server.

    Usage:
        repo = PostgreSQLRepository("postgresql://...")
        with repo.get_cursor() as cur:
            cur.execute("SELECT 1")
    """

    def __init__(self, conninfo: str, timeout_seconds: float = 5.0):
        """
        Initialize PostgreSQL repository.

        Args:
            conninfo: libpq connection string or URL
            timeout_seconds: Connect and statement timeout
        """
        self.conninfo = conninfo
        self.timeout_seconds = timeout_seconds

    @property
    def safe_conninfo(self) -> str:
        return mask_conninfo(self.conninfo)

    @contextmanager
    def get_connection(self):
        """
        Context manager for PostgreSQL connections.

        Yields:
            psycopg connection with dict_row factory
        """
        conn = None
        try:
            logger.debug(f"Connecting to PostgreSQL: {self.safe_conninfo}")
            conn = psycopg.connect(
                self.conninfo,
                row_factory=dict_row,
                connect_timeout=max(1, int(self.timeout_seconds)),
                options=f"-c statement_timeout={int(self.timeout_seconds * 1000)}",
            )
            yield conn

        except psycopg.Error as e:
            logger.error(f"PostgreSQL connection error ({self.safe_conninfo}): {e}")
            raise

        finally:
            if conn:
                conn.close()

    @contextmanager
    def get_cursor(self):
        """Context manager for a read-only cursor on a fresh connection."""
        with self.get_connection() as conn:
            conn.read_only = True
            with conn.cursor() as cursor:
                yield cursor
            conn.rollback()

    def fetch_one(self, query: Query, params: tuple = None) -> Optional[Dict[str, Any]]:
        """Execute query and fetch one result."""
        with self.get_cursor() as cur:
            cur.execute(query, params)
            return cur.fetchone()


def build_probe_query(table: str, key_column: str) -> sql.Composed:
    """
    Build the lookup used to prove a datastore answers.

    Identifiers are quoted; the key value is passed as a parameter.
    """
    return sql.SQL("SELECT {column} FROM {table} WHERE {column} = %s").format(
        column=sql.Identifier(key_column),
        table=sql.Identifier(table),
    )


# ============================================================================
# EXPORTS
# ============================================================================

__all__ = [
    "PostgreSQLRepository",
    "build_probe_query",
    "mask_conninfo",
]
