# ============================================================================
# DATABASE HEALTH CHECKS
# ============================================================================
# STATUS: Health - Primary and replica datastore checks
# PURPOSE: Prove each datastore answers a live read
# ============================================================================
"""
Database Health Checks

PostgreSQL checks:
- PrimaryDatabaseCheck (db): read the guaranteed row from the primary
- ReplicaDatabaseCheck (slavedb): same read against the read replica

The probe row (``users.uid = 1`` by default) always exists on a working
site, so "no row" is treated the same as "no answer". Nothing is cached;
every request makes a fresh round trip.
"""

import asyncio
import logging
from typing import Any, Dict, Optional, Protocol

import psycopg

from core.config import Settings
from health.core import (
    CheckIdentifier,
    CheckResult,
    HealthCheckPlugin,
)
from health.registry import register_check
from infrastructure.postgresql import (
    PostgreSQLRepository,
    Query,
    build_probe_query,
)

logger = logging.getLogger(__name__)


class QueryRepository(Protocol):
    def fetch_one(self, query: Query, params: tuple = None) -> Optional[Dict[str, Any]]:
        ...


class DatabaseCheck(HealthCheckPlugin):
    """
    Shared probe logic for primary and replica checks.

    A check without a repository is not configured and yields no result.
    """

    def __init__(
        self,
        repository: Optional[QueryRepository],
        query: Query,
        probe_key: Any = 1,
        timeout_seconds: Optional[float] = None,
    ):
        self.repository = repository
        self.query = query
        self.probe_key = probe_key
        if timeout_seconds is not None:
            self.timeout_seconds = timeout_seconds

    def is_applicable(self) -> bool:
        return self.repository is not None

    async def check(self) -> Optional[CheckResult]:
        if not self.is_applicable():
            return None

        try:
            row = await asyncio.to_thread(
                self.repository.fetch_one, self.query, (self.probe_key,)
            )
        except psycopg.Error as e:
            logger.warning(f"{self.identifier} query failed: {e}")
            return CheckResult.failure(self.timeout_message, error=str(e))

        if row is None:
            return CheckResult.failure(self.timeout_message, error="probe row missing")

        return CheckResult.ok()


@register_check(priority=10)
class PrimaryDatabaseCheck(DatabaseCheck):
    """Primary datastore connectivity."""

    name = CheckIdentifier.DB
    timeout_message = "Master database not responding."

    @classmethod
    def from_settings(cls, settings: Settings) -> "PrimaryDatabaseCheck":
        db = settings.database
        return cls(
            repository=PostgreSQLRepository(db.primary_url, db.timeout_seconds),
            query=build_probe_query(db.probe_table, db.probe_key_column),
            probe_key=db.probe_key,
            timeout_seconds=db.timeout_seconds,
        )


@register_check(priority=20)
class ReplicaDatabaseCheck(DatabaseCheck):
    """
    Read replica connectivity.

    Yields no result when no replica is configured.
    """

    name = CheckIdentifier.SLAVEDB
    timeout_message = "Slave database not responding."

    @classmethod
    def from_settings(cls, settings: Settings) -> "ReplicaDatabaseCheck":
        db = settings.database
        repository = None
        if db.replica_url:
            repository = PostgreSQLRepository(db.replica_url, db.timeout_seconds)
        return cls(
            repository=repository,
            query=build_probe_query(db.probe_table, db.probe_key_column),
            probe_key=db.probe_key,
            timeout_seconds=db.timeout_seconds,
        )


# ============================================================================
# EXPORTS
# ============================================================================

__all__ = [
    "DatabaseCheck",
    "PrimaryDatabaseCheck",
    "ReplicaDatabaseCheck",
]
