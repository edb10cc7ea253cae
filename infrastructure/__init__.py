# ============================================================================
# INFRASTRUCTURE MODULE
# ============================================================================
# STATUS: Infrastructure - Dependency access for health probes
# PURPOSE: PostgreSQL queries, memcache probes, files directory access
# ============================================================================
"""
Infrastructure module for Site Monitor.

Provides the capabilities the health checks consume:
- PostgreSQLRepository: time-bounded queries against primary/replica
- select_client / get_probe: memcache client selection and server probes
- FileStorage: create and delete files in the files directory

Usage:
    from infrastructure import PostgreSQLRepository, FileStorage

    repo = PostgreSQLRepository("postgresql://...", timeout_seconds=5.0)
    row = repo.fetch_one("SELECT 1 AS ok")
"""

from infrastructure.postgresql import (
    PostgreSQLRepository,
    build_probe_query,
)
from infrastructure.memcache import (
    MemcacheClient,
    MemcacheProbe,
    select_client,
    split_address,
    get_probe,
)
from infrastructure.storage import FileStorage

__all__ = [
    "PostgreSQLRepository",
    "build_probe_query",
    "MemcacheClient",
    "MemcacheProbe",
    "select_client",
    "split_address",
    "get_probe",
    "FileStorage",
]
