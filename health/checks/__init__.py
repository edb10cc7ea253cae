# ============================================================================
# HEALTH CHECK PLUGINS
# ============================================================================
# STATUS: Health - Health check implementations
# PURPOSE: Checks for the site's operational dependencies
# ============================================================================
"""
Health Check Plugins

Concrete health checks, in canonical execution order:

- db (10): Primary PostgreSQL database
- slavedb (20): Read replica
- memcache (30): Memcached tier
- files (40): Writable files directory

Import this module to register all checks:
    import health.checks
"""

# Import all check modules to trigger registration
from health.checks.database import PrimaryDatabaseCheck, ReplicaDatabaseCheck
from health.checks.cache import MemcacheCheck
from health.checks.filesystem import FilesCheck

__all__ = [
    "PrimaryDatabaseCheck",
    "ReplicaDatabaseCheck",
    "MemcacheCheck",
    "FilesCheck",
]
