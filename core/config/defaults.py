# ============================================================================
# CONFIGURATION DEFAULTS
# ============================================================================
# STATUS: Core - Default configuration values
# PURPOSE: Datastore, cache tier, filesystem and health check settings
# ============================================================================
"""
Configuration Defaults

Settings for every dependency the monitor probes. Values are read from
environment variables once and handed to the health checks explicitly;
checks never look at the environment themselves.

Design:
- Immutable dataclasses for defaults
- Environment variable overrides
- Type-safe access
"""

import os
from dataclasses import dataclass, field
from typing import Dict, Optional, Tuple
from enum import Enum


DEFAULT_MEMCACHE_PORT = 11211


class CacheFailurePolicy(str, Enum):
    """
    When unreachable memcache servers count as a failed cache check.

    ALL: fail only if every configured server is unreachable (default).
    ANY: report each unreachable server as a failure.
    """
    ALL = "all"
    ANY = "any"


def _env_bool(name: str, default: bool = False) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


def _env_list(name: str) -> Tuple[str, ...]:
    raw = os.getenv(name, "")
    return tuple(item.strip() for item in raw.split(",") if item.strip())


def parse_memcache_servers(raw: str) -> Dict[str, str]:
    """
    Parse a memcache server map.

    Format is ``host:port=bin`` entries separated by commas. An entry
    without ``=bin`` is assigned to the ``default`` bin.

    Example:
        >>> parse_memcache_servers("10.0.0.1:11211=default,10.0.0.2:11211=sessions")
        {'10.0.0.1:11211': 'default', '10.0.0.2:11211': 'sessions'}
    """
    servers: Dict[str, str] = {}
    for entry in raw.split(","):
        entry = entry.strip()
        if not entry:
            continue
        address, _, bin_name = entry.partition("=")
        servers[address.strip()] = bin_name.strip() or "default"
    return servers


@dataclass(frozen=True)
class DatabaseDefaults:
    """
    Primary and replica datastore settings.

    The probe reads one row that always exists (the site administrator
    account by default) from the probe table.
    """
    primary_url: str = "postgresql://postgres:@localhost:5432/postgres?sslmode=prefer"
    replica_url: Optional[str] = None

    probe_table: str = "users"
    probe_key_column: str = "uid"
    probe_key: int = 1

    timeout_seconds: float = 5.0

    @staticmethod
    def _build_url(host: str) -> str:
        port = os.getenv("POSTGRES_PORT", "5432")
        name = os.getenv("POSTGRES_DB", "postgres")
        user = os.getenv("POSTGRES_USER", "postgres")
        password = os.getenv("POSTGRES_PASSWORD", "")
        sslmode = os.getenv("POSTGRES_SSLMODE", "prefer")
        return f"postgresql://{user}:{password}@{host}:{port}/{name}?sslmode={sslmode}"

    @classmethod
    def from_env(cls) -> "DatabaseDefaults":
        """Create from environment variables."""
        primary_url = os.getenv("DATABASE_URL") or cls._build_url(
            os.getenv("POSTGRES_HOST", "localhost")
        )

        replica_url = os.getenv("REPLICA_DATABASE_URL")
        replica_host = os.getenv("POSTGRES_REPLICA_HOST")
        if not replica_url and replica_host:
            replica_url = cls._build_url(replica_host)

        return cls(
            primary_url=primary_url,
            replica_url=replica_url or None,
            probe_table=os.getenv("DB_PROBE_TABLE", "users"),
            probe_key_column=os.getenv("DB_PROBE_KEY_COLUMN", "uid"),
            probe_key=int(os.getenv("DB_PROBE_KEY", 1)),
            timeout_seconds=float(os.getenv("DB_TIMEOUT_SECONDS", 5.0)),
        )


@dataclass(frozen=True)
class CacheDefaults:
    """
    Memcache tier settings.

    ``servers`` maps ``host:port`` addresses to their logical bin name.
    ``extension`` is the operator's preferred client library.
    """
    backends: Tuple[str, ...] = ()
    servers: Dict[str, str] = field(default_factory=dict)
    extension: Optional[str] = None
    failure_policy: CacheFailurePolicy = CacheFailurePolicy.ALL
    timeout_seconds: float = 2.0

    @property
    def is_configured(self) -> bool:
        """True if a memcache backend and at least one server are configured."""
        has_backend = any("memcache" in backend.lower() for backend in self.backends)
        return has_backend and bool(self.servers)

    @classmethod
    def from_env(cls) -> "CacheDefaults":
        """Create from environment variables."""
        return cls(
            backends=_env_list("CACHE_BACKENDS"),
            servers=parse_memcache_servers(os.getenv("MEMCACHE_SERVERS", "")),
            extension=os.getenv("MEMCACHE_EXTENSION") or None,
            failure_policy=CacheFailurePolicy(
                os.getenv("MEMCACHE_FAILURE_POLICY", CacheFailurePolicy.ALL.value).lower()
            ),
            timeout_seconds=float(os.getenv("MEMCACHE_TIMEOUT_SECONDS", 2.0)),
        )


@dataclass(frozen=True)
class FilesDefaults:
    """Writable files directory settings."""
    directory_path: str = "./files"
    temp_prefix: str = "status_check_"

    @classmethod
    def from_env(cls) -> "FilesDefaults":
        """Create from environment variables."""
        return cls(
            directory_path=os.getenv("FILE_DIRECTORY_PATH", "./files"),
        )


@dataclass(frozen=True)
class HealthDefaults:
    """
    Execution settings for the check executor.

    check_timeout_seconds applies to checks without their own timeout.
    overall_timeout_seconds bounds a whole request.
    """
    check_timeout_seconds: float = 10.0
    overall_timeout_seconds: float = 30.0
    parallel_checks: bool = False

    @classmethod
    def from_env(cls) -> "HealthDefaults":
        """Create from environment variables."""
        return cls(
            check_timeout_seconds=float(os.getenv("HEALTH_CHECK_TIMEOUT", 10.0)),
            overall_timeout_seconds=float(os.getenv("HEALTH_OVERALL_TIMEOUT", 30.0)),
            parallel_checks=_env_bool("HEALTH_PARALLEL_CHECKS", False),
        )


# ============================================================================
# GLOBAL SETTINGS INSTANCE
# ============================================================================

@dataclass(frozen=True)
class Settings:
    """Container for all configuration sections."""
    database: DatabaseDefaults = field(default_factory=DatabaseDefaults)
    cache: CacheDefaults = field(default_factory=CacheDefaults)
    files: FilesDefaults = field(default_factory=FilesDefaults)
    health: HealthDefaults = field(default_factory=HealthDefaults)

    @classmethod
    def from_env(cls) -> "Settings":
        """Create all settings from environment variables."""
        return cls(
            database=DatabaseDefaults.from_env(),
            cache=CacheDefaults.from_env(),
            files=FilesDefaults.from_env(),
            health=HealthDefaults.from_env(),
        )


_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get global settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings.from_env()
    return _settings


def reset_settings() -> None:
    """Reset settings (for testing)."""
    global _settings
    _settings = None


# ============================================================================
# EXPORTS
# ============================================================================

__all__ = [
    "DEFAULT_MEMCACHE_PORT",
    "CacheFailurePolicy",
    "DatabaseDefaults",
    "CacheDefaults",
    "FilesDefaults",
    "HealthDefaults",
    "Settings",
    "get_settings",
    "reset_settings",
    "parse_memcache_servers",
]
