# ============================================================================
# MEMCACHE PROBE INFRASTRUCTURE
# ============================================================================
# STATUS: Infrastructure - Memcache client selection and probing
# PURPOSE: Reachability probes for memcached servers
# ============================================================================
"""
Memcache Probe Infrastructure

Two client libraries can talk to the cache tier:
- pymemcache: pure Python, probes with a ``version`` round trip
- pylibmc: libmemcached binding, probes with a ``stats`` round trip

Selection order:
1. Operator preference (MEMCACHE_EXTENSION), if the library is installed
2. First installed library in DEFAULT_CLIENT_PRIORITY

Usage:
    client = select_client(preferred="pylibmc")
    if client is not None:
        probe = get_probe(client, timeout_seconds=2.0)
        reachable = probe.probe("10.0.0.1", 11211)
"""

import importlib.util
import logging
from abc import ABC, abstractmethod
from enum import Enum
from typing import Dict, Optional, Sequence, Tuple, Type

from core.config.defaults import DEFAULT_MEMCACHE_PORT

logger = logging.getLogger(__name__)


class MemcacheClient(str, Enum):
    """Supported memcache client libraries (value is the import name)."""
    PYMEMCACHE = "pymemcache"
    PYLIBMC = "pylibmc"

    @property
    def label(self) -> str:
        """Name used in per-server diagnostics."""
        return {
            MemcacheClient.PYMEMCACHE: "Memcache",
            MemcacheClient.PYLIBMC: "Memcached",
        }[self]


DEFAULT_CLIENT_PRIORITY: Tuple[MemcacheClient, ...] = (
    MemcacheClient.PYMEMCACHE,
    MemcacheClient.PYLIBMC,
)

# Legacy extension names accepted for MEMCACHE_EXTENSION
_CLIENT_ALIASES: Dict[str, MemcacheClient] = {
    "pymemcache": MemcacheClient.PYMEMCACHE,
    "memcache": MemcacheClient.PYMEMCACHE,
    "pylibmc": MemcacheClient.PYLIBMC,
    "memcached": MemcacheClient.PYLIBMC,
}


def parse_client(name: Optional[str]) -> Optional[MemcacheClient]:
    """Map an operator-supplied client name to a MemcacheClient."""
    if not name:
        return None
    return _CLIENT_ALIASES.get(name.strip().lower())


def is_client_available(client: MemcacheClient) -> bool:
    """True if the client library can be imported."""
    return importlib.util.find_spec(client.value) is not None


def select_client(
    preferred: Optional[str] = None,
    priority: Sequence[MemcacheClient] = DEFAULT_CLIENT_PRIORITY,
) -> Optional[MemcacheClient]:
    """
    Pick the client library used to probe the cache tier.

    Args:
        preferred: Operator preference (library or legacy extension name)
        priority: Fallback order when the preference is unset or missing

    Returns:
        Selected client, or None if no supported library is installed
    """
    choice = parse_client(preferred)
    if preferred and choice is None:
        logger.warning(f"Unknown memcache extension '{preferred}', using fallback order")

    if choice is not None and is_client_available(choice):
        return choice

    for client in priority:
        if is_client_available(client):
            return client

    return None


def split_address(address: str) -> Tuple[str, int]:
    """Split ``host:port`` into its parts; port defaults to 11211."""
    host, sep, port = address.rpartition(":")
    if not sep or not port.isdigit():
        return address, DEFAULT_MEMCACHE_PORT
    return host, int(port)


# ============================================================================
# PROBES
# ============================================================================

class MemcacheProbe(ABC):
    """Reachability probe for one memcached server."""

    client: MemcacheClient

    def __init__(self, timeout_seconds: float = 2.0):
        self.timeout_seconds = timeout_seconds

    @abstractmethod
    def probe(self, host: str, port: int) -> bool:
        """Return True if the server answered."""


class PymemcacheProbe(MemcacheProbe):
    client = MemcacheClient.PYMEMCACHE

    def probe(self, host: str, port: int) -> bool:
        from pymemcache.client.base import Client
        from pymemcache.exceptions import MemcacheError

        conn = Client(
            (host, port),
            connect_timeout=self.timeout_seconds,
            timeout=self.timeout_seconds,
        )
        try:
            return bool(conn.version())
        except (MemcacheError, OSError) as e:
            logger.debug(f"pymemcache probe of {host}:{port} failed: {e}")
            return False
        finally:
            conn.close()


class PylibmcProbe(MemcacheProbe):
    client = MemcacheClient.PYLIBMC

    def probe(self, host: str, port: int) -> bool:
        import pylibmc

        conn = pylibmc.Client(
            [f"{host}:{port}"],
            behaviors={"connect_timeout": int(self.timeout_seconds * 1000)},
        )
        try:
            # One (server, stats) pair per server that answered
            return bool(conn.get_stats())
        except pylibmc.Error as e:
            logger.debug(f"pylibmc probe of {host}:{port} failed: {e}")
            return False
        finally:
            conn.disconnect_all()


_PROBES: Dict[MemcacheClient, Type[MemcacheProbe]] = {
    MemcacheClient.PYMEMCACHE: PymemcacheProbe,
    MemcacheClient.PYLIBMC: PylibmcProbe,
}


def get_probe(client: MemcacheClient, timeout_seconds: float = 2.0) -> MemcacheProbe:
    """Get the probe implementation for a client library."""
    return _PROBES[client](timeout_seconds=timeout_seconds)


# ============================================================================
# EXPORTS
# ============================================================================

__all__ = [
    "MemcacheClient",
    "DEFAULT_CLIENT_PRIORITY",
    "MemcacheProbe",
    "PymemcacheProbe",
    "PylibmcProbe",
    "parse_client",
    "is_client_available",
    "select_client",
    "split_address",
    "get_probe",
]
