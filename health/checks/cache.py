# ============================================================================
# CACHE HEALTH CHECK
# ============================================================================
# STATUS: Health - Memcache tier check
# PURPOSE: Verify the configured memcached servers answer
# ============================================================================
"""
Cache Health Check

MemcacheCheck (memcache) probes every configured memcached server.

Gates, in order:
1. No memcache backend or no server list configured -> no result
2. No supported client library installed -> failure, no probes
3. Probe every ``address -> bin`` entry concurrently

Failure policy (MEMCACHE_FAILURE_POLICY):
- all (default): the tier fails only when every server is unreachable.
  One reachable node keeps the tier usable, so partial outages pass and
  are only logged.
- any: every unreachable server is reported.
"""

import asyncio
import logging
from typing import Callable, List, Optional

from core.config import CacheDefaults, CacheFailurePolicy, Settings
from health.core import (
    CheckIdentifier,
    CheckResult,
    HealthCheckPlugin,
)
from health.registry import register_check
from infrastructure.memcache import (
    MemcacheClient,
    MemcacheProbe,
    get_probe,
    select_client,
    split_address,
)

logger = logging.getLogger(__name__)

CLIENT_UNAVAILABLE_MESSAGE = "Memcache and Memcached PECL extensions are not available."


def server_unavailable_message(client: MemcacheClient, bin_name: str, address: str) -> str:
    return f"{client.label} bin <em>{bin_name}</em> at address {address} is not available."


@register_check(priority=30)
class MemcacheCheck(HealthCheckPlugin):
    """
    Memcache tier health check.

    Args:
        cache: Cache settings (backends, servers, preferred client, policy)
        client_selector: Picks the client library; defaults to select_client
        probe_factory: Builds a probe for a client; defaults to get_probe
    """

    name = CheckIdentifier.MEMCACHE
    timeout_message = "Memcache servers did not respond in time."

    def __init__(
        self,
        cache: CacheDefaults,
        client_selector: Callable[[Optional[str]], Optional[MemcacheClient]] = select_client,
        probe_factory: Callable[[MemcacheClient, float], MemcacheProbe] = get_probe,
    ):
        self.cache = cache
        self.client_selector = client_selector
        self.probe_factory = probe_factory

    @classmethod
    def from_settings(cls, settings: Settings) -> "MemcacheCheck":
        return cls(cache=settings.cache)

    def is_applicable(self) -> bool:
        return self.cache.is_configured

    async def check(self) -> Optional[CheckResult]:
        if not self.is_applicable():
            return None

        client = self.client_selector(self.cache.extension)
        if client is None:
            return CheckResult.failure(CLIENT_UNAVAILABLE_MESSAGE)

        probe = self.probe_factory(client, self.cache.timeout_seconds)
        errors = await self._probe_servers(client, probe)
        total = len(self.cache.servers)

        if not errors:
            return CheckResult.ok(client=client.value, servers=total)

        if self.cache.failure_policy == CacheFailurePolicy.ANY or len(errors) == total:
            return CheckResult.failure(*errors, client=client.value)

        logger.warning(
            f"Memcache tier degraded: {len(errors)}/{total} servers unreachable "
            f"({'; '.join(errors)})"
        )
        return CheckResult.ok(
            client=client.value,
            servers=total,
            unreachable=len(errors),
        )

    async def _probe_servers(
        self,
        client: MemcacheClient,
        probe: MemcacheProbe,
    ) -> List[str]:
        """Probe all servers; return one diagnostic per unreachable server."""
        addresses = list(self.cache.servers)
        results = await asyncio.gather(
            *(
                asyncio.to_thread(probe.probe, *split_address(address))
                for address in addresses
            ),
            return_exceptions=True,
        )

        errors: List[str] = []
        for address, reachable in zip(addresses, results):
            if isinstance(reachable, Exception):
                logger.warning(f"Memcache probe of {address} raised: {reachable}")
                reachable = False
            if not reachable:
                errors.append(
                    server_unavailable_message(client, self.cache.servers[address], address)
                )
        return errors


# ============================================================================
# EXPORTS
# ============================================================================

__all__ = [
    "MemcacheCheck",
    "CLIENT_UNAVAILABLE_MESSAGE",
    "server_unavailable_message",
]
