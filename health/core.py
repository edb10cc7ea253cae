# ============================================================================
# HEALTH CHECK CORE TYPES
# ============================================================================
# STATUS: Health - Base classes for health checks
# PURPOSE: Check identifiers, result types and the plugin interface
# ============================================================================
"""
Health Check Core Types

Defines the plugin interface and result types for health checks.

Verdict is all-or-nothing:
- A check passes, fails with a diagnostic message, or yields no result
  (not configured / not applicable).
- The request is healthy only if no selected check failed.

Checks (canonical execution order):
1. db: Primary database
2. slavedb: Replica database
3. memcache: Cache tier
4. files: Writable files directory
"""

from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple
from dataclasses import dataclass, field
from datetime import datetime, timezone


class CheckIdentifier(str, Enum):
    """Check names, used both as registry keys and as selection tokens."""
    DB = "db"
    SLAVEDB = "slavedb"
    MEMCACHE = "memcache"
    FILES = "files"


@dataclass(frozen=True)
class CheckResult:
    """
    Outcome of a single health check.

    A failure carries one diagnostic per problem found; most checks report
    exactly one, the cache check reports one per unreachable server.
    """
    passed: bool
    messages: Tuple[str, ...] = ()
    details: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def ok(cls, **details) -> "CheckResult":
        """Create passing result."""
        return cls(passed=True, details=details)

    @classmethod
    def failure(cls, message: str, *more: str, **details) -> "CheckResult":
        """Create failing result with one or more diagnostic messages."""
        return cls(passed=False, messages=(message,) + more, details=details)

    @property
    def message(self) -> Optional[str]:
        """First diagnostic, if any."""
        return self.messages[0] if self.messages else None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON response."""
        result: Dict[str, Any] = {"status": "ok" if self.passed else "failed"}
        if self.messages:
            result["messages"] = list(self.messages)
        if self.details:
            result["details"] = self.details
        return result


@dataclass(frozen=True)
class CheckOutcome:
    """What one check produced during a request, with timing."""
    name: str
    result: Optional[CheckResult]
    duration_ms: float = 0.0

    @property
    def failures(self) -> List[str]:
        """Diagnostics this outcome contributes to the report."""
        if self.result is None or self.result.passed:
            return []
        return list(self.result.messages)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON response."""
        if self.result is None:
            data: Dict[str, Any] = {"status": "skipped"}
        else:
            data = self.result.to_dict()
        data["duration_ms"] = round(self.duration_ms, 2)
        return data


@dataclass(frozen=True)
class AggregateReport:
    """
    Combined outcome of all selected checks for one request.

    ``failures`` holds the diagnostics in registry order.
    """
    outcomes: Tuple[CheckOutcome, ...] = ()
    total_duration_ms: float = 0.0
    checked_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def failures(self) -> List[str]:
        messages: List[str] = []
        for outcome in self.outcomes:
            messages.extend(outcome.failures)
        return messages

    @property
    def healthy(self) -> bool:
        return not self.failures

    @property
    def checks_run(self) -> List[str]:
        return [outcome.name for outcome in self.outcomes]

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON response."""
        return {
            "status": "healthy" if self.healthy else "unhealthy",
            "checks": {
                outcome.name: outcome.to_dict()
                for outcome in self.outcomes
            },
            "errors": self.failures,
            "total_duration_ms": round(self.total_duration_ms, 2),
            "checked_at": self.checked_at.isoformat().replace("+00:00", "Z"),
        }


class HealthCheckPlugin(ABC):
    """
    Base class for health check plugins.

    Subclass and implement check() to create a health check. Register the
    class with @register_check so the registry builds it in canonical order.

    Attributes:
        name: Check identifier (also the selection token)
        priority: Execution order (lower runs first)
        timeout_seconds: Max execution time; None uses the executor default
        timeout_message: Diagnostic reported when the check times out

    check() returns None when the check does not apply (e.g. the dependency
    is not configured); that counts as neither pass nor fail.

    Example:
        @register_check(priority=50)
        class SearchCheck(HealthCheckPlugin):
            name = "search"
            timeout_message = "Search index not responding."

            async def check(self) -> Optional[CheckResult]:
                ...
    """

    name: str = "unnamed"
    priority: int = 50
    timeout_seconds: Optional[float] = None
    timeout_message: str = "Health check timed out."

    @abstractmethod
    async def check(self) -> Optional[CheckResult]:
        """
        Execute health check.

        Returns:
            CheckResult, or None if the check does not apply
        """
        pass

    def is_applicable(self) -> bool:
        """
        Whether the checked dependency is configured at all.

        Consulted without running the check, e.g. when the request deadline
        has passed. A non-applicable check contributes no result.
        """
        return True

    @property
    def identifier(self) -> str:
        """Name as a plain lowercase string."""
        return self.name.value if isinstance(self.name, Enum) else str(self.name)
