# ============================================================================
# HEALTH CHECK EXECUTOR
# ============================================================================
# STATUS: Health - Check execution and aggregation
# PURPOSE: Run selected checks with timeouts and collect diagnostics
# ============================================================================
"""
Health Check Executor

Executes health checks with:
- Sequential execution in registry order (default)
- Optional concurrent execution (HEALTH_PARALLEL_CHECKS=true)
- Per-check timeouts
- Overall request deadline
- Fault isolation: a check that raises, or returns something other than a
  CheckResult, becomes a failure diagnostic

Whatever the execution mode, the report lists outcomes in registry order
so diagnostics are deterministic.
"""

import asyncio
import logging
import time
from typing import List, Optional

from core.config import Settings
from core.logging import log_context
from health.core import (
    AggregateReport,
    CheckOutcome,
    CheckResult,
    HealthCheckPlugin,
)
from health.registry import HealthCheckRegistry
from health.selection import SelectionSet, resolve_selection

logger = logging.getLogger(__name__)


def internal_fault_message(name: str) -> str:
    return f"Health check {name} failed unexpectedly."


class HealthCheckExecutor:
    """
    Runs a selection of health checks and aggregates their outcomes.

    Checks that yield no result contribute nothing to the report.
    """

    def __init__(
        self,
        registry: HealthCheckRegistry,
        check_timeout: float = 10.0,
        overall_timeout: float = 30.0,
        parallel: bool = False,
    ):
        """
        Initialize executor.

        Args:
            registry: Health check registry
            check_timeout: Timeout for checks that do not set their own
            overall_timeout: Max total execution time per request
            parallel: Run selected checks concurrently
        """
        self.registry = registry
        self.check_timeout = check_timeout
        self.overall_timeout = overall_timeout
        self.parallel = parallel

    @classmethod
    def from_settings(
        cls,
        registry: HealthCheckRegistry,
        settings: Settings,
    ) -> "HealthCheckExecutor":
        return cls(
            registry=registry,
            check_timeout=settings.health.check_timeout_seconds,
            overall_timeout=settings.health.overall_timeout_seconds,
            parallel=settings.health.parallel_checks,
        )

    def select(self, raw_selection: Optional[str] = None) -> SelectionSet:
        """Resolve the ?options= value against this executor's registry."""
        return resolve_selection(self.registry, raw_selection)

    async def execute(self, raw_selection: Optional[str] = None) -> AggregateReport:
        """Resolve the selection and run it."""
        return await self.run_all(self.select(raw_selection))

    async def run_all(self, selection: SelectionSet) -> AggregateReport:
        """
        Execute the selected checks.

        Args:
            selection: Checks to run, in registry order

        Returns:
            Aggregated report with outcomes in selection order
        """
        start_time = time.monotonic()

        if self.parallel:
            outcomes = await self._run_parallel(selection)
        else:
            outcomes = await self._run_sequential(selection, start_time)

        report = AggregateReport(
            outcomes=tuple(outcomes),
            total_duration_ms=(time.monotonic() - start_time) * 1000,
        )

        logger.info(
            f"Health checks [{', '.join(report.checks_run) or 'none'}]: "
            f"{'healthy' if report.healthy else 'unhealthy'} "
            f"({report.total_duration_ms:.1f}ms)"
        )
        return report

    async def _run_sequential(
        self,
        selection: SelectionSet,
        start_time: float,
    ) -> List[CheckOutcome]:
        outcomes: List[CheckOutcome] = []

        for check in selection:
            remaining = self.overall_timeout - (time.monotonic() - start_time)
            if remaining <= 0:
                outcomes.append(self._skipped(check))
                continue

            timeout = min(self._timeout_for(check), remaining)
            outcomes.append(await self._execute_check(check, timeout))

        return outcomes

    def _skipped(self, check: HealthCheckPlugin) -> CheckOutcome:
        """Outcome for a check reached after the overall deadline."""
        if not check.is_applicable():
            return CheckOutcome(name=check.identifier, result=None)

        logger.warning(
            f"Health check {check.identifier} skipped: "
            f"overall timeout ({self.overall_timeout}s) exceeded"
        )
        return CheckOutcome(
            name=check.identifier,
            result=CheckResult.failure(check.timeout_message, skipped=True),
        )

    async def _run_parallel(self, selection: SelectionSet) -> List[CheckOutcome]:
        tasks = [
            asyncio.create_task(
                self._execute_check(
                    check,
                    min(self._timeout_for(check), self.overall_timeout),
                )
            )
            for check in selection
        ]
        # gather keeps task order, so outcomes stay in registry order
        return list(await asyncio.gather(*tasks))

    def _timeout_for(self, check: HealthCheckPlugin) -> float:
        if check.timeout_seconds is not None:
            return check.timeout_seconds
        return self.check_timeout

    async def _execute_check(
        self,
        check: HealthCheckPlugin,
        timeout: float,
    ) -> CheckOutcome:
        """Execute a single check with timeout."""
        with log_context(check=check.identifier):
            start_time = time.monotonic()

            try:
                result = await asyncio.wait_for(check.check(), timeout=timeout)
                if result is not None and not isinstance(result, CheckResult):
                    raise TypeError(
                        f"check() returned {type(result).__name__}, expected CheckResult"
                    )

            except asyncio.TimeoutError:
                logger.warning(f"Health check {check.identifier} timed out after {timeout}s")
                result = CheckResult.failure(check.timeout_message, timed_out=True)

            except Exception as e:
                logger.exception(f"Health check {check.identifier} raised: {e}")
                result = CheckResult.failure(
                    internal_fault_message(check.identifier),
                    exception_type=type(e).__name__,
                )

            duration_ms = (time.monotonic() - start_time) * 1000

            if result is None:
                logger.debug(f"Health check {check.identifier}: not applicable")
            elif result.passed:
                logger.debug(f"Health check {check.identifier}: ok ({duration_ms:.1f}ms)")
            else:
                logger.warning(
                    f"Health check {check.identifier} failed: {'; '.join(result.messages)}"
                )

            return CheckOutcome(
                name=check.identifier,
                result=result,
                duration_ms=duration_ms,
            )


# ============================================================================
# EXPORTS
# ============================================================================

__all__ = [
    "HealthCheckExecutor",
    "internal_fault_message",
]
