# ============================================================================
# EXECUTOR TESTS
# ============================================================================
# STATUS: Tests - Check execution and aggregation
# PURPOSE: Verify ordering, fault isolation, timeouts and parallel mode
# ============================================================================
"""
Executor Tests

Uses stub checks with configurable results, delays and exceptions.

Run with:
    pytest tests/test_executor.py -v
"""

import asyncio
import pytest

from core.config import CacheDefaults, HealthDefaults, Settings
from core.logging import get_current_context
from health.checks import MemcacheCheck, ReplicaDatabaseCheck
from health.core import CheckResult, HealthCheckPlugin
from health.executor import HealthCheckExecutor, internal_fault_message
from health.registry import HealthCheckRegistry


# ============================================================================
# HELPERS
# ============================================================================

class _StubCheck(HealthCheckPlugin):
    """Check returning a fixed result after an optional delay."""

    def __init__(self, name, priority, result=None, error=None, delay=0.0,
                 timeout_seconds=None):
        self.name = name
        self.priority = priority
        self.result = result
        self.error = error
        self.delay = delay
        self.timeout_seconds = timeout_seconds
        self.timeout_message = f"{name} did not answer."
        self.calls = 0

    async def check(self):
        self.calls += 1
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return self.result


def _make_executor(*checks, **kwargs):
    registry = HealthCheckRegistry()
    for check in checks:
        registry.register(check)
    return HealthCheckExecutor(registry, **kwargs)


# ============================================================================
# AGGREGATION
# ============================================================================

class TestAggregation:

    def test_all_passing_is_healthy(self):
        executor = _make_executor(
            _StubCheck("db", 10, CheckResult.ok()),
            _StubCheck("files", 40, CheckResult.ok()),
        )
        report = asyncio.run(executor.execute())
        assert report.healthy is True
        assert report.failures == []
        assert report.checks_run == ["db", "files"]

    def test_no_result_contributes_nothing(self):
        executor = _make_executor(
            _StubCheck("slavedb", 20, None),
            _StubCheck("memcache", 30, None),
        )
        report = asyncio.run(executor.execute())
        assert report.healthy is True

    def test_failures_collected_in_registry_order(self):
        executor = _make_executor(
            _StubCheck("files", 40, CheckResult.failure("files broken")),
            _StubCheck("db", 10, CheckResult.failure("db broken")),
            _StubCheck("memcache", 30, CheckResult.failure("bin a", "bin b")),
        )
        report = asyncio.run(executor.execute("files,memcache,db"))
        assert report.failures == ["db broken", "bin a", "bin b", "files broken"]
        assert report.healthy is False

    def test_empty_selection_is_healthy(self):
        check = _StubCheck("db", 10, CheckResult.failure("db broken"))
        executor = _make_executor(check)
        report = asyncio.run(executor.execute("unknown"))
        assert report.healthy is True
        assert report.outcomes == ()
        assert check.calls == 0

    def test_unselected_checks_do_not_run(self):
        db = _StubCheck("db", 10, CheckResult.ok())
        files = _StubCheck("files", 40, CheckResult.failure("files broken"))
        report = asyncio.run(_make_executor(db, files).execute("db"))
        assert report.healthy is True
        assert files.calls == 0


# ============================================================================
# FAULT ISOLATION
# ============================================================================

class TestFaultIsolation:

    def test_raising_check_becomes_failure(self):
        executor = _make_executor(
            _StubCheck("db", 10, error=RuntimeError("driver exploded")),
            _StubCheck("files", 40, CheckResult.ok()),
        )
        report = asyncio.run(executor.execute())
        assert report.failures == [internal_fault_message("db")]
        assert "db" in report.failures[0]

    def test_remaining_checks_still_run(self):
        files = _StubCheck("files", 40, CheckResult.failure("files broken"))
        executor = _make_executor(
            _StubCheck("memcache", 30, error=KeyError("servers")),
            files,
        )
        report = asyncio.run(executor.execute())
        assert files.calls == 1
        assert report.failures == [
            internal_fault_message("memcache"),
            "files broken",
        ]

    def test_exception_type_recorded(self):
        executor = _make_executor(_StubCheck("db", 10, error=ValueError("bad")))
        report = asyncio.run(executor.execute())
        assert report.outcomes[0].result.details["exception_type"] == "ValueError"

    def test_non_result_return_becomes_failure(self):
        files = _StubCheck("files", 40, CheckResult.ok())
        executor = _make_executor(
            _StubCheck("db", 10, "not a result"),
            files,
        )
        report = asyncio.run(executor.execute())
        assert report.failures == [internal_fault_message("db")]
        assert report.outcomes[0].result.details["exception_type"] == "TypeError"
        assert files.calls == 1


# ============================================================================
# TIMEOUTS
# ============================================================================

class TestTimeouts:

    def test_check_timeout_uses_timeout_message(self):
        executor = _make_executor(
            _StubCheck("db", 10, CheckResult.ok(), delay=1.0, timeout_seconds=0.05),
        )
        report = asyncio.run(executor.execute())
        assert report.failures == ["db did not answer."]

    def test_default_timeout_applies(self):
        executor = _make_executor(
            _StubCheck("db", 10, CheckResult.ok(), delay=1.0),
            check_timeout=0.05,
        )
        report = asyncio.run(executor.execute())
        assert report.failures == ["db did not answer."]

    def test_overall_deadline_skips_remaining_checks(self):
        files = _StubCheck("files", 40, CheckResult.ok())
        executor = _make_executor(
            _StubCheck("db", 10, CheckResult.ok(), delay=1.0),
            files,
            check_timeout=5.0,
            overall_timeout=0.05,
        )
        report = asyncio.run(executor.execute())
        assert report.failures == ["db did not answer.", "files did not answer."]
        assert files.calls == 0

    def test_deadline_skip_omits_unconfigured_checks(self):
        executor = _make_executor(
            _StubCheck("db", 10, CheckResult.ok(), delay=0.2),
            ReplicaDatabaseCheck(None, query="unused"),
            MemcacheCheck(CacheDefaults()),
            check_timeout=5.0,
            overall_timeout=0.05,
        )
        report = asyncio.run(executor.execute())
        assert report.failures == ["db did not answer."]
        assert report.checks_run == ["db", "slavedb", "memcache"]
        assert report.outcomes[1].result is None
        assert report.outcomes[2].result is None

    def test_deadline_skip_reports_configured_checks(self):
        replica = ReplicaDatabaseCheck(object(), query="unused")
        executor = _make_executor(
            _StubCheck("db", 10, CheckResult.ok(), delay=0.2),
            replica,
            check_timeout=5.0,
            overall_timeout=0.05,
        )
        report = asyncio.run(executor.execute())
        assert report.failures == [
            "db did not answer.",
            "Slave database not responding.",
        ]
        assert report.outcomes[1].result.details["skipped"] is True


# ============================================================================
# PARALLEL EXECUTION
# ============================================================================

class TestParallel:

    def test_order_independent_of_completion(self):
        executor = _make_executor(
            _StubCheck("db", 10, CheckResult.failure("db broken"), delay=0.2),
            _StubCheck("memcache", 30, CheckResult.failure("cache broken"), delay=0.05),
            _StubCheck("files", 40, CheckResult.failure("files broken")),
            parallel=True,
        )
        report = asyncio.run(executor.execute())
        assert report.failures == ["db broken", "cache broken", "files broken"]

    def test_fault_does_not_cancel_siblings(self):
        slow = _StubCheck("files", 40, CheckResult.ok(), delay=0.1)
        executor = _make_executor(
            _StubCheck("db", 10, error=RuntimeError("boom")),
            slow,
            parallel=True,
        )
        report = asyncio.run(executor.execute())
        assert report.failures == [internal_fault_message("db")]
        assert report.outcomes[1].result.passed is True

    def test_hung_check_bounded_by_timeout(self):
        executor = _make_executor(
            _StubCheck("db", 10, CheckResult.ok(), delay=5.0, timeout_seconds=0.05),
            _StubCheck("files", 40, CheckResult.ok()),
            parallel=True,
        )
        report = asyncio.run(executor.execute())
        assert report.failures == ["db did not answer."]
        assert report.total_duration_ms < 2000


# ============================================================================
# CONSTRUCTION
# ============================================================================

class TestFromSettings:

    def test_settings_applied(self):
        settings = Settings(health=HealthDefaults(
            check_timeout_seconds=3.0,
            overall_timeout_seconds=7.0,
            parallel_checks=True,
        ))
        executor = HealthCheckExecutor.from_settings(HealthCheckRegistry(), settings)
        assert executor.check_timeout == 3.0
        assert executor.overall_timeout == 7.0
        assert executor.parallel is True


# ============================================================================
# LOG CONTEXT
# ============================================================================

class _ContextCheck(HealthCheckPlugin):
    """Check that records the log context it runs under."""

    def __init__(self, name, priority):
        self.name = name
        self.priority = priority
        self.seen = None

    async def check(self):
        await asyncio.sleep(0.01)
        self.seen = get_current_context().check
        return CheckResult.ok()


class TestLogContext:

    @pytest.mark.parametrize("parallel", [False, True])
    def test_check_name_in_context(self, parallel):
        db = _ContextCheck("db", 10)
        files = _ContextCheck("files", 40)
        executor = _make_executor(db, files, parallel=parallel)

        asyncio.run(executor.execute())

        assert db.seen == "db"
        assert files.seen == "files"
        assert get_current_context().check is None
