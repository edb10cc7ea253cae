# ============================================================================
# STRUCTURED LOGGING TESTS
# ============================================================================
# STATUS: Tests - Logging context and formatters
# PURPOSE: Verify context propagation and JSON output
# ============================================================================
"""
Structured Logging Tests

Run with:
    pytest tests/test_logging.py -v
"""

import asyncio
import json
import logging

from core.logging import (
    ComponentType,
    HumanFormatter,
    StructuredFormatter,
    get_current_context,
    get_logger,
    log_context,
)


def _record(message="probe done"):
    return logging.LogRecord(
        name="health.executor",
        level=logging.WARNING,
        pathname=__file__,
        lineno=1,
        msg=message,
        args=(),
        exc_info=None,
    )


class TestLogContext:

    def test_nested_context_merges(self):
        with log_context(request_id="req-1"):
            with log_context(check="db"):
                context = get_current_context()
                assert context.request_id == "req-1"
                assert context.check == "db"
            assert get_current_context().check is None
        assert get_current_context().request_id is None

    def test_concurrent_tasks_keep_own_context(self):
        async def run(name):
            with log_context(check=name):
                await asyncio.sleep(0.01)
                return get_current_context().check

        async def main():
            return await asyncio.gather(run("db"), run("files"))

        assert asyncio.run(main()) == ["db", "files"]


class TestFormatters:

    def test_structured_output_is_json(self):
        with log_context(request_id="req-9", check="memcache"):
            line = StructuredFormatter().format(_record())
        data = json.loads(line)
        assert data["level"] == "WARNING"
        assert data["message"] == "probe done"
        assert data["context"] == {"request_id": "req-9", "check": "memcache"}

    def test_human_output_includes_context(self):
        with log_context(request_id="req-9", check="files"):
            line = HumanFormatter().format(_record())
        assert "[request=req-9, check=files]" in line
        assert line.endswith("probe done")


class TestGetLogger:

    def test_component_attached(self, caplog):
        logger = get_logger("site.test", ComponentType.HEALTH)
        with caplog.at_level(logging.INFO, logger="site.test"):
            logger.info("hello")
        assert caplog.records[-1].extra["component"] == "health"
