# ============================================================================
# HEALTH CHECK ROUTER
# ============================================================================
# STATUS: Health - FastAPI monitor endpoints
# PURPOSE: Load balancer and operator health endpoints
# ============================================================================
"""
Health Check Router

FastAPI router providing the monitor endpoints:

Endpoints:
    GET /livez            - Liveness probe (is the process alive?)
                            No dependency checks. Always 200.

    GET /monitor          - Load balancer health check.
    GET /monitor.php        Optional ?options=db,slavedb,memcache,files|all
                            200 with the success token when every selected
                            check passes, 500 with <br />-separated
                            diagnostics otherwise.

    GET /monitor/detail   - Same checks, JSON body with per-check outcome
                            and timings. Same 200/500 mapping.

All responses carry no-cache headers.
"""

import logging
import uuid
from typing import Optional

from fastapi import APIRouter, HTTPException, Query
from fastapi.responses import JSONResponse, PlainTextResponse

from core.logging import log_context
from health.executor import HealthCheckExecutor
from health.response import NO_CACHE_HEADERS, synthesize
from __version__ import __version__, BUILD_DATE

logger = logging.getLogger(__name__)

health_router = APIRouter(tags=["Health"])

OPTIONS_DESCRIPTION = (
    "Comma-separated checks to run (db, slavedb, memcache, files) or 'all'. "
    "Case-insensitive; unknown names are ignored. Omit to run every check."
)

_executor: Optional[HealthCheckExecutor] = None


def set_health_executor(executor: Optional[HealthCheckExecutor]) -> None:
    """Set executor instance for dependency injection."""
    global _executor
    _executor = executor


def get_health_executor() -> HealthCheckExecutor:
    if _executor is None:
        raise HTTPException(500, "Health checks not initialized")
    return _executor


# ============================================================================
# LIVENESS PROBE
# ============================================================================

@health_router.get("/livez")
async def liveness_probe():
    """
    Liveness probe.

    Returns 200 if the process is alive. No external dependencies.
    """
    return JSONResponse(
        content={"status": "alive", "version": __version__, "build_date": BUILD_DATE},
        headers=dict(NO_CACHE_HEADERS),
    )


# ============================================================================
# MONITOR
# ============================================================================

@health_router.get("/monitor", response_class=PlainTextResponse)
@health_router.get("/monitor.php", response_class=PlainTextResponse, include_in_schema=False)
async def monitor(options: Optional[str] = Query(None, description=OPTIONS_DESCRIPTION)):
    """
    Load balancer health check.

    Runs the selected checks and answers 200 or 500. A failing dependency
    never produces anything but a well-formed 500.
    """
    executor = get_health_executor()

    with log_context(request_id=uuid.uuid4().hex[:12], component="api"):
        report = await executor.execute(options)

    return synthesize(report).to_response()


@health_router.get("/monitor/detail")
async def monitor_detail(options: Optional[str] = Query(None, description=OPTIONS_DESCRIPTION)):
    """
    Per-check health detail for operators.

    Returns:
        200: All selected checks passed (or did not apply)
        500: At least one selected check failed
    """
    executor = get_health_executor()

    with log_context(request_id=uuid.uuid4().hex[:12], component="api"):
        report = await executor.execute(options)

    body = report.to_dict()
    body["version"] = __version__

    return JSONResponse(
        status_code=synthesize(report).status_code,
        content=body,
        headers=dict(NO_CACHE_HEADERS),
    )


# ============================================================================
# EXPORTS
# ============================================================================

__all__ = [
    "health_router",
    "set_health_executor",
    "get_health_executor",
]
