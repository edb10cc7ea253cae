# ============================================================================
# HEALTH CHECK MODULE
# ============================================================================
# STATUS: Health - Health check plugin system
# PURPOSE: Load balancer health endpoint for the site's dependencies
# ============================================================================
"""
Health Check Module

Plugin-based health check system for a web site's dependencies:
primary database, replica database, memcache tier and files directory.

Architecture:
- HealthCheckPlugin: Base class for health checks
- HealthCheckRegistry: Ordered check instances built from settings
- resolve_selection: ?options= parsing into the checks to run
- HealthCheckExecutor: Sequential or parallel execution with timeouts
- synthesize: Report to 200/500 plain-text response

Usage:
    from health import build_registry, HealthCheckExecutor, health_router

    registry = build_registry(get_settings())
    set_health_executor(HealthCheckExecutor.from_settings(registry, settings))
    app.include_router(health_router)
"""

from health.core import (
    CheckIdentifier,
    CheckResult,
    CheckOutcome,
    AggregateReport,
    HealthCheckPlugin,
)
from health.registry import (
    HealthCheckRegistry,
    register_check,
    build_registry,
)
from health.selection import resolve_selection
from health.executor import HealthCheckExecutor
from health.response import HealthResponse, synthesize
from health.router import health_router, set_health_executor

__all__ = [
    # Core types
    "CheckIdentifier",
    "CheckResult",
    "CheckOutcome",
    "AggregateReport",
    "HealthCheckPlugin",
    # Registry
    "HealthCheckRegistry",
    "register_check",
    "build_registry",
    # Selection
    "resolve_selection",
    # Executor
    "HealthCheckExecutor",
    # Response
    "HealthResponse",
    "synthesize",
    # Router
    "health_router",
    "set_health_executor",
]
