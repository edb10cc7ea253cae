# ============================================================================
# SITE MONITOR - MAIN APPLICATION
# ============================================================================
# STATUS: Core - FastAPI application entry point
# PURPOSE: Serve the health endpoints for load balancers and monitoring
# ============================================================================
"""
Site Monitor Main Application

FastAPI application that:
1. Reads settings from the environment
2. Builds the health check registry and executor
3. Serves /monitor, /monitor/detail and /livez

Usage:
    uvicorn main:app --host 0.0.0.0 --port 8000
"""

import os
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI

from __version__ import __version__, BUILD_DATE, CODENAME
from core.config import Settings, get_settings
from health import (
    HealthCheckExecutor,
    HealthCheckRegistry,
    build_registry,
    health_router,
    set_health_executor,
)

# Configure logging using our structured logging system
from core.logging import ComponentType, configure_logging, get_logger

configure_logging(
    level=os.environ.get("LOG_LEVEL", "INFO"),
    json_output=os.environ.get("LOG_FORMAT", "").lower() == "json",
)
logger = get_logger(__name__, ComponentType.API)


def create_app(
    settings: Optional[Settings] = None,
    registry: Optional[HealthCheckRegistry] = None,
) -> FastAPI:
    """
    Build the application.

    Args:
        settings: Explicit settings; defaults to the environment
        registry: Prebuilt checks; defaults to build_registry(settings)
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Wire health checks on startup."""
        resolved = settings or get_settings()

        logger.info(f"Starting {CODENAME} v{__version__} (Build {BUILD_DATE})")

        checks = registry if registry is not None else build_registry(resolved)
        set_health_executor(HealthCheckExecutor.from_settings(checks, resolved))
        logger.info(
            f"Health checks initialized ({', '.join(checks.identifiers)}; "
            f"parallel={resolved.health.parallel_checks})"
        )

        yield

        set_health_executor(None)
        logger.info(f"{CODENAME} stopped")

    app = FastAPI(
        title=CODENAME,
        description="Load balancer health endpoint for site dependencies",
        version=__version__,
        lifespan=lifespan,
    )

    # No prefix: /livez, /monitor, /monitor.php, /monitor/detail
    app.include_router(health_router)

    return app


app = create_app()


# ============================================================================
# MAIN ENTRY POINT
# ============================================================================

if __name__ == "__main__":
    import uvicorn

    host = os.environ.get("HOST", "0.0.0.0")
    port = int(os.environ.get("PORT", "8000"))

    uvicorn.run(
        "main:app",
        host=host,
        port=port,
        reload=os.environ.get("RELOAD", "false").lower() == "true",
    )
