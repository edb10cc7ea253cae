# ============================================================================
# HEALTH RESPONSE SYNTHESIS
# ============================================================================
# STATUS: Health - Report to HTTP response mapping
# PURPOSE: Status code, no-cache headers and body for the monitor endpoint
# ============================================================================
"""
Health Response Synthesis

Maps an AggregateReport to the plain-text response load balancers read:

    200  <success token>
    500  <diagnostic><br />
         <diagnostic><br />
         Errors on this server will cause it to be removed from the load balancer.

There is no degraded tier; the split is all-or-nothing.
"""

from dataclasses import dataclass, field
from typing import Dict

from fastapi.responses import PlainTextResponse

from health.core import AggregateReport

NO_CACHE_HEADERS: Dict[str, str] = {
    "Cache-Control": "no-cache, no-store, must-revalidate",
    "Pragma": "no-cache",
}

# The success token must not appear verbatim in source text served by a
# broken server, so it stays split.
SUCCESS_BODY = "OK" + " 200"

FAILURE_TRAILER = "Errors on this server will cause it to be removed from the load balancer."

LINE_BREAK = "<br />\n"


@dataclass(frozen=True)
class HealthResponse:
    """Transport-independent response for one health request."""
    status_code: int
    body: str
    headers: Dict[str, str] = field(default_factory=lambda: dict(NO_CACHE_HEADERS))

    def to_response(self) -> PlainTextResponse:
        """Render as a FastAPI response."""
        return PlainTextResponse(
            content=self.body,
            status_code=self.status_code,
            headers=dict(self.headers),
        )


def synthesize(report: AggregateReport) -> HealthResponse:
    """
    Build the response for a report.

    Pure function of the report: same report, same response.
    """
    if report.healthy:
        return HealthResponse(status_code=200, body=SUCCESS_BODY)

    errors = report.failures + [FAILURE_TRAILER]
    return HealthResponse(status_code=500, body=LINE_BREAK.join(errors))


# ============================================================================
# EXPORTS
# ============================================================================

__all__ = [
    "HealthResponse",
    "NO_CACHE_HEADERS",
    "SUCCESS_BODY",
    "FAILURE_TRAILER",
    "LINE_BREAK",
    "synthesize",
]
