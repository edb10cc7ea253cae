# ============================================================================
# HEALTH CHECK SELECTION
# ============================================================================
# STATUS: Health - Caller-supplied check selection
# PURPOSE: Turn the ?options= query value into the checks to run
# ============================================================================
"""
Health Check Selection

Callers may restrict a request to some checks:

    /monitor                         -> every check
    /monitor?options=all             -> every check
    /monitor?options=files,db        -> db, files (registry order)
    /monitor?options=nosuchcheck     -> nothing (trivially healthy)

Tokens are case-insensitive. Unknown tokens are ignored. Selection never
fails; the worst a bad value can do is select nothing.
"""

from typing import Optional, Tuple

from health.core import HealthCheckPlugin
from health.registry import HealthCheckRegistry

ALL_TOKEN = "all"

SelectionSet = Tuple[HealthCheckPlugin, ...]


def parse_options(raw_selection: Optional[str]) -> Optional[Tuple[str, ...]]:
    """
    Split a selection string into lowercase tokens.

    Returns None when every check should run.
    """
    if raw_selection is None:
        return None

    tokens = tuple(token.strip().lower() for token in raw_selection.split(","))
    if ALL_TOKEN in tokens:
        return None
    return tokens


def resolve_selection(
    registry: HealthCheckRegistry,
    raw_selection: Optional[str] = None,
) -> SelectionSet:
    """
    Resolve the checks to run for one request.

    Args:
        registry: Registered checks
        raw_selection: Comma-separated check names, "all", or None

    Returns:
        Checks in registry order, regardless of token order
    """
    tokens = parse_options(raw_selection)
    checks = registry.get_all()

    if tokens is None:
        return tuple(checks)

    return tuple(check for check in checks if check.identifier in tokens)


# ============================================================================
# EXPORTS
# ============================================================================

__all__ = [
    "ALL_TOKEN",
    "SelectionSet",
    "parse_options",
    "resolve_selection",
]
