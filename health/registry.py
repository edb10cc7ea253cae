# ============================================================================
# HEALTH CHECK REGISTRY
# ============================================================================
# STATUS: Health - Health check plugin registration
# PURPOSE: Register check classes and hold the ordered check list
# ============================================================================
"""
Health Check Registry

Check classes register themselves with @register_check. A registry instance
is then built from settings once at startup; it holds one instance of every
check in canonical (priority) order.

Usage:
    # Decorator registration
    @register_check(priority=10)
    class PrimaryDatabaseCheck(HealthCheckPlugin):
        ...

    # Build checks for the application
    registry = build_registry(get_settings())

    # Manual registration (tests)
    registry = HealthCheckRegistry()
    registry.register(FakeCheck())
"""

import logging
from typing import Dict, List, Optional, Type

from core.config import Settings
from health.core import HealthCheckPlugin

logger = logging.getLogger(__name__)


class HealthCheckRegistry:
    """
    Ordered collection of health check instances.

    Iteration and get_all() always follow priority order, which is the
    order checks run in and the order their diagnostics are reported in.
    """

    def __init__(self):
        self._checks: Dict[str, HealthCheckPlugin] = {}

    def register(self, check: HealthCheckPlugin) -> None:
        """
        Register a health check plugin instance.

        A check with the same name replaces the existing one.
        """
        if check.identifier in self._checks:
            logger.warning(f"Overwriting health check: {check.identifier}")

        self._checks[check.identifier] = check
        logger.debug(
            f"Registered health check: {check.identifier} (priority={check.priority})"
        )

    def get(self, name: str) -> Optional[HealthCheckPlugin]:
        """Get health check by name."""
        return self._checks.get(name)

    def get_all(self) -> List[HealthCheckPlugin]:
        """Get all checks sorted by priority (lower first)."""
        return sorted(self._checks.values(), key=lambda c: c.priority)

    @property
    def identifiers(self) -> List[str]:
        """Check names in registry order."""
        return [check.identifier for check in self.get_all()]

    def __len__(self) -> int:
        return len(self._checks)

    def __iter__(self):
        return iter(self.get_all())


# ============================================================================
# CHECK CLASS CATALOG & DECORATOR
# ============================================================================

_check_classes: Dict[str, Type[HealthCheckPlugin]] = {}


def register_check(
    priority: int = None,
    timeout_seconds: float = None,
):
    """
    Decorator to register a health check class.

    The class must provide a ``from_settings(settings)`` classmethod;
    build_registry() uses it to create the instance.

    Args:
        priority: Override priority (lower runs first)
        timeout_seconds: Override timeout

    Example:
        @register_check(priority=40)
        class FilesCheck(HealthCheckPlugin):
            name = CheckIdentifier.FILES
            ...
    """
    def decorator(cls: Type[HealthCheckPlugin]) -> Type[HealthCheckPlugin]:
        if priority is not None:
            cls.priority = priority

        if timeout_seconds is not None:
            cls.timeout_seconds = timeout_seconds

        name = cls.name.value if hasattr(cls.name, "value") else str(cls.name)
        _check_classes[name] = cls
        return cls

    return decorator


def get_check_classes() -> List[Type[HealthCheckPlugin]]:
    """Registered check classes in priority order."""
    import health.checks  # noqa: F401  (registers the built-in checks)

    return sorted(_check_classes.values(), key=lambda c: c.priority)


def build_registry(settings: Settings) -> HealthCheckRegistry:
    """
    Instantiate every registered check from settings.

    Args:
        settings: Application settings handed to each check

    Returns:
        Registry holding one instance per check class
    """
    registry = HealthCheckRegistry()
    for check_class in get_check_classes():
        registry.register(check_class.from_settings(settings))
    return registry


# ============================================================================
# EXPORTS
# ============================================================================

__all__ = [
    "HealthCheckRegistry",
    "register_check",
    "get_check_classes",
    "build_registry",
]
