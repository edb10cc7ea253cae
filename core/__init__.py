# ============================================================================
# CORE MODULE
# ============================================================================
# STATUS: Core module initialization
# PURPOSE: Export configuration and logging helpers
# ============================================================================

from core.config import Settings, get_settings, reset_settings
from core.logging import configure_logging, get_logger, log_context

__all__ = [
    # Configuration
    "Settings",
    "get_settings",
    "reset_settings",
    # Logging
    "configure_logging",
    "get_logger",
    "log_context",
]
