# ============================================================================
# CONFIGURATION MODULE
# ============================================================================
# STATUS: Core - Configuration and defaults
# PURPOSE: Centralized configuration management
# ============================================================================
"""
Configuration Module

Provides centralized configuration for the site monitor.
"""

from core.config.defaults import (
    CacheFailurePolicy,
    DatabaseDefaults,
    CacheDefaults,
    FilesDefaults,
    HealthDefaults,
    Settings,
    get_settings,
    reset_settings,
    parse_memcache_servers,
)

__all__ = [
    "CacheFailurePolicy",
    "DatabaseDefaults",
    "CacheDefaults",
    "FilesDefaults",
    "HealthDefaults",
    "Settings",
    "get_settings",
    "reset_settings",
    "parse_memcache_servers",
]
