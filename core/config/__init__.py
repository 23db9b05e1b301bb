# ============================================================================
# CONFIGURATION MODULE
# ============================================================================
# STATUS: Core - Configuration and defaults
# PURPOSE: Centralized configuration management
# LAST_REVIEWED: 17 OCT 2026
# ============================================================================
"""
Configuration Module

Provides centralized configuration and defaults for the schema dumper.
"""

from core.config.defaults import (
    ALWAYS_IGNORED,
    DumperDefaults,
    DatabaseDefaults,
    Defaults,
    get_defaults,
    reset_defaults,
    parse_ignore_tables,
)

__all__ = [
    "ALWAYS_IGNORED",
    "DumperDefaults",
    "DatabaseDefaults",
    "Defaults",
    "get_defaults",
    "reset_defaults",
    "parse_ignore_tables",
]
