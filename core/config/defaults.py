# ============================================================================
# CONFIGURATION DEFAULTS
# ============================================================================
# STATUS: Core - Default configuration values
# PURPOSE: Centralized defaults for dump rendering and database introspection
# LAST_REVIEWED: 17 OCT 2026
# ============================================================================
"""
Configuration Defaults

Provides defaults for the schema dumper. Each group can be overridden via
environment variables through ``from_env()``.

Design:
- Immutable dataclasses for defaults
- Environment variable overrides
- Type-safe access

Environment Variables:
    SCHEMA_DUMP_DIALECT         Base type registry (postgresql, mysql)
    SCHEMA_DUMP_PRIMARY_KEY     Assumed primary key name (default: id)
    SCHEMA_DUMP_IGNORE_TABLES   Comma-separated names; /pattern/ for a regex
    SCHEMA_DUMP_FORCE           Emit ``:force => true`` (default: true)
    POSTGRES_SCHEMA             Schema to introspect (default: public)
"""

import os
import re
from dataclasses import dataclass, field
from typing import List, Optional, Pattern, Tuple, Union

from core.contracts import PRIMARY_KEY_DEFAULT


IgnoreRule = Union[str, Pattern]

# Always skipped: migration bookkeeping plus PostGIS catalog tables
ALWAYS_IGNORED: Tuple[str, ...] = (
    "schema_migrations",
    "spatial_ref_sys",
    "geometry_columns",
    "geography_columns",
)


def parse_ignore_tables(value: Optional[str]) -> Tuple[IgnoreRule, ...]:
    """
    Parse a comma-separated ignore list.

    ``/^tmp_/`` entries become compiled regexes, everything else is an
    exact table name.
    """
    if not value:
        return ()
    rules: List[IgnoreRule] = []
    for item in value.split(","):
        item = item.strip()
        if not item:
            continue
        if len(item) > 2 and item.startswith("/") and item.endswith("/"):
            rules.append(re.compile(item[1:-1]))
        else:
            rules.append(item)
    return tuple(rules)


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


@dataclass(frozen=True)
class DumperDefaults:
    """
    Defaults for rendering a schema definition.
    """
    dialect: str = "postgresql"
    default_primary_key: str = PRIMARY_KEY_DEFAULT
    force: bool = True
    ignore_tables: Tuple[IgnoreRule, ...] = ()

    def is_ignored(self, table: str) -> bool:
        """Check a table against the built-in and configured ignore rules."""
        if table in ALWAYS_IGNORED:
            return True
        for rule in self.ignore_tables:
            if isinstance(rule, str):
                if rule == table:
                    return True
            elif rule.search(table):
                return True
        return False

    @classmethod
    def from_env(cls) -> "DumperDefaults":
        """Create from environment variables."""
        return cls(
            dialect=os.getenv("SCHEMA_DUMP_DIALECT", "postgresql"),
            default_primary_key=os.getenv("SCHEMA_DUMP_PRIMARY_KEY", PRIMARY_KEY_DEFAULT),
            force=_env_bool("SCHEMA_DUMP_FORCE", True),
            ignore_tables=parse_ignore_tables(os.getenv("SCHEMA_DUMP_IGNORE_TABLES")),
        )


@dataclass(frozen=True)
class DatabaseDefaults:
    """
    Defaults for database introspection.
    """
    schema_name: str = "public"
    connect_timeout: int = 10  # seconds

    # Where the migration version is tracked
    version_table: str = "schema_migrations"

    @classmethod
    def from_env(cls) -> "DatabaseDefaults":
        """Create from environment variables."""
        return cls(
            schema_name=os.getenv("POSTGRES_SCHEMA", "public"),
            connect_timeout=int(os.getenv("POSTGRES_CONNECT_TIMEOUT", 10)),
        )


# ============================================================================
# GLOBAL DEFAULTS INSTANCE
# ============================================================================

@dataclass
class Defaults:
    """Container for all default configurations."""
    dumper: DumperDefaults = field(default_factory=DumperDefaults)
    database: DatabaseDefaults = field(default_factory=DatabaseDefaults)

    @classmethod
    def from_env(cls) -> "Defaults":
        """Create all defaults from environment variables."""
        return cls(
            dumper=DumperDefaults.from_env(),
            database=DatabaseDefaults.from_env(),
        )


_defaults: Optional[Defaults] = None


def get_defaults() -> Defaults:
    """Get global defaults instance."""
    global _defaults
    if _defaults is None:
        _defaults = Defaults.from_env()
    return _defaults


def reset_defaults() -> None:
    """Reset defaults (for testing)."""
    global _defaults
    _defaults = None


# ============================================================================
# EXPORTS
# ============================================================================

__all__ = [
    "ALWAYS_IGNORED",
    "IgnoreRule",
    "DumperDefaults",
    "DatabaseDefaults",
    "Defaults",
    "get_defaults",
    "reset_defaults",
    "parse_ignore_tables",
]
