# ============================================================================
# SCHEMA DUMP ERRORS
# ============================================================================
# STATUS: Foundation - Error taxonomy
# PURPOSE: Exceptions raised while reading metadata or rendering a table
# LAST_REVIEWED: 17 OCT 2026
# ============================================================================
"""
Schema dump error taxonomy.

Both concrete errors are fatal for one table and harmless for the dump:
the table serializer catches them and writes a comment block instead.
"""

from typing import Optional


class SchemaDumpError(Exception):
    """Base exception for schema dump operations."""

    def __init__(self, message: str, table: Optional[str] = None):
        self.table = table
        super().__init__(message)


class UnrenderableTypeError(SchemaDumpError):
    """Raised when a column's type cannot be rendered (unknown or unregistered)."""

    def __init__(self, column: str, sql_type: str, table: Optional[str] = None):
        self.column = column
        self.sql_type = sql_type
        super().__init__(f"Unknown type '{sql_type}' for column '{column}'", table=table)


class MetadataSourceError(SchemaDumpError):
    """Raised when columns, indexes or keys could not be fetched."""

    def __init__(self, message: str, table: Optional[str] = None, operation: Optional[str] = None):
        self.operation = operation
        super().__init__(message, table=table)


__all__ = [
    "SchemaDumpError",
    "UnrenderableTypeError",
    "MetadataSourceError",
]
