# ============================================================================
# BASE CONTRACTS & ENUMS
# ============================================================================
# STATUS: Foundation - Column type tags shared by every layer
# PURPOSE: Define the semantic type vocabulary of the schema dumper
# LAST_REVIEWED: 17 OCT 2026
# EXPORTS: ColumnType, GEOMETRY_TYPES, PRIMARY_KEY_DEFAULT
# DEPENDENCIES: enum
# ============================================================================
"""
Base contracts for the schema dumper.

ColumnType is the tag every raw SQL type is classified into. It crosses
three boundaries:
- Metadata source (raw ``sql_type`` strings)
- Column model (typed snapshot of one column)
- Output (``t.<type>`` in the rendered definition)
"""

from enum import Enum


PRIMARY_KEY_DEFAULT = "id"


# ============================================================================
# COLUMN TYPES
# ============================================================================

class ColumnType(str, Enum):
    """
    Semantic column type tags.

    The value is what gets rendered after ``t.`` in a column line.
    UNKNOWN never reaches the output: it is surfaced as an error first.
    """
    BOOLEAN = "boolean"
    INTEGER = "integer"
    FLOAT = "float"
    DECIMAL = "decimal"
    DATETIME = "datetime"
    DATE = "date"
    TIMESTAMP = "timestamp"
    TIME = "time"
    TEXT = "text"
    STRING = "string"
    BINARY = "binary"

    # Geometry variants
    POINT = "point"
    LINE_STRING = "line_string"
    POLYGON = "polygon"
    GEOMETRY_COLLECTION = "geometry_collection"
    MULTI_POINT = "multi_point"
    MULTI_LINE_STRING = "multi_line_string"
    MULTI_POLYGON = "multi_polygon"
    GEOMETRY = "geometry"

    UNKNOWN = "unknown"

    def is_geometry(self) -> bool:
        """Check if this tag is one of the geometry variants."""
        return self in GEOMETRY_TYPES

    def is_known(self) -> bool:
        return self is not ColumnType.UNKNOWN


GEOMETRY_TYPES = frozenset({
    ColumnType.POINT,
    ColumnType.LINE_STRING,
    ColumnType.POLYGON,
    ColumnType.GEOMETRY_COLLECTION,
    ColumnType.MULTI_POINT,
    ColumnType.MULTI_LINE_STRING,
    ColumnType.MULTI_POLYGON,
    ColumnType.GEOMETRY,
})


# ============================================================================
# EXPORTS
# ============================================================================

__all__ = [
    "ColumnType",
    "GEOMETRY_TYPES",
    "PRIMARY_KEY_DEFAULT",
]
