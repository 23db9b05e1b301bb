# ============================================================================
# MODELS MODULE
# ============================================================================
# STATUS: Model exports
# PURPOSE: Central export point for all Pydantic models
# LAST_REVIEWED: 17 OCT 2026
# ============================================================================
"""
Models Module - Central Export Point

Immutable snapshots of table metadata. Built once per table from a
metadata source and discarded after rendering.
"""

from core.models.column import (
    UNSPECIFIED_SRID,
    ColumnDescriptor,
    ColumnModel,
    SpatialAttributes,
)
from core.models.index import IndexModel

__all__ = [
    # Column
    "UNSPECIFIED_SRID",
    "ColumnDescriptor",
    "ColumnModel",
    "SpatialAttributes",
    # Index
    "IndexModel",
]
