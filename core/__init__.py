# ============================================================================
# CORE MODULE
# ============================================================================
# STATUS: Core module initialization
# PURPOSE: Export contracts, models, errors and the schema dumper
# LAST_REVIEWED: 17 OCT 2026
# ============================================================================

from core.contracts import ColumnType, GEOMETRY_TYPES
from core.errors import MetadataSourceError, SchemaDumpError, UnrenderableTypeError
from core.models import (
    ColumnDescriptor,
    ColumnModel,
    IndexModel,
    SpatialAttributes,
)
from core.schema import (
    InMemoryMetadataSource,
    MetadataSource,
    SchemaDumper,
    SpatialExtension,
)

__all__ = [
    # Enums
    "ColumnType",
    "GEOMETRY_TYPES",
    # Errors
    "SchemaDumpError",
    "UnrenderableTypeError",
    "MetadataSourceError",
    # Models
    "ColumnDescriptor",
    "ColumnModel",
    "IndexModel",
    "SpatialAttributes",
    # Schema
    "SchemaDumper",
    "SpatialExtension",
    "MetadataSource",
    "InMemoryMetadataSource",
]
