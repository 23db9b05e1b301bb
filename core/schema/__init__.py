# ============================================================================
# SCHEMA MODULE
# ============================================================================
# STATUS: Core - Schema definition rendering
# PURPOSE: Turn live table metadata into a re-executable schema definition
# LAST_REVIEWED: 17 OCT 2026
# ============================================================================

from core.schema.classifier import (
    TypeClassifier,
    extract_limit,
    extract_precision,
    extract_scale,
)
from core.schema.column_spec import ColumnSpec, ColumnSpecBuilder
from core.schema.dumper import DumpResult, SchemaDumper
from core.schema.extensions import ColumnTypeExtension
from core.schema.formatter import ColumnFormatter
from core.schema.literals import default_literal, quote_list, quote_string
from core.schema.metadata_source import InMemoryMetadataSource, MetadataSource
from core.schema.serializer import IndexSerializer, TableResult, TableSerializer
from core.schema.spatial import SpatialExtension
from core.schema.type_registry import TypeDefinition, TypeRegistry

__all__ = [
    # Dumper
    "SchemaDumper",
    "DumpResult",
    "TableSerializer",
    "TableResult",
    "IndexSerializer",
    # Building blocks
    "TypeClassifier",
    "ColumnSpec",
    "ColumnSpecBuilder",
    "ColumnFormatter",
    "TypeDefinition",
    "TypeRegistry",
    # Extensions
    "ColumnTypeExtension",
    "SpatialExtension",
    # Metadata sources
    "MetadataSource",
    "InMemoryMetadataSource",
    # Helpers
    "extract_limit",
    "extract_precision",
    "extract_scale",
    "default_literal",
    "quote_string",
    "quote_list",
]
