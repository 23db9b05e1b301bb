# ============================================================================
# INFRASTRUCTURE MODULE
# ============================================================================
# STATUS: Infrastructure - Database connectivity and schema export
# PURPOSE: Live PostGIS introspection feeding the schema dumper
# LAST_REVIEWED: 17 OCT 2026
# ============================================================================
"""
Infrastructure module for the spatial schema dumper.

Provides:
- PostgreSQLRepository: Connection handling (DATABASE_URL, password, managed identity)
- PostGISMetadataSource: MetadataSource over the PostgreSQL catalogs
- SchemaExporter: Connection test + dump + write, with step results
- export_schema: Convenience function for scripts

Usage:
    from infrastructure import SchemaExporter

    exporter = SchemaExporter(schema_name="public")
    result = exporter.export(output_path="db/schema.rb")
    print(result.to_dict()["summary"])
"""

from infrastructure.base_repository import BaseRepository
from infrastructure.postgresql import ConnectionSettings, PostgreSQLRepository
from infrastructure.postgis_source import (
    PostGISMetadataSource,
    parse_default,
    geometry_dimensions,
)
from infrastructure.schema_exporter import (
    SchemaExporter,
    ExportResult,
    StepResult,
    export_schema,
)

__all__ = [
    # Repositories
    "BaseRepository",
    "ConnectionSettings",
    "PostgreSQLRepository",
    # Metadata source
    "PostGISMetadataSource",
    "parse_default",
    "geometry_dimensions",
    # Export
    "SchemaExporter",
    "ExportResult",
    "StepResult",
    "export_schema",
]
