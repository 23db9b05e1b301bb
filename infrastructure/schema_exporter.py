# ============================================================================
# SCHEMA EXPORTER
# ============================================================================
# STATUS: Infrastructure - Schema dump orchestrator
# PURPOSE: Dump a live PostGIS schema to a definition file or stream
# LAST_REVIEWED: 17 OCT 2026
# ============================================================================
"""
SchemaExporter - snapshot a live database schema into a definition file.

Workflow:
1. Connection test
2. Schema dump (SchemaDumper + SpatialExtension over PostGISMetadataSource)
3. Output write (file or stream); skipped when the dump itself fails

Usage:
    from infrastructure import SchemaExporter

    exporter = SchemaExporter(schema_name="public")
    result = exporter.export(output_path="db/schema.rb")

    # Print to stdout instead
    result = exporter.export(stream=sys.stdout)
"""

import io
import logging
import traceback
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, TextIO, Union

from core.config.defaults import DumperDefaults, IgnoreRule, get_defaults
from core.schema.dumper import DumpResult, SchemaDumper
from core.schema.extensions import ColumnTypeExtension
from core.schema.metadata_source import MetadataSource
from core.schema.spatial import SpatialExtension

logger = logging.getLogger(__name__)


# ============================================================================
# DATA CLASSES
# ============================================================================

@dataclass
class StepResult:
    """Result of a single export step."""
    name: str
    status: str  # 'success', 'failed', 'skipped'
    message: str = ""
    error: Optional[str] = None
    details: Dict[str, Any] = field(default_factory=dict)


@dataclass
class ExportResult:
    """Complete result of a schema export."""
    database_host: str
    database_name: str
    schema_name: str
    timestamp: str
    success: bool
    output: Optional[str] = None
    steps: List[StepResult] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    dump: Optional[DumpResult] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "database_host": self.database_host,
            "database_name": self.database_name,
            "schema_name": self.schema_name,
            "timestamp": self.timestamp,
            "success": self.success,
            "output": self.output,
            "steps": [
                {
                    "name": s.name,
                    "status": s.status,
                    "message": s.message,
                    "error": s.error,
                    "details": s.details,
                }
                for s in self.steps
            ],
            "errors": self.errors,
            "warnings": self.warnings,
            "dump": self.dump.to_dict() if self.dump else None,
            "summary": {
                "total_steps": len(self.steps),
                "successful": len([s for s in self.steps if s.status == "success"]),
                "failed": len([s for s in self.steps if s.status == "failed"]),
                "skipped": len([s for s in self.steps if s.status == "skipped"]),
            },
        }


# ============================================================================
# SCHEMA EXPORTER
# ============================================================================

class SchemaExporter:
    """
    Export orchestrator.

    The metadata source is created lazily from the connection settings
    unless one is passed in (tests, snapshots).
    """

    def __init__(
        self,
        connection_string: Optional[str] = None,
        schema_name: Optional[str] = None,
        source: Optional[MetadataSource] = None,
        extensions: Optional[Sequence[ColumnTypeExtension]] = None,
        dialect: Optional[str] = None,
        ignore_tables: Sequence[IgnoreRule] = (),
    ):
        defaults = get_defaults()

        self.connection_string = connection_string
        self.schema_name = schema_name or defaults.database.schema_name
        self.extensions = list(extensions) if extensions is not None else [SpatialExtension()]
        self.dumper_defaults = DumperDefaults(
            dialect=dialect or defaults.dumper.dialect,
            default_primary_key=defaults.dumper.default_primary_key,
            force=defaults.dumper.force,
            ignore_tables=tuple(defaults.dumper.ignore_tables) + tuple(ignore_tables),
        )

        self._repo = None
        self._source = source

        logger.info(f"SchemaExporter created for {self.host}/{self.database} schema={self.schema_name}")

    @property
    def repo(self):
        """Get PostgreSQL repository (lazy initialization)."""
        if self._repo is None:
            from infrastructure.postgresql import PostgreSQLRepository
            self._repo = PostgreSQLRepository(
                connection_string=self.connection_string,
                schema_name=self.schema_name,
                connect_timeout=get_defaults().database.connect_timeout,
            )
        return self._repo

    @property
    def source(self) -> MetadataSource:
        """Get metadata source (lazy initialization)."""
        if self._source is None:
            from infrastructure.postgis_source import PostGISMetadataSource
            self._source = PostGISMetadataSource(
                self.repo,
                schema_name=self.schema_name,
                version_table=get_defaults().database.version_table,
            )
        return self._source

    @property
    def host(self) -> str:
        if self._source is not None and self._repo is None:
            return "in-memory"
        return self.repo.host

    @property
    def database(self) -> str:
        if self._source is not None and self._repo is None:
            return "snapshot"
        return self.repo.database

    def build_dumper(self) -> SchemaDumper:
        return SchemaDumper.from_defaults(
            self.source,
            extensions=self.extensions,
            defaults=self.dumper_defaults,
        )

    # ========================================================================
    # EXPORT
    # ========================================================================

    def export(
        self,
        output_path: Optional[Union[str, Path]] = None,
        stream: Optional[TextIO] = None,
    ) -> ExportResult:
        """
        Dump the schema and write it out.

        Args:
            output_path: File to write (parent directories are created)
            stream: Stream to write to when no output_path is given

        Returns:
            ExportResult with detailed step results
        """
        result = ExportResult(
            database_host=self.host,
            database_name=self.database,
            schema_name=self.schema_name,
            timestamp=datetime.now(timezone.utc).isoformat(),
            success=False,
            output=str(output_path) if output_path else None,
        )

        logger.info("=" * 70)
        logger.info("SCHEMA EXPORT")
        logger.info(f"   Source: {self.host}/{self.database}")
        logger.info(f"   Schema: {self.schema_name}")
        logger.info(f"   Output: {output_path or 'stream'}")
        logger.info("=" * 70)

        try:
            # Step 1: Test connection
            step_result = self._test_connection()
            result.steps.append(step_result)
            if step_result.status == "failed":
                result.errors.append(f"Connection failed: {step_result.error}")
                return result

            # Step 2: Dump schema
            buffer = io.StringIO()
            step_result = self._dump_schema(buffer, result)
            result.steps.append(step_result)
            if step_result.status == "failed":
                result.errors.append(f"Schema dump failed: {step_result.error}")
                result.steps.append(StepResult(
                    name="write_output",
                    status="skipped",
                    message="Nothing to write",
                ))
                return result

            # Step 3: Write output
            step_result = self._write_output(buffer.getvalue(), output_path, stream)
            result.steps.append(step_result)
            if step_result.status == "failed":
                result.errors.append(f"Write failed: {step_result.error}")

            result.success = all(s.status != "failed" for s in result.steps)

        except Exception as e:
            logger.error(f"Export failed: {e}")
            logger.error(traceback.format_exc())
            result.errors.append(str(e))
            result.success = False

        summary = result.to_dict()["summary"]
        logger.info("=" * 70)
        logger.info(f"EXPORT {'COMPLETE' if result.success else 'FAILED'}")
        logger.info(f"   Steps: {summary['successful']} succeeded, {summary['failed']} failed")
        if result.warnings:
            logger.warning(f"   Warnings: {result.warnings}")
        if result.errors:
            logger.warning(f"   Errors: {result.errors}")
        logger.info("=" * 70)

        return result

    def _test_connection(self) -> StepResult:
        """Test database connection (skipped for injected sources)."""
        step = StepResult(name="test_connection", status="pending")

        if self._source is not None and self._repo is None:
            step.status = "skipped"
            step.message = "Using provided metadata source"
            return step

        logger.info("Step: Testing database connection...")

        try:
            row = self.repo.fetch_one(
                "SELECT version() AS version, current_database() AS db, "
                "(SELECT extversion FROM pg_extension WHERE extname = 'postgis') AS postgis"
            )
            step.status = "success"
            step.message = f"Connected to {row['db']}"
            step.details = {
                "version": row["version"][:50] + "...",
                "database": row["db"],
                "postgis": row["postgis"],
            }
            if not row["postgis"]:
                logger.warning("PostGIS extension not installed; geometry columns will not be detected")

        except Exception as e:
            step.status = "failed"
            step.error = str(e)
            step.message = f"Connection failed: {e}"
            logger.error(f"Connection test failed: {e}")

        logger.info(f"   Result: {step.status} - {step.message}")
        return step

    def _dump_schema(self, buffer: TextIO, result: ExportResult) -> StepResult:
        """Render the schema definition into ``buffer``."""
        step = StepResult(name="dump_schema", status="pending")

        logger.info(f"Step: Dumping {self.schema_name} schema...")

        try:
            dump = self.build_dumper().dump(buffer)
            result.dump = dump

            summary = dump.to_dict()["summary"]
            step.status = "success"
            step.message = (
                f"Dumped {summary['dumped']} tables "
                f"({summary['failed']} failed, {summary['ignored']} ignored)"
            )
            step.details = {
                "version": dump.version,
                "failed_tables": dump.failed_tables,
                "ignored_tables": dump.ignored,
            }
            for table in dump.tables:
                if not table.success:
                    result.warnings.append(f"{table.table}: {table.error_kind}: {table.error}")

        except Exception as e:
            step.status = "failed"
            step.error = str(e)
            step.message = f"Schema dump failed: {e}"
            logger.error(f"Schema dump failed: {e}")
            logger.error(traceback.format_exc())

        logger.info(f"   Result: {step.status} - {step.message}")
        return step

    def _write_output(
        self,
        text: str,
        output_path: Optional[Union[str, Path]],
        stream: Optional[TextIO],
    ) -> StepResult:
        step = StepResult(name="write_output", status="pending")

        try:
            if output_path:
                path = Path(output_path)
                path.parent.mkdir(parents=True, exist_ok=True)
                path.write_text(text, encoding="utf-8")
                step.message = f"Wrote {len(text)} bytes to {path}"
            elif stream is not None:
                stream.write(text)
                step.message = f"Wrote {len(text)} bytes to stream"
            else:
                step.status = "skipped"
                step.message = "No output configured"
                return step

            step.status = "success"
            step.details = {"bytes": len(text)}

        except OSError as e:
            step.status = "failed"
            step.error = str(e)
            step.message = f"Write failed: {e}"
            logger.error(f"Write failed: {e}")

        return step


# ============================================================================
# CONVENIENCE FUNCTION
# ============================================================================

def export_schema(
    output_path: Optional[Union[str, Path]] = None,
    schema_name: Optional[str] = None,
) -> ExportResult:
    """
    Export a live schema with environment-driven settings.

    Convenience function for scripts.
    """
    exporter = SchemaExporter(schema_name=schema_name)
    return exporter.export(output_path=output_path)


__all__ = [
    "SchemaExporter",
    "ExportResult",
    "StepResult",
    "export_schema",
]
