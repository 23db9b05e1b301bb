# ============================================================================
# SCHEMA EXPORTER TESTS
# ============================================================================
# STATUS: Tests - Export orchestration
# PURPOSE: Verify export steps, output targets and result reporting
# LAST_REVIEWED: 17 OCT 2026
# ============================================================================
"""
Schema Exporter Tests

Covers:
1. Export to a stream and to a file
2. Step results (connection test skipped for injected sources)
3. Failed tables reported as warnings, not errors
4. Listing failure fails the dump step and skips the write
5. Connection test against a mocked repository

Run with:
    pytest tests/test_exporter.py -v
"""

import io
from unittest.mock import MagicMock

import pytest

from core.config.defaults import reset_defaults
from core.errors import MetadataSourceError
from core.schema.dumper import SchemaDumper
from core.schema.metadata_source import InMemoryMetadataSource, MetadataSource
from core.schema.spatial import SpatialExtension
from infrastructure.schema_exporter import SchemaExporter


# ============================================================================
# FIXTURES
# ============================================================================

@pytest.fixture(autouse=True)
def clean_defaults(monkeypatch):
    monkeypatch.delenv("SCHEMA_DUMP_IGNORE_TABLES", raising=False)
    monkeypatch.delenv("SCHEMA_DUMP_DIALECT", raising=False)
    reset_defaults()
    yield
    reset_defaults()


SNAPSHOT = {
    "version": "20261017120000",
    "tables": {
        "locations": {
            "columns": [
                {"name": "id", "sql_type": "integer"},
                {"name": "geom", "sql_type": "POINT", "srid": 4326},
            ],
            "indexes": [
                {"name": "index_locations_on_geom", "columns": ["geom"], "spatial": True},
            ],
        },
        "events": {
            "columns": [{"name": "status", "sql_type": "enum_status"}],
        },
    },
}


def _make_exporter(snapshot=SNAPSHOT, **kwargs):
    return SchemaExporter(source=InMemoryMetadataSource.from_dict(snapshot), **kwargs)


def _step(result, name):
    return next(s for s in result.steps if s.name == name)


# ============================================================================
# EXPORT
# ============================================================================

class TestExport:

    def test_export_to_stream(self):
        stream = io.StringIO()
        result = _make_exporter().export(stream=stream)

        expected = SchemaDumper(
            InMemoryMetadataSource.from_dict(SNAPSHOT), extensions=[SpatialExtension()]
        ).dumps()
        assert stream.getvalue() == expected
        assert result.success is True

    def test_export_to_file(self, tmp_path):
        output = tmp_path / "db" / "schema.rb"
        result = _make_exporter().export(output_path=output)

        assert result.success is True
        assert result.output == str(output)
        text = output.read_text(encoding="utf-8")
        assert text.startswith("# This file is auto-generated")
        assert '    t.point "geom", :srid => 4326\n' in text

    def test_steps(self):
        result = _make_exporter().export(stream=io.StringIO())

        assert [s.name for s in result.steps] == ["test_connection", "dump_schema", "write_output"]
        assert _step(result, "test_connection").status == "skipped"
        assert _step(result, "dump_schema").status == "success"
        assert _step(result, "write_output").status == "success"
        assert result.database_host == "in-memory"

    def test_failed_table_is_warning(self):
        result = _make_exporter().export(stream=io.StringIO())

        assert result.success is True
        assert result.errors == []
        assert len(result.warnings) == 1
        assert result.warnings[0].startswith("events: UnrenderableTypeError")
        assert result.dump.failed_tables == ["events"]

    def test_ignore_tables(self):
        stream = io.StringIO()
        result = _make_exporter(ignore_tables=["events"]).export(stream=stream)

        assert '"events"' not in stream.getvalue()
        assert result.warnings == []
        assert "events" in result.dump.ignored

    def test_no_output_configured(self):
        result = _make_exporter().export()
        assert _step(result, "write_output").status == "skipped"
        assert result.success is True


# ============================================================================
# FAILURES
# ============================================================================

class TestExportFailures:

    def test_listing_failure_skips_write(self):
        source = MagicMock(spec=MetadataSource)
        source.schema_version.return_value = None
        source.tables.side_effect = MetadataSourceError("list tables failed: refused")
        stream = io.StringIO()

        result = SchemaExporter(source=source).export(stream=stream)

        assert result.success is False
        assert _step(result, "dump_schema").status == "failed"
        assert _step(result, "write_output").status == "skipped"
        assert stream.getvalue() == ""
        assert "refused" in result.errors[0]

    def test_connection_failure(self):
        repo = MagicMock()
        repo.host = "db.example"
        repo.database = "gis"
        repo.fetch_one.side_effect = RuntimeError("could not connect")

        exporter = SchemaExporter(source=MagicMock(spec=MetadataSource))
        exporter._repo = repo

        result = exporter.export(stream=io.StringIO())

        assert result.success is False
        assert [s.name for s in result.steps] == ["test_connection"]
        assert result.errors == ["Connection failed: could not connect"]

    def test_connection_success(self):
        repo = MagicMock()
        repo.host = "db.example"
        repo.database = "gis"
        repo.fetch_one.return_value = {"version": "PostgreSQL 16.2", "db": "gis", "postgis": "3.4.2"}

        exporter = SchemaExporter(source=InMemoryMetadataSource.from_dict(SNAPSHOT))
        exporter._repo = repo

        result = exporter.export(stream=io.StringIO())

        step = _step(result, "test_connection")
        assert step.status == "success"
        assert step.details["postgis"] == "3.4.2"
        assert result.database_host == "db.example"


# ============================================================================
# RESULT SERIALIZATION
# ============================================================================

class TestExportResult:

    def test_to_dict(self):
        result = _make_exporter().export(stream=io.StringIO())
        data = result.to_dict()

        assert data["success"] is True
        assert data["summary"] == {
            "total_steps": 3,
            "successful": 2,
            "failed": 0,
            "skipped": 1,
        }
        assert data["dump"]["version"] == "20261017120000"
        assert data["dump"]["summary"]["failed"] == 1
