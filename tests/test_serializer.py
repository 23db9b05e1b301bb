# ============================================================================
# TABLE & INDEX SERIALIZER TESTS
# ============================================================================
# STATUS: Tests - Per-table rendering
# PURPOSE: Verify create_table blocks, add_index lines and failure isolation
# LAST_REVIEWED: 17 OCT 2026
# ============================================================================
"""
Table & Index Serializer Tests

Covers:
1. Full table output (locations scenario)
2. create_table header variants (:primary_key, :id => false, :force)
3. add_index qualifiers (:unique, :spatial)
4. Per-table failure isolation (comment block)

Run with:
    pytest tests/test_serializer.py -v
"""

import io

import pytest

from core.errors import MetadataSourceError
from core.models import IndexModel
from core.schema.metadata_source import InMemoryMetadataSource
from core.schema.serializer import IndexSerializer, TableResult
from core.schema.dumper import SchemaDumper
from core.schema.spatial import SpatialExtension


# ============================================================================
# HELPERS
# ============================================================================

LOCATIONS_TABLE = {
    "primary_key": "id",
    "columns": [
        {"name": "id", "sql_type": "integer", "null": False},
        {"name": "name", "sql_type": "character varying(255)", "null": False},
        {"name": "geom", "sql_type": "POINT", "srid": -1},
    ],
    "indexes": [
        {"name": "index_locations_on_geom", "columns": ["geom"], "spatial": True},
    ],
}

LOCATIONS_OUTPUT = (
    '  create_table "locations", :force => true do |t|\n'
    '    t.string "name", :limit => 255, :null => false\n'
    '    t.point  "geom"\n'
    "  end\n"
    "\n"
    '  add_index "locations", ["geom"], :name => "index_locations_on_geom", :spatial=> true \n'
    "\n"
)


def _make_source(tables):
    return InMemoryMetadataSource.from_dict({"tables": tables})


def _make_serializer(source, **kwargs):
    return SchemaDumper(source, extensions=[SpatialExtension()], **kwargs).table_serializer


class _FailingIndexSource(InMemoryMetadataSource):
    """Source whose index query fails with a given exception."""

    def __init__(self, error, **kwargs):
        super().__init__(**kwargs)
        self.error = error

    def indexes(self, table):
        raise self.error


# ============================================================================
# TABLE OUTPUT
# ============================================================================

class TestTableOutput:

    def test_locations_scenario(self):
        source = _make_source({"locations": LOCATIONS_TABLE})
        assert _make_serializer(source).serialize("locations", source) == LOCATIONS_OUTPUT

    def test_render_result(self):
        source = _make_source({"locations": LOCATIONS_TABLE})
        text, result = _make_serializer(source).render("locations", source)

        assert text == LOCATIONS_OUTPUT
        assert result == TableResult(table="locations", success=True, column_count=2, index_count=1)

    def test_spatial_attributes_rendered(self):
        source = _make_source({
            "parcels": {
                "columns": [
                    {"name": "id", "sql_type": "integer"},
                    {"name": "code", "sql_type": "varchar(12)", "null": False},
                    {"name": "boundary", "sql_type": "MULTIPOLYGON", "srid": 4326, "with_z": True},
                ],
            },
        })
        text = _make_serializer(source).serialize("parcels", source)

        # name width 12, limit width 14, null width 16
        assert text == (
            '  create_table "parcels", :force => true do |t|\n'
            '    t.string' + " " * 8 + '"code",' + " " * 5 + ":limit => 12, :null => false\n"
            '    t.multi_polygon "boundary",' + " " * 31 + ":srid => 4326, :with_z => true\n"
            "  end\n"
            "\n"
        )

    def test_only_primary_key(self):
        source = _make_source({"tags": {"columns": [{"name": "id", "sql_type": "integer"}]}})
        assert _make_serializer(source).serialize("tags", source) == (
            '  create_table "tags", :force => true do |t|\n'
            "  end\n"
            "\n"
        )

    def test_no_trailing_blank_without_indexes(self):
        source = _make_source({"tags": {"columns": [
            {"name": "id", "sql_type": "integer"},
            {"name": "label", "sql_type": "text"},
        ]}})
        text = _make_serializer(source).serialize("tags", source)
        assert text.endswith("  end\n\n")
        assert "add_index" not in text


# ============================================================================
# HEADER
# ============================================================================

class TestCreateTableHeader:

    def test_custom_primary_key(self):
        source = _make_source({"roads": {
            "primary_key": "gid",
            "columns": [
                {"name": "gid", "sql_type": "integer"},
                {"name": "geom", "sql_type": "LINESTRING", "srid": 4326},
            ],
        }})
        text = _make_serializer(source).serialize("roads", source)
        assert text.startswith('  create_table "roads", :primary_key => "gid", :force => true do |t|\n')
        assert '"gid"' not in text.splitlines()[1]

    def test_no_primary_key_column(self):
        source = _make_source({"links": {"columns": [
            {"name": "a_id", "sql_type": "integer"},
            {"name": "b_id", "sql_type": "integer"},
        ]}})
        text = _make_serializer(source).serialize("links", source)
        assert text.startswith('  create_table "links", :id => false, :force => true do |t|\n')
        assert '    t.integer "a_id"\n' in text

    def test_without_force(self):
        source = _make_source({"locations": LOCATIONS_TABLE})
        text = _make_serializer(source, force=False).serialize("locations", source)
        assert text.startswith('  create_table "locations" do |t|\n')


# ============================================================================
# INDEXES
# ============================================================================

class TestIndexSerializer:

    @pytest.fixture
    def serializer(self):
        return IndexSerializer(extensions=[SpatialExtension()])

    def test_plain(self, serializer):
        index = IndexModel(table="roads", name="index_roads_on_name", columns=["name"])
        assert serializer.statement(index) == '  add_index "roads", ["name"], :name => "index_roads_on_name"'

    def test_unique_multi_column(self, serializer):
        index = IndexModel(table="t", name="idx", columns=["a", "b"], unique=True)
        assert serializer.statement(index) == '  add_index "t", ["a", "b"], :name => "idx", :unique => true'

    def test_spatial_qualifier_text(self, serializer):
        index = IndexModel(
            table="locations", name="index_locations_on_geom", columns=["geom"], spatial=True
        )
        assert serializer.statement(index) == (
            '  add_index "locations", ["geom"], :name => "index_locations_on_geom", :spatial=> true '
        )

    def test_unique_before_spatial(self, serializer):
        index = IndexModel(table="t", name="idx", columns=["geom"], unique=True, spatial=True)
        assert serializer.statement(index).endswith(", :unique => true, :spatial=> true ")

    def test_spatial_ignored_without_extension(self):
        index = IndexModel(table="t", name="idx", columns=["geom"], spatial=True)
        assert IndexSerializer().statement(index) == '  add_index "t", ["geom"], :name => "idx"'

    def test_order_preserved_with_blank_line(self, serializer):
        indexes = [
            IndexModel(table="t", name="b_idx", columns=["b"]),
            IndexModel(table="t", name="a_idx", columns=["a"]),
        ]
        lines = serializer.serialize(indexes)

        assert [line.split(":name => ")[1] for line in lines[:2]] == ['"b_idx"', '"a_idx"']
        assert lines[-1] == ""
        assert len(lines) == 3

    def test_empty(self, serializer):
        assert serializer.serialize([]) == []


# ============================================================================
# FAILURE ISOLATION
# ============================================================================

class TestFailureIsolation:

    def test_unknown_type_comment_block(self):
        source = _make_source({"events": {"columns": [
            {"name": "id", "sql_type": "integer"},
            {"name": "status", "sql_type": "enum_status"},
        ]}})
        stream = io.StringIO()
        result = _make_serializer(source).dump_table("events", source, stream)

        assert stream.getvalue() == (
            '  # Could not dump table "events" because of following UnrenderableTypeError\n'
            "  #   Unknown type 'enum_status' for column 'status'\n"
            "\n"
        )
        assert result.success is False
        assert result.error_kind == "UnrenderableTypeError"

    def test_metadata_error_comment_block(self):
        error = MetadataSourceError("fetch indexes failed for roads: timeout", table="roads")
        source = _FailingIndexSource(
            error,
            columns={"roads": []},
        )
        text = _make_serializer(source).serialize("roads", source)

        assert text == (
            '  # Could not dump table "roads" because of following MetadataSourceError\n'
            "  #   fetch indexes failed for roads: timeout\n"
            "\n"
        )

    def test_unexpected_error_comment_block(self):
        source = _FailingIndexSource(RuntimeError("boom"), columns={"roads": []})
        text = _make_serializer(source).serialize("roads", source)
        assert text.startswith('  # Could not dump table "roads" because of following RuntimeError\n')

    def test_partial_output_discarded(self):
        source = _FailingIndexSource(
            RuntimeError("boom"),
            columns={"roads": _make_source({"roads": LOCATIONS_TABLE}).columns("roads")},
        )
        text = _make_serializer(source).serialize("roads", source)
        assert "create_table" not in text
        assert "t.string" not in text

    def test_missing_table(self):
        source = _make_source({})
        text = _make_serializer(source).serialize("ghost", source)
        assert "because of following MetadataSourceError" in text
