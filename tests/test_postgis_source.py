# ============================================================================
# POSTGIS METADATA SOURCE TESTS
# ============================================================================
# STATUS: Tests - Live introspection against a mocked repository
# PURPOSE: Verify catalog row mapping, geometry merging and error wrapping
# LAST_REVIEWED: 17 OCT 2026
# ============================================================================
"""
PostGIS Metadata Source Tests

The PostgreSQLRepository is replaced by a MagicMock; no database is needed.

Run with:
    pytest tests/test_postgis_source.py -v
"""

from decimal import Decimal
from unittest.mock import MagicMock

import pytest
from psycopg import errors

from core.errors import MetadataSourceError
from core.schema.dumper import SchemaDumper
from core.schema.spatial import SpatialExtension
from infrastructure.postgis_source import (
    GEOMETRY_COLUMNS_SQL,
    PostGISMetadataSource,
    geometry_dimensions,
    parse_default,
)


# ============================================================================
# HELPERS
# ============================================================================

def _make_repo():
    repo = MagicMock()
    repo.schema_name = "public"
    repo.fetch_one.return_value = {"present": True}
    return repo


def _make_source(repo=None):
    return PostGISMetadataSource(repo or _make_repo(), schema_name="public")


LOCATIONS_COLUMN_ROWS = [
    {"name": "id", "sql_type": "integer", "nullable": False,
     "default_expr": "nextval('locations_id_seq'::regclass)"},
    {"name": "name", "sql_type": "character varying(255)", "nullable": False, "default_expr": None},
    {"name": "geom", "sql_type": "geometry(Point)", "nullable": True, "default_expr": None},
]

LOCATIONS_GEOMETRY_ROWS = [
    {"column_name": "geom", "geometry_type": "POINT", "srid": 0, "coord_dimension": 2},
]

LOCATIONS_INDEX_ROWS = [
    {"index_name": "index_locations_on_geom", "is_unique": False, "method": "gist", "columns": ["geom"]},
]


# ============================================================================
# DEFAULT EXPRESSIONS
# ============================================================================

class TestParseDefault:

    @pytest.mark.parametrize("expression,expected", [
        (None, None),
        ("'abc'::character varying", "abc"),
        ("'it''s'::text", "it's"),
        ("42", 42),
        ("(-1)", -1),
        ("0::smallint", 0),
        ("1.5", Decimal("1.5")),
        ("(-1.5)::numeric", Decimal("-1.5")),
        ("true", True),
        ("false", False),
        ("nextval('locations_id_seq'::regclass)", None),
        ("now()", None),
        ("NULL::character varying", None),
    ])
    def test_expressions(self, expression, expected):
        assert parse_default(expression) == expected


class TestGeometryDimensions:

    @pytest.mark.parametrize("geometry_type,coord_dimension,expected", [
        ("POINT", 2, ("POINT", False, False)),
        ("POINT", 3, ("POINT", True, False)),
        ("POINTM", 3, ("POINT", False, True)),
        ("MULTIPOLYGON", 4, ("MULTIPOLYGON", True, True)),
        ("geometry", None, ("GEOMETRY", False, False)),
    ])
    def test_dimensions(self, geometry_type, coord_dimension, expected):
        assert geometry_dimensions(geometry_type, coord_dimension) == expected


# ============================================================================
# CATALOG MAPPING
# ============================================================================

class TestColumns:

    def test_scalar_and_geometry_columns(self):
        repo = _make_repo()
        repo.fetch_all.side_effect = [LOCATIONS_COLUMN_ROWS, LOCATIONS_GEOMETRY_ROWS]

        columns = _make_source(repo).columns("locations")

        assert [c.name for c in columns] == ["id", "name", "geom"]
        assert columns[0].default is None
        assert columns[1].null is False
        assert columns[1].sql_type == "character varying(255)"
        assert columns[2].sql_type == "POINT"
        assert columns[2].srid == -1

    def test_geometry_srid_and_dimensions(self):
        repo = _make_repo()
        repo.fetch_all.side_effect = [
            [{"name": "geom", "sql_type": "geometry(MultiPolygonZ,4326)", "nullable": True, "default_expr": None}],
            [{"column_name": "geom", "geometry_type": "MULTIPOLYGON", "srid": 4326, "coord_dimension": 3}],
        ]

        column = _make_source(repo).columns("parcels")[0]

        assert column.sql_type == "MULTIPOLYGON"
        assert column.srid == 4326
        assert column.with_z is True
        assert column.with_m is False

    def test_queries_scoped_to_schema_and_table(self):
        repo = _make_repo()
        repo.fetch_all.side_effect = [[], []]

        _make_source(repo).columns("locations")

        for call in repo.fetch_all.call_args_list:
            assert call.args[1] == ("public", "locations")


class TestIndexesAndKeys:

    def test_gist_index_is_spatial(self):
        repo = _make_repo()
        repo.fetch_all.return_value = LOCATIONS_INDEX_ROWS + [
            {"index_name": "index_locations_on_name", "is_unique": True, "method": "btree", "columns": ["name"]},
        ]

        indexes = _make_source(repo).indexes("locations")

        assert indexes[0].spatial is True
        assert indexes[0].unique is False
        assert indexes[0].table == "locations"
        assert indexes[1].spatial is False
        assert indexes[1].unique is True

    def test_single_column_primary_key(self):
        repo = _make_repo()
        repo.fetch_all.return_value = [{"column_name": "gid"}]
        assert _make_source(repo).primary_key("roads") == "gid"

    def test_composite_primary_key_is_none(self):
        repo = _make_repo()
        repo.fetch_all.return_value = [{"column_name": "a_id"}, {"column_name": "b_id"}]
        assert _make_source(repo).primary_key("links") is None

    def test_tables(self):
        repo = _make_repo()
        repo.fetch_all.return_value = [{"table_name": "locations"}, {"table_name": "roads"}]
        assert _make_source(repo).tables() == ["locations", "roads"]


class TestSchemaVersion:

    def test_version_present(self):
        repo = _make_repo()
        repo.fetch_one.side_effect = [{"present": True}, {"version": "20261017120000"}]
        assert _make_source(repo).schema_version() == "20261017120000"

    def test_no_version_table(self):
        repo = _make_repo()
        repo.fetch_one.return_value = {"present": False}

        assert _make_source(repo).schema_version() is None
        assert repo.fetch_one.call_count == 1

    def test_empty_version_table(self):
        repo = _make_repo()
        repo.fetch_one.side_effect = [{"present": True}, {"version": None}]
        assert _make_source(repo).schema_version() is None


# ============================================================================
# ERROR HANDLING
# ============================================================================

class TestErrorWrapping:

    def test_query_failure_wrapped(self):
        repo = _make_repo()
        cause = RuntimeError("connection refused")
        repo.fetch_all.side_effect = cause

        with pytest.raises(MetadataSourceError) as exc_info:
            _make_source(repo).columns("locations")

        assert exc_info.value.table == "locations"
        assert exc_info.value.operation == "fetch columns"
        assert exc_info.value.__cause__ is cause
        assert "connection refused" in str(exc_info.value)

    def test_failing_table_isolated_in_dump(self):
        repo = _make_repo()
        repo.fetch_one.side_effect = lambda query, params=None: {"present": params == ("geometry_columns",)}

        def fetch_all(query, params=None):
            if "pg_class c" in query and "relkind" in query:
                return [{"table_name": "broken"}, {"table_name": "locations"}]
            if params and params[1] == "broken":
                raise RuntimeError("permission denied")
            if "format_type" in query:
                return LOCATIONS_COLUMN_ROWS
            if "geometry_columns" in query:
                return LOCATIONS_GEOMETRY_ROWS
            if "pg_am" in query:
                return LOCATIONS_INDEX_ROWS
            return [{"column_name": "id"}]

        repo.fetch_all.side_effect = fetch_all

        text = SchemaDumper(_make_source(repo), extensions=[SpatialExtension()]).dumps()

        assert '  # Could not dump table "broken" because of following MetadataSourceError\n' in text
        assert "permission denied" in text
        assert '    t.point  "geom"\n' in text
        assert ', :spatial=> true \n' in text


# ============================================================================
# DATABASES WITHOUT POSTGIS
# ============================================================================

class TestWithoutPostGIS:

    def _make_plain_repo(self):
        repo = _make_repo()
        repo.fetch_one.return_value = {"present": False}

        def fetch_all(query, params=None):
            if query == GEOMETRY_COLUMNS_SQL:
                raise errors.UndefinedTable('relation "geometry_columns" does not exist')
            if "relkind" in query:
                return [{"table_name": "posts"}]
            if "format_type" in query:
                return [
                    {"name": "id", "sql_type": "integer", "nullable": False, "default_expr": None},
                    {"name": "title", "sql_type": "character varying(120)", "nullable": False,
                     "default_expr": None},
                ]
            if "pg_am" in query:
                return []
            return [{"column_name": "id"}]

        repo.fetch_all.side_effect = fetch_all
        return repo

    def test_geometry_lookup_skipped(self):
        repo = self._make_plain_repo()
        source = _make_source(repo)

        columns = source.columns("posts")

        assert [c.name for c in columns] == ["id", "title"]
        assert source.has_geometry_columns is False
        queries = [call.args[0] for call in repo.fetch_all.call_args_list]
        assert GEOMETRY_COLUMNS_SQL not in queries

    def test_existence_checked_once(self):
        repo = self._make_plain_repo()
        source = _make_source(repo)

        source.columns("posts")
        source.columns("posts")

        assert repo.fetch_one.call_count == 1
        assert repo.fetch_one.call_args.args[1] == ("geometry_columns",)

    def test_scalar_tables_still_dumped(self):
        text = SchemaDumper(
            _make_source(self._make_plain_repo()), extensions=[SpatialExtension()]
        ).dumps()

        assert "Could not dump table" not in text
        assert '  create_table "posts", :force => true do |t|\n' in text
        assert '    t.string "title", :limit => 120, :null => false\n' in text
