# ============================================================================
# POSTGIS METADATA SOURCE
# ============================================================================
# STATUS: Infrastructure - Live schema introspection
# PURPOSE: Read columns, geometry metadata, indexes and keys from PostGIS
# LAST_REVIEWED: 17 OCT 2026
# EXPORTS: PostGISMetadataSource, parse_default, geometry_dimensions
# DEPENDENCIES: psycopg
# ============================================================================
"""
PostGIS Metadata Source

MetadataSource over the PostgreSQL system catalogs:

    columns      pg_attribute + format_type + pg_attrdef
    geometry     geometry_columns (type, srid, coord_dimension); skipped when
                 the view does not exist (no PostGIS)
    indexes      pg_index + pg_am (GiST -> spatial)
    primary key  pg_index.indisprimary
    version      max(version) from schema_migrations, if present

Geometry columns get their raw type from ``geometry_columns.type``
(``POINT``, ``MULTIPOLYGON``...) rather than ``format_type`` (which says
``geometry(Point,4326)``), so the classifier sees the exact subtype.

Dimensions:
    type ending in M             -> with_m
    coord_dimension 3, no M      -> with_z
    coord_dimension 4            -> with_z and with_m
"""

import re
from decimal import Decimal
from typing import Any, Dict, List, Optional, Tuple

from psycopg import sql

from core.models.column import UNSPECIFIED_SRID, ColumnDescriptor
from core.models.index import IndexModel
from core.schema.metadata_source import MetadataSource
from infrastructure.base_repository import BaseRepository
from infrastructure.postgresql import PostgreSQLRepository


# ============================================================================
# QUERIES
# ============================================================================

TABLES_SQL = """
    SELECT c.relname AS table_name
    FROM pg_class c
    JOIN pg_namespace n ON n.oid = c.relnamespace
    WHERE n.nspname = %s AND c.relkind IN ('r', 'p')
    ORDER BY c.relname
"""

COLUMNS_SQL = """
    SELECT a.attname AS name,
           format_type(a.atttypid, a.atttypmod) AS sql_type,
           NOT a.attnotnull AS nullable,
           pg_get_expr(d.adbin, d.adrelid) AS default_expr
    FROM pg_attribute a
    JOIN pg_class c ON c.oid = a.attrelid
    JOIN pg_namespace n ON n.oid = c.relnamespace
    LEFT JOIN pg_attrdef d ON d.adrelid = a.attrelid AND d.adnum = a.attnum
    WHERE n.nspname = %s AND c.relname = %s
      AND a.attnum > 0 AND NOT a.attisdropped
    ORDER BY a.attnum
"""

GEOMETRY_COLUMNS_SQL = """
    SELECT f_geometry_column AS column_name,
           type AS geometry_type,
           srid,
           coord_dimension
    FROM geometry_columns
    WHERE f_table_schema = %s AND f_table_name = %s
"""

INDEXES_SQL = """
    SELECT i.relname AS index_name,
           ix.indisunique AS is_unique,
           am.amname AS method,
           array_agg(a.attname ORDER BY k.ord) AS columns
    FROM pg_index ix
    JOIN pg_class t ON t.oid = ix.indrelid
    JOIN pg_class i ON i.oid = ix.indexrelid
    JOIN pg_namespace n ON n.oid = t.relnamespace
    JOIN pg_am am ON am.oid = i.relam
    CROSS JOIN LATERAL unnest(ix.indkey) WITH ORDINALITY AS k(attnum, ord)
    JOIN pg_attribute a ON a.attrelid = t.oid AND a.attnum = k.attnum
    WHERE n.nspname = %s AND t.relname = %s AND NOT ix.indisprimary
    GROUP BY i.relname, ix.indisunique, am.amname
    ORDER BY i.relname
"""

PRIMARY_KEY_SQL = """
    SELECT a.attname AS column_name
    FROM pg_index ix
    JOIN pg_class t ON t.oid = ix.indrelid
    JOIN pg_namespace n ON n.oid = t.relnamespace
    JOIN pg_attribute a ON a.attrelid = t.oid AND a.attnum = ANY(ix.indkey)
    WHERE n.nspname = %s AND t.relname = %s AND ix.indisprimary
"""

RELATION_EXISTS_SQL = "SELECT to_regclass(%s) IS NOT NULL AS present"

SPATIAL_INDEX_METHODS = ("gist", "spgist")


# ============================================================================
# DEFAULT EXPRESSIONS
# ============================================================================

_QUOTED_DEFAULT = re.compile(r"^'(.*)'::[\w\s\".\[\]]+$", re.DOTALL)
_INTEGER_DEFAULT = re.compile(r"^\(?(-?\d+)\)?(?:::[\w\s]+)?$")
_DECIMAL_DEFAULT = re.compile(r"^\(?(-?\d+\.\d+)\)?(?:::[\w\s]+)?$")


def parse_default(expression: Optional[str]) -> Any:
    """
    Convert a PostgreSQL default expression to a Python value.

    Function defaults (``nextval(...)``, ``now()``) are not literal
    values and give None.

    Examples:
        'abc'::character varying   -> "abc"
        42                         -> 42
        (-1.5)::numeric            -> Decimal("-1.5")
        true                       -> True
        NULL::character varying    -> None
    """
    if expression is None:
        return None
    expression = expression.strip()

    match = _QUOTED_DEFAULT.match(expression)
    if match:
        return match.group(1).replace("''", "'")
    match = _INTEGER_DEFAULT.match(expression)
    if match:
        return int(match.group(1))
    match = _DECIMAL_DEFAULT.match(expression)
    if match:
        return Decimal(match.group(1))
    if expression.lower() == "true":
        return True
    if expression.lower() == "false":
        return False
    return None


def geometry_dimensions(geometry_type: str, coord_dimension: Optional[int]) -> Tuple[str, bool, bool]:
    """
    Split a geometry_columns entry into (base type, with_z, with_m).

    ``POINTM`` with dimension 3 is a measured 2D point, not a 3D one.
    """
    base_type = geometry_type.upper()
    with_m = False
    if base_type.endswith("M"):
        base_type = base_type[:-1]
        with_m = True

    with_z = False
    if coord_dimension == 4:
        with_z = True
        with_m = True
    elif coord_dimension == 3 and not with_m:
        with_z = True

    return base_type, with_z, with_m


# ============================================================================
# METADATA SOURCE
# ============================================================================

class PostGISMetadataSource(MetadataSource, BaseRepository):
    """
    Live PostGIS metadata source.

    Each call runs its own short read-only query; nothing is cached, so
    every dump sees the database as it is at that moment.

    Usage:
        source = PostGISMetadataSource(PostgreSQLRepository(schema_name="public"))
        dumper = SchemaDumper(source, extensions=[SpatialExtension()])
    """

    def __init__(
        self,
        repo: Optional[PostgreSQLRepository] = None,
        schema_name: Optional[str] = None,
        version_table: str = "schema_migrations",
    ):
        BaseRepository.__init__(self)
        self.repo = repo or PostgreSQLRepository(schema_name=schema_name)
        self.schema_name = schema_name or self.repo.schema_name
        self.version_table = version_table
        self._has_geometry_columns: Optional[bool] = None

    def tables(self) -> List[str]:
        with self._error_context("list tables", self.schema_name):
            rows = self.repo.fetch_all(TABLES_SQL, (self.schema_name,))
        return [row["table_name"] for row in rows]

    def columns(self, table: str) -> List[ColumnDescriptor]:
        with self._error_context("fetch columns", table):
            rows = self.repo.fetch_all(COLUMNS_SQL, (self.schema_name, table))
            geometry = self._geometry_columns(table)

            descriptors = []
            for row in rows:
                fields: Dict[str, Any] = {
                    "name": row["name"],
                    "sql_type": row["sql_type"],
                    "null": bool(row["nullable"]),
                    "default": parse_default(row["default_expr"]),
                }
                geo = geometry.get(row["name"])
                if geo:
                    base_type, with_z, with_m = geometry_dimensions(
                        geo["geometry_type"], geo["coord_dimension"]
                    )
                    srid = geo["srid"]
                    fields.update(
                        sql_type=base_type,
                        srid=srid if srid and srid > 0 else UNSPECIFIED_SRID,
                        with_z=with_z,
                        with_m=with_m,
                    )
                descriptors.append(ColumnDescriptor(**fields))

        self._log_operation("fetch columns", table, {"count": len(descriptors)})
        return descriptors

    @property
    def has_geometry_columns(self) -> bool:
        """Whether the PostGIS geometry_columns view exists; looked up once."""
        if self._has_geometry_columns is None:
            row = self.repo.fetch_one(RELATION_EXISTS_SQL, ("geometry_columns",))
            self._has_geometry_columns = bool(row and row["present"])
            if not self._has_geometry_columns:
                self.logger.warning(
                    "geometry_columns not found; dumping without PostGIS geometry metadata"
                )
        return self._has_geometry_columns

    def _geometry_columns(self, table: str) -> Dict[str, Dict[str, Any]]:
        if not self.has_geometry_columns:
            return {}
        rows = self.repo.fetch_all(GEOMETRY_COLUMNS_SQL, (self.schema_name, table))
        return {row["column_name"]: row for row in rows}

    def indexes(self, table: str) -> List[IndexModel]:
        with self._error_context("fetch indexes", table):
            rows = self.repo.fetch_all(INDEXES_SQL, (self.schema_name, table))
            indexes = [
                IndexModel(
                    table=table,
                    name=row["index_name"],
                    columns=list(row["columns"]),
                    unique=bool(row["is_unique"]),
                    spatial=row["method"] in SPATIAL_INDEX_METHODS,
                )
                for row in rows
            ]

        self._log_operation("fetch indexes", table, {"count": len(indexes)})
        return indexes

    def primary_key(self, table: str) -> Optional[str]:
        """Single-column primary key name; None for none or composite keys."""
        with self._error_context("fetch primary key", table):
            rows = self.repo.fetch_all(PRIMARY_KEY_SQL, (self.schema_name, table))
        if len(rows) == 1:
            return rows[0]["column_name"]
        return None

    def schema_version(self) -> Optional[str]:
        qualified = f"{self.schema_name}.{self.version_table}"
        with self._error_context("fetch schema version", self.version_table):
            present = self.repo.fetch_one(RELATION_EXISTS_SQL, (qualified,))
            if not present or not present["present"]:
                return None
            row = self.repo.fetch_one(
                sql.SQL("SELECT max(version) AS version FROM {}.{}").format(
                    sql.Identifier(self.schema_name),
                    sql.Identifier(self.version_table),
                )
            )
        if row and row["version"] is not None:
            return str(row["version"])
        return None


__all__ = [
    "PostGISMetadataSource",
    "parse_default",
    "geometry_dimensions",
]
