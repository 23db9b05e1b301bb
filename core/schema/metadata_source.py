# ============================================================================
# METADATA SOURCE
# ============================================================================
# STATUS: Core - Consumed capability for table metadata
# PURPOSE: Abstract metadata source plus an in-memory implementation
# LAST_REVIEWED: 17 OCT 2026
# EXPORTS: MetadataSource, InMemoryMetadataSource
# ============================================================================
"""
Metadata Sources.

The dumper never talks to a database itself. It asks a MetadataSource for
table names, columns, indexes and the primary key, once per table.

Implementations:
    InMemoryMetadataSource   - plain dicts (snapshots, tests)
    PostGISMetadataSource    - live PostgreSQL/PostGIS (infrastructure/)

Snapshot format for InMemoryMetadataSource.from_dict:

    {
        "version": "20261017120000",
        "tables": {
            "locations": {
                "primary_key": "id",
                "columns": [
                    {"name": "id", "sql_type": "integer", "null": false},
                    {"name": "geom", "sql_type": "POINT", "srid": 4326}
                ],
                "indexes": [
                    {"name": "index_locations_on_geom", "columns": ["geom"], "spatial": true}
                ]
            }
        }
    }
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

from core.errors import MetadataSourceError
from core.models.column import ColumnDescriptor
from core.models.index import IndexModel


class MetadataSource(ABC):
    """Read-only provider of table metadata."""

    @abstractmethod
    def tables(self) -> List[str]:
        """Names of all tables available for dumping."""
        pass

    @abstractmethod
    def columns(self, table: str) -> List[ColumnDescriptor]:
        """Columns of a table, in ordinal order."""
        pass

    @abstractmethod
    def indexes(self, table: str) -> List[IndexModel]:
        """Indexes of a table, excluding the primary key index."""
        pass

    def primary_key(self, table: str) -> Optional[str]:
        """Primary key column name; None lets the dumper assume ``id``."""
        return None

    def schema_version(self) -> Optional[str]:
        """Current migration version, if the database tracks one."""
        return None


class InMemoryMetadataSource(MetadataSource):
    """MetadataSource backed by already-built descriptors."""

    def __init__(
        self,
        columns: Optional[Dict[str, List[ColumnDescriptor]]] = None,
        indexes: Optional[Dict[str, List[IndexModel]]] = None,
        primary_keys: Optional[Dict[str, str]] = None,
        version: Optional[str] = None,
    ):
        self._columns = dict(columns or {})
        self._indexes = dict(indexes or {})
        self._primary_keys = dict(primary_keys or {})
        self._version = version

    @classmethod
    def from_dict(cls, snapshot: Dict[str, Any]) -> "InMemoryMetadataSource":
        """Build from a snapshot dict (see module docstring)."""
        columns: Dict[str, List[ColumnDescriptor]] = {}
        indexes: Dict[str, List[IndexModel]] = {}
        primary_keys: Dict[str, str] = {}

        for table, info in snapshot.get("tables", {}).items():
            columns[table] = [ColumnDescriptor(**col) for col in info.get("columns", [])]
            indexes[table] = [
                IndexModel(table=idx.get("table", table), **{k: v for k, v in idx.items() if k != "table"})
                for idx in info.get("indexes", [])
            ]
            if info.get("primary_key"):
                primary_keys[table] = info["primary_key"]

        version = snapshot.get("version")
        return cls(
            columns=columns,
            indexes=indexes,
            primary_keys=primary_keys,
            version=str(version) if version is not None else None,
        )

    def tables(self) -> List[str]:
        return list(self._columns)

    def columns(self, table: str) -> List[ColumnDescriptor]:
        if table not in self._columns:
            raise MetadataSourceError(f"Table '{table}' not found", table=table, operation="columns")
        return list(self._columns[table])

    def indexes(self, table: str) -> List[IndexModel]:
        return list(self._indexes.get(table, []))

    def primary_key(self, table: str) -> Optional[str]:
        return self._primary_keys.get(table)

    def schema_version(self) -> Optional[str]:
        return self._version


__all__ = [
    "MetadataSource",
    "InMemoryMetadataSource",
]
