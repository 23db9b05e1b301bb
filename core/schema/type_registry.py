# ============================================================================
# TYPE REGISTRY
# ============================================================================
# STATUS: Core - Native type definitions per dialect
# PURPOSE: Map column type tags to native names and default limits
# LAST_REVIEWED: 17 OCT 2026
# EXPORTS: TypeDefinition, TypeRegistry, POSTGRESQL_TYPES, MYSQL_TYPES
# ============================================================================
"""
Type Registry.

Each renderable ColumnType has a TypeDefinition carrying the native type
name and the default limit. The column spec builder consults the default
limit to decide whether ``:limit`` needs to be written at all: a column
whose limit equals the default omits it.

A tag missing from the registry is unrenderable.

Usage:
    registry = TypeRegistry.for_dialect("mysql")
    registry.default_limit(ColumnType.STRING)   # 255
"""

from dataclasses import dataclass
from typing import Dict, Iterator, Optional

from core.contracts import ColumnType


@dataclass(frozen=True)
class TypeDefinition:
    """Native definition of one column type."""
    name: str
    limit: Optional[int] = None


# ============================================================================
# BASE DEFINITIONS
# ============================================================================

POSTGRESQL_TYPES: Dict[ColumnType, TypeDefinition] = {
    ColumnType.STRING: TypeDefinition("character varying"),
    ColumnType.TEXT: TypeDefinition("text"),
    ColumnType.INTEGER: TypeDefinition("integer"),
    ColumnType.FLOAT: TypeDefinition("float"),
    ColumnType.DECIMAL: TypeDefinition("decimal"),
    ColumnType.DATETIME: TypeDefinition("timestamp"),
    ColumnType.TIMESTAMP: TypeDefinition("timestamp"),
    ColumnType.TIME: TypeDefinition("time"),
    ColumnType.DATE: TypeDefinition("date"),
    ColumnType.BINARY: TypeDefinition("bytea"),
    ColumnType.BOOLEAN: TypeDefinition("boolean"),
}

MYSQL_TYPES: Dict[ColumnType, TypeDefinition] = {
    ColumnType.STRING: TypeDefinition("varchar", limit=255),
    ColumnType.TEXT: TypeDefinition("text"),
    ColumnType.INTEGER: TypeDefinition("int", limit=11),
    ColumnType.FLOAT: TypeDefinition("float"),
    ColumnType.DECIMAL: TypeDefinition("decimal"),
    ColumnType.DATETIME: TypeDefinition("datetime"),
    ColumnType.TIMESTAMP: TypeDefinition("datetime"),
    ColumnType.TIME: TypeDefinition("time"),
    ColumnType.DATE: TypeDefinition("date"),
    ColumnType.BINARY: TypeDefinition("blob"),
    ColumnType.BOOLEAN: TypeDefinition("tinyint", limit=1),
}

_DIALECTS = {
    "postgresql": POSTGRESQL_TYPES,
    "postgres": POSTGRESQL_TYPES,
    "postgis": POSTGRESQL_TYPES,
    "mysql": MYSQL_TYPES,
}


# ============================================================================
# REGISTRY
# ============================================================================

class TypeRegistry:
    """
    Mutable mapping of ColumnType -> TypeDefinition.

    Built once per dumper; extensions add their own definitions through
    ``register_all`` before any table is rendered.
    """

    def __init__(self, definitions: Optional[Dict[ColumnType, TypeDefinition]] = None):
        self._definitions: Dict[ColumnType, TypeDefinition] = dict(definitions or {})

    @classmethod
    def for_dialect(cls, dialect: str) -> "TypeRegistry":
        """Create a registry pre-filled with a dialect's base types."""
        definitions = _DIALECTS.get(dialect.lower())
        if definitions is None:
            raise ValueError(
                f"Unsupported dialect: {dialect}. "
                f"Supported: {sorted(set(_DIALECTS))}"
            )
        return cls(definitions)

    def register(self, column_type: ColumnType, definition: TypeDefinition) -> None:
        self._definitions[column_type] = definition

    def register_all(self, definitions: Dict[ColumnType, TypeDefinition]) -> None:
        for column_type, definition in definitions.items():
            self.register(column_type, definition)

    def get(self, column_type: ColumnType) -> Optional[TypeDefinition]:
        return self._definitions.get(column_type)

    def default_limit(self, column_type: ColumnType) -> Optional[int]:
        """Default limit for a type (None if the type has none or is unregistered)."""
        definition = self._definitions.get(column_type)
        return definition.limit if definition else None

    def __contains__(self, column_type: object) -> bool:
        return column_type in self._definitions

    def __iter__(self) -> Iterator[ColumnType]:
        return iter(self._definitions)

    def __len__(self) -> int:
        return len(self._definitions)


__all__ = [
    "TypeDefinition",
    "TypeRegistry",
    "POSTGRESQL_TYPES",
    "MYSQL_TYPES",
]
