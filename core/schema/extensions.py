# ============================================================================
# COLUMN TYPE EXTENSIONS
# ============================================================================
# STATUS: Core - Plug-in capability for extra column types
# PURPOSE: Let callers add type rules and attributes without touching the dumper
# LAST_REVIEWED: 17 OCT 2026
# EXPORTS: ColumnTypeExtension, ClassificationRule
# ============================================================================
"""
Column Type Extensions.

The base dumper knows scalar SQL types only. Anything else (geometry
columns, spatial indexes) comes in through a ColumnTypeExtension that is
registered with the dumper:

    dumper = SchemaDumper(source, extensions=[SpatialExtension()])

An extension can contribute at four hook points:
- classification_rules: raw type pattern -> ColumnType (checked first)
- type_definitions:     entries added to the TypeRegistry
- column_attributes:    extra ``:key => value`` pairs for a column line,
                        positioned by ``attribute_keys``
- index_qualifiers:     rendered fragments appended to an add_index line
"""

from abc import ABC
from typing import Dict, List, Pattern, Tuple

from core.contracts import ColumnType
from core.models.column import ColumnModel
from core.models.index import IndexModel
from core.schema.type_registry import TypeDefinition


ClassificationRule = Tuple[Pattern, ColumnType]


class ColumnTypeExtension(ABC):
    """
    Base class for dumper extensions.

    Every hook has a no-op default so an extension only overrides what it
    needs. Attribute pairs are returned as (key, rendered_value); the
    serializer adds the ``:key => `` prefix.
    """

    #: Short name used in logs
    name: str = "extension"

    #: Column attribute keys this extension may emit, in output order.
    #: They are appended after the base keys in the formatter's priority list.
    attribute_keys: Tuple[str, ...] = ()

    def classification_rules(self) -> List[ClassificationRule]:
        """Patterns tried in order, before the base classification."""
        return []

    def type_definitions(self) -> Dict[ColumnType, TypeDefinition]:
        """Type registry entries for the tags this extension introduces."""
        return {}

    def column_attributes(self, column: ColumnModel) -> List[Tuple[str, str]]:
        """Extra attributes for one column (only non-default values)."""
        return []

    def index_qualifiers(self, index: IndexModel) -> List[str]:
        """
        Qualifier fragments for one index, appended verbatim.

        Each fragment carries its own leading separator, e.g. ``", :spatial=> true "``.
        """
        return []

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} name={self.name!r}>"


__all__ = [
    "ColumnTypeExtension",
    "ClassificationRule",
]
