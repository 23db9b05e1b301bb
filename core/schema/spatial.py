# ============================================================================
# SPATIAL EXTENSION
# ============================================================================
# STATUS: Core - Geometry column and spatial index support
# PURPOSE: Classify geometry types, render srid/with_z/with_m and :spatial
# LAST_REVIEWED: 17 OCT 2026
# EXPORTS: SpatialExtension, GEOMETRY_RULES, GEOMETRY_DEFINITIONS, SPATIAL_INDEX_QUALIFIER
# ============================================================================
"""
Spatial Extension.

Adds the OGC geometry types to the dumper:

    POINT, LINESTRING, POLYGON, GEOMETRYCOLLECTION,
    MULTIPOINT, MULTILINESTRING, MULTIPOLYGON, GEOMETRY

Classification precedence (first match wins):
    1. compound names, substring match: multipoint, multilinestring,
       multipolygon, geometrycollection
    2. bare names, exact match: point, linestring, polygon, geometry
    3. any geometry word anywhere -> geometry (e.g. ``geometry(Point,4326)``)

Compound names go first because ``multipolygon`` contains ``polygon``.

Column attributes (only when non-default):
    :srid => 4326     srid is set
    :with_z => true   Z ordinate
    :with_m => true   M ordinate

Index qualifier (written exactly like this, trailing space included):
    , :spatial=> true 
"""

import re
from typing import Dict, List, Tuple

from core.contracts import ColumnType
from core.models.column import ColumnModel
from core.models.index import IndexModel
from core.schema.extensions import ClassificationRule, ColumnTypeExtension
from core.schema.type_registry import TypeDefinition


GEOMETRY_RULES: List[ClassificationRule] = [
    (re.compile(r"multipoint", re.IGNORECASE), ColumnType.MULTI_POINT),
    (re.compile(r"multilinestring", re.IGNORECASE), ColumnType.MULTI_LINE_STRING),
    (re.compile(r"multipolygon", re.IGNORECASE), ColumnType.MULTI_POLYGON),
    (re.compile(r"geometrycollection", re.IGNORECASE), ColumnType.GEOMETRY_COLLECTION),
    (re.compile(r"^point$", re.IGNORECASE), ColumnType.POINT),
    (re.compile(r"^linestring$", re.IGNORECASE), ColumnType.LINE_STRING),
    (re.compile(r"^polygon$", re.IGNORECASE), ColumnType.POLYGON),
    (re.compile(r"^geometry$", re.IGNORECASE), ColumnType.GEOMETRY),
    (
        re.compile(
            r"geometry|point|linestring|polygon|multipoint|multilinestring|multipolygon|geometrycollection",
            re.IGNORECASE,
        ),
        ColumnType.GEOMETRY,
    ),
]

GEOMETRY_DEFINITIONS: Dict[ColumnType, TypeDefinition] = {
    ColumnType.POINT: TypeDefinition("POINT"),
    ColumnType.LINE_STRING: TypeDefinition("LINESTRING"),
    ColumnType.POLYGON: TypeDefinition("POLYGON"),
    ColumnType.GEOMETRY_COLLECTION: TypeDefinition("GEOMETRYCOLLECTION"),
    ColumnType.MULTI_POINT: TypeDefinition("MULTIPOINT"),
    ColumnType.MULTI_LINE_STRING: TypeDefinition("MULTILINESTRING"),
    ColumnType.MULTI_POLYGON: TypeDefinition("MULTIPOLYGON"),
    ColumnType.GEOMETRY: TypeDefinition("GEOMETRY"),
}


# Byte-exact, including the missing space before "=>" and the trailing space
SPATIAL_INDEX_QUALIFIER = ", :spatial=> true "


class SpatialExtension(ColumnTypeExtension):
    """Geometry columns and spatial indexes."""

    name = "spatial"
    attribute_keys = ("srid", "with_z", "with_m")

    def classification_rules(self) -> List[ClassificationRule]:
        return list(GEOMETRY_RULES)

    def type_definitions(self) -> Dict[ColumnType, TypeDefinition]:
        return dict(GEOMETRY_DEFINITIONS)

    def column_attributes(self, column: ColumnModel) -> List[Tuple[str, str]]:
        if not column.type.is_geometry() or column.spatial is None:
            return []

        attributes = []
        if column.spatial.srid is not None:
            attributes.append(("srid", repr(column.spatial.srid)))
        if column.spatial.with_z:
            attributes.append(("with_z", "true"))
        if column.spatial.with_m:
            attributes.append(("with_m", "true"))
        return attributes

    def index_qualifiers(self, index: IndexModel) -> List[str]:
        if index.spatial:
            return [SPATIAL_INDEX_QUALIFIER]
        return []


__all__ = [
    "SpatialExtension",
    "GEOMETRY_RULES",
    "GEOMETRY_DEFINITIONS",
    "SPATIAL_INDEX_QUALIFIER",
]
