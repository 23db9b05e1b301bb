# ============================================================================
# COLUMN MODEL
# ============================================================================
# STATUS: Domain model - Snapshot of one column's metadata
# PURPOSE: Typed, immutable column metadata with optional spatial attributes
# LAST_REVIEWED: 17 OCT 2026
# ============================================================================
"""
Column Models

ColumnDescriptor is what a metadata source hands over: raw strings and
flags exactly as the database reports them. ColumnModel is the classified,
validated snapshot the serializer works on.

Spatial attributes are composed in, not inherited: a geometry column is a
ColumnModel whose ``spatial`` field is set.

SRID:
    ``-1`` is the legacy "unspecified" sentinel used by PostGIS 1.x and
    MySQL. It is accepted on input and normalised to None, so downstream
    code only ever checks ``srid is not None``.
"""

from typing import Any, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from core.contracts import ColumnType


UNSPECIFIED_SRID = -1


class SpatialAttributes(BaseModel):
    """Spatial reference and dimensionality of a geometry column."""

    srid: Optional[int] = Field(default=None, description="Spatial reference id; None = unspecified")
    with_z: bool = Field(default=False, description="Geometry carries a Z (elevation) ordinate")
    with_m: bool = Field(default=False, description="Geometry carries an M (measure) ordinate")

    model_config = {"frozen": True}

    @field_validator("srid", mode="before")
    @classmethod
    def normalize_unspecified_srid(cls, v):
        """Map the -1 sentinel to None."""
        if v is None or v == UNSPECIFIED_SRID:
            return None
        return v


class ColumnDescriptor(BaseModel):
    """
    Raw column metadata as produced by a metadata source.

    limit/precision/scale may be left out; they are then parsed from
    ``sql_type`` when the ColumnModel is built.
    """

    name: str = Field(..., min_length=1)
    sql_type: str = Field(..., description="Type as reported by the database, e.g. 'varchar(255)'")
    null: bool = Field(default=True, description="Column accepts NULL")
    default: Optional[Any] = Field(default=None)
    limit: Optional[int] = Field(default=None)
    precision: Optional[int] = Field(default=None)
    scale: Optional[int] = Field(default=None)

    # Geometry columns only
    srid: Optional[int] = Field(default=UNSPECIFIED_SRID)
    with_z: bool = Field(default=False)
    with_m: bool = Field(default=False)

    model_config = {"frozen": True}


class ColumnModel(BaseModel):
    """
    Classified snapshot of one column.

    Invariant: ``spatial`` is set iff ``type`` is a geometry variant.
    """

    name: str = Field(..., min_length=1)
    sql_type: str = Field(default="")
    type: ColumnType
    null: bool = Field(default=True)
    default: Optional[Any] = Field(default=None)
    limit: Optional[int] = Field(default=None)
    precision: Optional[int] = Field(default=None)
    scale: Optional[int] = Field(default=None)
    spatial: Optional[SpatialAttributes] = Field(default=None)

    model_config = {"frozen": True}

    @model_validator(mode="after")
    def check_spatial_matches_type(self) -> "ColumnModel":
        if self.type.is_geometry() and self.spatial is None:
            raise ValueError(f"Geometry column '{self.name}' requires spatial attributes")
        if not self.type.is_geometry() and self.spatial is not None:
            raise ValueError(
                f"Column '{self.name}' of type {self.type.value} cannot carry spatial attributes"
            )
        return self

    @property
    def is_spatial(self) -> bool:
        return self.spatial is not None

    @classmethod
    def from_descriptor(cls, descriptor: ColumnDescriptor, classifier) -> "ColumnModel":
        """
        Classify a raw descriptor into a ColumnModel.

        Args:
            descriptor: Raw metadata from a MetadataSource
            classifier: TypeClassifier used to tag ``descriptor.sql_type``

        Returns:
            ColumnModel (type may be UNKNOWN; rendering rejects it later)
        """
        from core.schema.classifier import extract_limit, extract_precision, extract_scale

        column_type = classifier.classify(descriptor.sql_type)

        spatial = None
        if column_type.is_geometry():
            spatial = SpatialAttributes(
                srid=descriptor.srid,
                with_z=descriptor.with_z,
                with_m=descriptor.with_m,
            )

        limit = descriptor.limit
        if limit is None:
            limit = extract_limit(descriptor.sql_type)
        precision = descriptor.precision
        if precision is None:
            precision = extract_precision(descriptor.sql_type)
        scale = descriptor.scale
        if scale is None:
            scale = extract_scale(descriptor.sql_type)

        return cls(
            name=descriptor.name,
            sql_type=descriptor.sql_type,
            type=column_type,
            null=descriptor.null,
            default=descriptor.default,
            limit=limit,
            precision=precision,
            scale=scale,
            spatial=spatial,
        )


__all__ = [
    "UNSPECIFIED_SRID",
    "SpatialAttributes",
    "ColumnDescriptor",
    "ColumnModel",
]
