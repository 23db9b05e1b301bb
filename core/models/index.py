# ============================================================================
# INDEX MODEL
# ============================================================================
# STATUS: Domain model - Snapshot of one index's metadata
# PURPOSE: Immutable index metadata including the spatial flag
# LAST_REVIEWED: 17 OCT 2026
# ============================================================================
"""
IndexModel

``spatial`` is independent of the indexed columns' types. A GiST index
over a non-geometry column is still reported as spatial if the source says
so; cross-checking is the caller's business.
"""

from typing import List

from pydantic import BaseModel, Field, field_validator


class IndexModel(BaseModel):
    """One index on one table."""

    table: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)
    columns: List[str] = Field(..., min_length=1, description="Indexed columns, in key order")
    unique: bool = Field(default=False)
    spatial: bool = Field(default=False)

    model_config = {"frozen": True}

    @field_validator("columns", mode="before")
    @classmethod
    def handle_string_input(cls, v):
        """Allow a single column name as shorthand for a one-item list."""
        if isinstance(v, str):
            return [v]
        return v


__all__ = ["IndexModel"]
