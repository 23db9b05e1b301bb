# ============================================================================
# COLUMN FORMATTER
# ============================================================================
# STATUS: Core - Aligned rendering of column specs
# PURPOSE: Render a table's column specs as fixed-width, column-aligned lines
# LAST_REVIEWED: 17 OCT 2026
# EXPORTS: ColumnFormatter, BASE_KEY_ORDER
# ============================================================================
"""
Column Formatter.

Turns a table's ColumnSpecs into ``t.<type> "<name>", ...`` lines whose
attributes line up vertically:

    t.string  "name",  :limit => 80, :null => false
    t.integer "count",               :null => false
    t.point   "geom",                                :srid => 4326

Algorithm:
    1. used keys = priority order filtered to keys present in any spec
    2. width(key) = max(len(value) + 2) over specs that have it
    3. width(type) = max(len(type))
    4. each line = type padded, then each used key's ``value, `` padded
       (or blanks), then the trailing comma and padding are stripped

Key order comes only from the priority list, so the output does not
depend on the insertion order of a spec.
"""

import re
from typing import List, Sequence

from core.schema.column_spec import ColumnSpec


BASE_KEY_ORDER = ("name", "limit", "precision", "scale", "default", "null")

_TRAILING_COMMA = re.compile(r",\s*$")


class ColumnFormatter:
    """
    Aligner for column specs.

    Args:
        extra_keys: Extension attribute keys, appended to the base order
    """

    def __init__(self, extra_keys: Sequence[str] = ()):
        order = list(BASE_KEY_ORDER)
        for key in extra_keys:
            if key not in order:
                order.append(key)
        self.key_order = tuple(order)

    def used_keys(self, specs: Sequence[ColumnSpec]) -> List[str]:
        present = set()
        for spec in specs:
            present.update(spec.keys())
        return [key for key in self.key_order if key in present]

    def key_widths(self, specs: Sequence[ColumnSpec], keys: Sequence[str]) -> List[int]:
        return [
            max(len(spec[key]) + 2 if key in spec else 0 for spec in specs)
            for key in keys
        ]

    def format(self, specs: Sequence[ColumnSpec]) -> List[str]:
        """Render one aligned line per spec, in input order."""
        if not specs:
            return []

        keys = self.used_keys(specs)
        widths = self.key_widths(specs, keys)
        type_width = max(len(spec["type"]) for spec in specs)

        lines = []
        for spec in specs:
            parts = [f"    t.{spec['type'].ljust(type_width)} "]
            for key, width in zip(keys, widths):
                if key in spec:
                    parts.append(f"{spec[key]}, ".ljust(width))
                else:
                    parts.append(" " * width)
            lines.append(_TRAILING_COMMA.sub("", "".join(parts)))
        return lines


__all__ = [
    "ColumnFormatter",
    "BASE_KEY_ORDER",
]
