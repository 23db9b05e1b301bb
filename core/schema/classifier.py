# ============================================================================
# TYPE CLASSIFIER
# ============================================================================
# STATUS: Core - Raw SQL type -> ColumnType
# PURPOSE: Classify database type strings into semantic column type tags
# LAST_REVIEWED: 17 OCT 2026
# EXPORTS: TypeClassifier, BASE_RULES, extract_limit, extract_precision, extract_scale
# ============================================================================
"""
Type Classifier.

Maps a raw SQL type string (``character varying(255)``, ``numeric(10,2)``,
``POINT``) to a ColumnType. Extension rules run first, then the base rules.

The base rules are unanchored substring matches, so they have to come
last: ``point`` contains ``int`` and ``linestring`` contains ``string``.

Classification never raises. An unmatched type yields ColumnType.UNKNOWN
and the column spec builder turns that into UnrenderableTypeError.

Usage:
    classifier = TypeClassifier(extensions=[SpatialExtension()])
    classifier.classify("MULTIPOLYGON")   # ColumnType.MULTI_POLYGON
    classifier.classify("varchar(40)")    # ColumnType.STRING
"""

import re
from typing import List, Optional, Sequence

from core.contracts import ColumnType
from core.schema.extensions import ClassificationRule, ColumnTypeExtension


# Order matters: datetime before timestamp before time before date.
BASE_RULES: List[ClassificationRule] = [
    (re.compile(r"int", re.IGNORECASE), ColumnType.INTEGER),
    (re.compile(r"float|double", re.IGNORECASE), ColumnType.FLOAT),
    (re.compile(r"decimal|numeric|number", re.IGNORECASE), ColumnType.DECIMAL),
    (re.compile(r"datetime", re.IGNORECASE), ColumnType.DATETIME),
    (re.compile(r"timestamp", re.IGNORECASE), ColumnType.TIMESTAMP),
    (re.compile(r"time", re.IGNORECASE), ColumnType.TIME),
    (re.compile(r"date", re.IGNORECASE), ColumnType.DATE),
    (re.compile(r"clob|text", re.IGNORECASE), ColumnType.TEXT),
    (re.compile(r"blob|binary|bytea", re.IGNORECASE), ColumnType.BINARY),
    (re.compile(r"char|string", re.IGNORECASE), ColumnType.STRING),
    (re.compile(r"boolean|bool", re.IGNORECASE), ColumnType.BOOLEAN),
]

_LIMIT_RE = re.compile(r"\((\d+)\)")
_NUMERIC_RE = re.compile(r"^(?:numeric|decimal|number)\((\d+)(?:,\s*(\d+))?\)", re.IGNORECASE)


class TypeClassifier:
    """
    Rule-based classifier.

    Rules are (compiled pattern, ColumnType) pairs evaluated with
    ``pattern.search``; the first match wins.
    """

    def __init__(self, extensions: Sequence[ColumnTypeExtension] = ()):
        self.rules: List[ClassificationRule] = []
        for extension in extensions:
            self.rules.extend(extension.classification_rules())
        self.rules.extend(BASE_RULES)

    def classify(self, sql_type: Optional[str]) -> ColumnType:
        """Classify a raw SQL type; UNKNOWN when nothing matches."""
        if not sql_type:
            return ColumnType.UNKNOWN
        for pattern, column_type in self.rules:
            if pattern.search(sql_type):
                return column_type
        return ColumnType.UNKNOWN


# ============================================================================
# RAW TYPE PARSING
# ============================================================================

def extract_limit(sql_type: Optional[str]) -> Optional[int]:
    """``varchar(255)`` -> 255. Multi-argument types such as ``numeric(10,2)`` give None."""
    if not sql_type:
        return None
    match = _LIMIT_RE.search(sql_type)
    return int(match.group(1)) if match else None


def extract_precision(sql_type: Optional[str]) -> Optional[int]:
    if not sql_type:
        return None
    match = _NUMERIC_RE.match(sql_type.strip())
    return int(match.group(1)) if match else None


def extract_scale(sql_type: Optional[str]) -> Optional[int]:
    if not sql_type:
        return None
    match = _NUMERIC_RE.match(sql_type.strip())
    if match and match.group(2) is not None:
        return int(match.group(2))
    return None


__all__ = [
    "TypeClassifier",
    "BASE_RULES",
    "extract_limit",
    "extract_precision",
    "extract_scale",
]
