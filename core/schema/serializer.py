# ============================================================================
# TABLE & INDEX SERIALIZERS
# ============================================================================
# STATUS: Core - Per-table schema definition rendering
# PURPOSE: Render create_table blocks and add_index lines from table metadata
# LAST_REVIEWED: 17 OCT 2026
# EXPORTS: IndexSerializer, TableSerializer, TableResult
# DEPENDENCIES: core.schema (classifier, column_spec, formatter)
# ============================================================================
"""
Table and Index Serializers.

Output for one table:

      create_table "locations", :force => true do |t|
        t.string "name", :limit => 80, :null => false
        t.point  "geom", :srid => 4326
      end

      add_index "locations", ["geom"], :name => "index_locations_on_geom", :spatial=> true 

If anything goes wrong while building a table (unknown column type,
metadata query failure), the table's text is discarded and replaced with
a comment block, and the next table is dumped normally:

      # Could not dump table "events" because of following UnrenderableTypeError
      #   Unknown type 'enum_status' for column 'status'
"""

import io
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence, TextIO, Tuple

from core.contracts import PRIMARY_KEY_DEFAULT
from core.logging import ComponentType, get_logger, log_context
from core.models.column import ColumnModel
from core.models.index import IndexModel
from core.schema.classifier import TypeClassifier
from core.schema.column_spec import ColumnSpec, ColumnSpecBuilder
from core.schema.extensions import ColumnTypeExtension
from core.schema.formatter import ColumnFormatter
from core.schema.literals import quote_list, quote_string
from core.schema.metadata_source import MetadataSource

logger = get_logger(__name__, ComponentType.DUMPER)


@dataclass
class TableResult:
    """Outcome of dumping one table."""
    table: str
    success: bool
    column_count: int = 0
    index_count: int = 0
    error_kind: Optional[str] = None
    error: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "table": self.table,
            "success": self.success,
            "column_count": self.column_count,
            "index_count": self.index_count,
            "error_kind": self.error_kind,
            "error": self.error,
        }


# ============================================================================
# INDEX SERIALIZER
# ============================================================================

class IndexSerializer:
    """
    Render ``add_index`` statements.

    Qualifiers are appended in a fixed order: ``:unique`` first, then
    whatever the extensions contribute (``:spatial`` for SpatialExtension).
    """

    def __init__(self, extensions: Sequence[ColumnTypeExtension] = ()):
        self.extensions = list(extensions)

    def statement(self, index: IndexModel) -> str:
        parts = [
            f"  add_index {quote_string(index.table)}, {quote_list(index.columns)}, "
            f":name => {quote_string(index.name)}"
        ]
        if index.unique:
            parts.append(", :unique => true")
        for extension in self.extensions:
            parts.extend(extension.index_qualifiers(index))
        return "".join(parts)

    def serialize(self, indexes: Sequence[IndexModel]) -> List[str]:
        """One line per index, in source order, plus a blank separator if any."""
        lines = [self.statement(index) for index in indexes]
        if lines:
            lines.append("")
        return lines


# ============================================================================
# TABLE SERIALIZER
# ============================================================================

class TableSerializer:
    """
    Orchestrates one table: fetch, classify, build specs, align, emit.

    Hook points are the extension objects shared with the classifier,
    the spec builder (column attributes) and the index serializer
    (index qualifiers); the rendering algorithm itself is never overridden.
    """

    def __init__(
        self,
        classifier: TypeClassifier,
        spec_builder: ColumnSpecBuilder,
        formatter: ColumnFormatter,
        index_serializer: IndexSerializer,
        default_primary_key: str = PRIMARY_KEY_DEFAULT,
        force: bool = True,
    ):
        self.classifier = classifier
        self.spec_builder = spec_builder
        self.formatter = formatter
        self.index_serializer = index_serializer
        self.default_primary_key = default_primary_key
        self.force = force

    def header(self, table: str, columns: Sequence[ColumnModel], primary_key: str) -> str:
        parts = [f"  create_table {quote_string(table)}"]
        if any(column.name == primary_key for column in columns):
            if primary_key != PRIMARY_KEY_DEFAULT:
                parts.append(f", :primary_key => {quote_string(primary_key)}")
        else:
            parts.append(", :id => false")
        if self.force:
            parts.append(", :force => true")
        parts.append(" do |t|")
        return "".join(parts)

    def build_specs(
        self,
        table: str,
        columns: Sequence[ColumnModel],
        primary_key: str,
    ) -> List[ColumnSpec]:
        specs = []
        for column in columns:
            spec = self.spec_builder.build(column, primary_key, table=table)
            if spec is not None:
                specs.append(spec)
        return specs

    def render(self, table: str, source: MetadataSource) -> Tuple[str, TableResult]:
        """
        Render a table, raising on any failure.

        Returns:
            (text, TableResult)
        """
        descriptors = source.columns(table)
        primary_key = source.primary_key(table) or self.default_primary_key

        columns = [ColumnModel.from_descriptor(d, self.classifier) for d in descriptors]
        specs = self.build_specs(table, columns, primary_key)
        indexes = source.indexes(table)

        lines = [self.header(table, columns, primary_key)]
        lines.extend(self.formatter.format(specs))
        lines.append("  end")
        lines.append("")
        lines.extend(self.index_serializer.serialize(indexes))

        result = TableResult(
            table=table,
            success=True,
            column_count=len(specs),
            index_count=len(indexes),
        )
        return "".join(f"{line}\n" for line in lines), result

    def dump_table(self, table: str, source: MetadataSource, stream: TextIO) -> TableResult:
        """
        Write one table to ``stream`` with per-table failure isolation.

        Nothing from a failed table reaches the stream except the
        comment block.
        """
        with log_context(table=table, operation="dump_table"):
            try:
                text, result = self.render(table, source)
            except Exception as e:
                error_kind = e.__class__.__name__
                logger.warning(f"Could not dump table {table}: {error_kind}: {e}")
                stream.write(f"  # Could not dump table {quote_string(table)} because of following {error_kind}\n")
                stream.write(f"  #   {e}\n")
                stream.write("\n")
                return TableResult(table=table, success=False, error_kind=error_kind, error=str(e))

            stream.write(text)
            logger.debug(
                f"Dumped table {table}: {result.column_count} columns, {result.index_count} indexes"
            )
            return result

    def serialize(self, table: str, source: MetadataSource) -> str:
        """Render one table to text (comment block on failure)."""
        buffer = io.StringIO()
        self.dump_table(table, source, buffer)
        return buffer.getvalue()


__all__ = [
    "IndexSerializer",
    "TableSerializer",
    "TableResult",
]
