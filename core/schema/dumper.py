# ============================================================================
# SCHEMA DUMPER
# ============================================================================
# STATUS: Core - Whole-schema definition dump
# PURPOSE: Write every table of a metadata source as one schema definition
# LAST_REVIEWED: 17 OCT 2026
# EXPORTS: SchemaDumper, DumpResult
# DEPENDENCIES: core.schema.serializer
# ============================================================================
"""
Schema Dumper.

Wires classifier, spec builder, formatter and serializers together and
writes a complete, re-executable schema definition:

    # This file is auto-generated from the current state of the database.
    ...
    ActiveRecord::Schema.define(:version => 20261017120000) do

      create_table "locations", :force => true do |t|
        ...
      end

    end

Tables are dumped in name order so repeated dumps of an unchanged schema
are byte-identical. A failing table is replaced by a comment block and the
dump carries on.

Usage:
    source = InMemoryMetadataSource.from_dict(snapshot)
    dumper = SchemaDumper(source, extensions=[SpatialExtension()])
    result = dumper.dump(sys.stdout)
"""

import io
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence, TextIO

from core.config.defaults import DumperDefaults, IgnoreRule, get_defaults
from core.contracts import PRIMARY_KEY_DEFAULT
from core.logging import ComponentType, get_logger, log_context
from core.schema.classifier import TypeClassifier
from core.schema.column_spec import ColumnSpecBuilder, DefaultQuoter
from core.schema.extensions import ColumnTypeExtension
from core.schema.formatter import ColumnFormatter
from core.schema.literals import default_literal
from core.schema.metadata_source import MetadataSource
from core.schema.serializer import IndexSerializer, TableResult, TableSerializer
from core.schema.type_registry import TypeRegistry

logger = get_logger(__name__, ComponentType.DUMPER)


HEADER = """\
# This file is auto-generated from the current state of the database. Instead of editing this file,
# change the database and regenerate this schema definition.
#
# This definition is the authoritative source for the database schema. To create the database
# on another system, load this file instead of replaying every migration from scratch.
#
# It's strongly recommended to check this file into your version control system.

"""


@dataclass
class DumpResult:
    """Complete result of a schema dump."""
    version: Optional[str] = None
    tables: List[TableResult] = field(default_factory=list)
    ignored: List[str] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return all(t.success for t in self.tables)

    @property
    def failed_tables(self) -> List[str]:
        return [t.table for t in self.tables if not t.success]

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "version": self.version,
            "success": self.success,
            "tables": [t.to_dict() for t in self.tables],
            "ignored": self.ignored,
            "summary": {
                "total_tables": len(self.tables),
                "dumped": len([t for t in self.tables if t.success]),
                "failed": len(self.failed_tables),
                "ignored": len(self.ignored),
            },
        }


class SchemaDumper:
    """
    Dump a metadata source as a schema definition.

    Args:
        source: Where table metadata comes from
        extensions: Column type extensions (e.g. SpatialExtension)
        dialect: Base type registry to start from
        ignore_tables: Extra table names or compiled regexes to skip
        default_primary_key: Primary key assumed when the source reports none
        force: Emit ``:force => true`` on create_table
        quote_default: Renders column default values
    """

    def __init__(
        self,
        source: MetadataSource,
        extensions: Sequence[ColumnTypeExtension] = (),
        dialect: str = "postgresql",
        ignore_tables: Sequence[IgnoreRule] = (),
        default_primary_key: str = PRIMARY_KEY_DEFAULT,
        force: bool = True,
        quote_default: DefaultQuoter = default_literal,
    ):
        self.source = source
        self.extensions = list(extensions)
        self.settings = DumperDefaults(
            dialect=dialect,
            default_primary_key=default_primary_key,
            force=force,
            ignore_tables=tuple(ignore_tables),
        )

        self.type_registry = TypeRegistry.for_dialect(dialect)
        extra_keys: List[str] = []
        for extension in self.extensions:
            self.type_registry.register_all(extension.type_definitions())
            extra_keys.extend(extension.attribute_keys)

        self.classifier = TypeClassifier(self.extensions)
        self.table_serializer = TableSerializer(
            classifier=self.classifier,
            spec_builder=ColumnSpecBuilder(self.type_registry, self.extensions, quote_default),
            formatter=ColumnFormatter(extra_keys),
            index_serializer=IndexSerializer(self.extensions),
            default_primary_key=default_primary_key,
            force=force,
        )

        logger.debug(
            f"SchemaDumper created: dialect={dialect}, "
            f"extensions={[e.name for e in self.extensions]}"
        )

    @classmethod
    def from_defaults(
        cls,
        source: MetadataSource,
        extensions: Sequence[ColumnTypeExtension] = (),
        defaults: Optional[DumperDefaults] = None,
    ) -> "SchemaDumper":
        """Create a dumper configured from DumperDefaults (env by default)."""
        defaults = defaults or get_defaults().dumper
        return cls(
            source,
            extensions=extensions,
            dialect=defaults.dialect,
            ignore_tables=defaults.ignore_tables,
            default_primary_key=defaults.default_primary_key,
            force=defaults.force,
        )

    # =========================================================================
    # DUMP SECTIONS
    # =========================================================================

    def header(self, stream: TextIO, version: Optional[str]) -> None:
        define_params = f":version => {version}" if version else ""
        stream.write(HEADER)
        stream.write(f"ActiveRecord::Schema.define({define_params}) do\n")
        stream.write("\n")

    def trailer(self, stream: TextIO) -> None:
        stream.write("end\n")

    def table(self, table: str, stream: TextIO) -> TableResult:
        """Dump one table (comment block on failure)."""
        return self.table_serializer.dump_table(table, self.source, stream)

    def tables(self, stream: TextIO, result: DumpResult) -> None:
        """Dump all non-ignored tables in name order."""
        for table in sorted(self.source.tables()):
            if self.settings.is_ignored(table):
                result.ignored.append(table)
                continue
            result.tables.append(self.table(table, stream))

    def dump(self, stream: TextIO) -> DumpResult:
        """
        Write the complete schema definition to ``stream``.

        Errors listing the tables propagate; per-table errors do not.
        """
        version = self.source.schema_version()
        result = DumpResult(version=version)

        with log_context(operation="dump_schema"):
            logger.info(f"Dumping schema (version={version or 'none'})")
            self.header(stream, version)
            self.tables(stream, result)
            self.trailer(stream)

            summary = result.to_dict()["summary"]
            logger.info(
                f"Schema dump complete: {summary['dumped']} dumped, "
                f"{summary['failed']} failed, {summary['ignored']} ignored"
            )
            if result.failed_tables:
                logger.warning(f"Tables replaced by error comments: {result.failed_tables}")

        return result

    def dumps(self) -> str:
        """Return the complete schema definition as a string."""
        buffer = io.StringIO()
        self.dump(buffer)
        return buffer.getvalue()


__all__ = [
    "SchemaDumper",
    "DumpResult",
    "HEADER",
]
