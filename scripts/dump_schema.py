#!/usr/bin/env python
# ============================================================================
# SCHEMA DUMP SCRIPT
# ============================================================================
# STATUS: Script - Command-line schema export
# PURPOSE: Dump a live PostGIS schema as an ActiveRecord schema definition
# USAGE:
#   python scripts/dump_schema.py                        # Print to stdout
#   python scripts/dump_schema.py -o db/schema.rb        # Write to a file
#   python scripts/dump_schema.py --ignore '/^tmp_/'     # Skip tables
# ============================================================================

import sys
import os
import argparse
import json

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from core.config.defaults import parse_ignore_tables
from core.logging import configure_logging
from infrastructure import SchemaExporter


def main():
    parser = argparse.ArgumentParser(
        description="Dump a PostGIS schema as a re-executable schema definition",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python scripts/dump_schema.py                          # Definition on stdout
  python scripts/dump_schema.py --output db/schema.rb    # Write to file
  python scripts/dump_schema.py --schema gis --ignore audit_log,/^tmp_/

Environment Variables:
  DATABASE_URL                Full PostgreSQL connection string
  POSTGRES_HOST               Database host
  POSTGRES_DB                 Database name
  POSTGRES_USER               Database user (default: postgres)
  POSTGRES_PASSWORD           Database password
  POSTGRES_PORT               Database port (default: 5432)
  POSTGRES_SCHEMA             Schema to dump (default: public)
  SCHEMA_DUMP_IGNORE_TABLES   Tables to skip (comma-separated, /regex/ allowed)
  SCHEMA_DUMP_DIALECT         Base type registry (default: postgresql)
  LOG_FORMAT                  "json" for structured logs
        """
    )
    parser.add_argument(
        "--output", "-o",
        type=str,
        help="File to write (default: stdout)"
    )
    parser.add_argument(
        "--schema",
        type=str,
        help="Schema to dump (overrides POSTGRES_SCHEMA)"
    )
    parser.add_argument(
        "--connection",
        type=str,
        help="PostgreSQL connection string (overrides environment)"
    )
    parser.add_argument(
        "--ignore",
        type=str,
        default="",
        help="Extra tables to skip, comma-separated; /pattern/ for a regex"
    )
    parser.add_argument(
        "--dialect",
        type=str,
        choices=["postgresql", "mysql"],
        help="Base type registry (overrides SCHEMA_DUMP_DIALECT)"
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable verbose logging"
    )
    parser.add_argument(
        "--json-logs",
        action="store_true",
        help="Emit logs as JSON lines on stderr"
    )
    args = parser.parse_args()

    # Logs go to stderr so stdout stays a clean definition
    configure_logging(
        level="DEBUG" if args.verbose else "INFO",
        json_output=args.json_logs,
    )

    exporter = SchemaExporter(
        connection_string=args.connection,
        schema_name=args.schema,
        dialect=args.dialect,
        ignore_tables=parse_ignore_tables(args.ignore),
    )

    result = exporter.export(
        output_path=args.output,
        stream=None if args.output else sys.stdout,
    )

    if args.verbose:
        print(json.dumps(result.to_dict(), indent=2, default=str), file=sys.stderr)

    if not result.success:
        for error in result.errors:
            print(f"Error: {error}", file=sys.stderr)
        sys.exit(1)

    if result.warnings:
        # Failed tables are in the output as comment blocks; exit 2 flags them
        for warning in result.warnings:
            print(f"Warning: {warning}", file=sys.stderr)
        sys.exit(2)


if __name__ == "__main__":
    main()
