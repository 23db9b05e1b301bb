# ============================================================================
# STRUCTURED LOGGING TESTS
# ============================================================================
# STATUS: Tests - Context-aware logging
# PURPOSE: Verify context nesting and JSON/human formatting
# LAST_REVIEWED: 17 OCT 2026
# ============================================================================
"""
Structured Logging Tests

Run with:
    pytest tests/test_logging.py -v
"""

import json
import logging

from core.logging import (
    ComponentType,
    HumanFormatter,
    StructuredFormatter,
    get_current_context,
    get_logger,
    log_context,
)


def _make_record(message="Dumping table"):
    return logging.LogRecord(
        name="core.schema.serializer",
        level=logging.INFO,
        pathname=__file__,
        lineno=1,
        msg=message,
        args=(),
        exc_info=None,
    )


class TestLogContext:

    def test_nested_context_inherits(self):
        with log_context(schema_name="public"):
            with log_context(table="locations", operation="dump_table"):
                context = get_current_context()
                assert context.schema_name == "public"
                assert context.table == "locations"
            assert get_current_context().table is None

    def test_empty_outside_context(self):
        assert get_current_context().to_dict() == {}

    def test_unknown_fields_go_to_extra(self):
        with log_context(table="roads", dialect="mysql"):
            context = get_current_context()
            assert context.extra == {"dialect": "mysql"}
            assert context.to_dict() == {"table": "roads", "dialect": "mysql"}


class TestFormatters:

    def test_structured_includes_context(self):
        with log_context(table="locations"):
            data = json.loads(StructuredFormatter().format(_make_record()))

        assert data["message"] == "Dumping table"
        assert data["level"] == "INFO"
        assert data["context"] == {"table": "locations"}

    def test_human_includes_table(self):
        with log_context(table="locations"):
            line = HumanFormatter().format(_make_record())

        assert "[table=locations]" in line
        assert line.endswith("core.schema.serializer [table=locations]: Dumping table")


class TestContextLogger:

    def test_component_attached(self, caplog):
        logger = get_logger("tests.logging", ComponentType.DUMPER)

        with caplog.at_level(logging.INFO, logger="tests.logging"):
            with log_context(table="roads"):
                logger.info("hello")

        record = caplog.records[-1]
        assert record.extra["component"] == "dumper"
        assert record.extra["table"] == "roads"
