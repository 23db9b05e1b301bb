# ============================================================================
# STRUCTURED LOGGING
# ============================================================================
# STATUS: Core - Structured logging with dump context
# PURPOSE: Tag every log line with the schema/table being dumped
# LAST_REVIEWED: 17 OCT 2026
# ============================================================================
"""
Structured Logging

Log output always goes to stderr: stdout may be carrying the schema
definition itself (``scripts/dump_schema.py`` without ``--output``).

Every record picks up the active dump context (schema, table, column,
operation), so a warning raised deep inside the column spec builder still
says which table it belongs to.

Formats:
    human  2026-10-17 12:00:00 WARNING  core.schema.serializer [table=events]: Could not dump ...
    json   {"timestamp": ..., "level": "WARNING", "message": ..., "context": {"table": "events"}}

Usage:
    from core.logging import ComponentType, get_logger, log_context

    logger = get_logger(__name__, ComponentType.DUMPER)

    with log_context(table="locations", operation="dump_table"):
        logger.info("Dumping table")
"""

import json
import logging
import os
import sys
import threading
from contextlib import contextmanager
from dataclasses import dataclass, field, fields
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Optional, TextIO, Union


class ComponentType(str, Enum):
    """Where a log line comes from."""
    DUMPER = "dumper"
    SOURCE = "source"
    EXPORTER = "exporter"
    CLI = "cli"


# Libraries that are chatty at INFO
NOISY_LOGGERS = ("psycopg", "azure", "urllib3")

# Context fields shown inline by HumanFormatter, in this order
_HUMAN_FIELDS = (
    ("schema_name", "schema"),
    ("table", "table"),
    ("column", "column"),
)


# ============================================================================
# CONTEXT
# ============================================================================

@dataclass(frozen=True)
class LogContext:
    """
    Fields attached to every record logged inside a ``log_context`` block.

    Immutable: nesting creates a child context, the parent is restored on
    exit.
    """
    schema_name: Optional[str] = None
    table: Optional[str] = None
    column: Optional[str] = None
    operation: Optional[str] = None
    component: Optional[str] = None
    run_id: Optional[str] = None
    extra: Dict[str, Any] = field(default_factory=dict)

    def child(self, **overrides) -> "LogContext":
        """Copy with ``overrides`` applied; ``extra`` dicts are merged."""
        values = {f.name: getattr(self, f.name) for f in fields(self) if f.name != "extra"}
        extra = {**self.extra, **overrides.pop("extra", {})}
        unknown = set(overrides) - set(values)
        if unknown:
            extra.update({key: overrides.pop(key) for key in unknown})
        values.update(overrides)
        return LogContext(extra=extra, **values)

    def to_dict(self) -> Dict[str, Any]:
        """Non-empty fields, with ``extra`` flattened in."""
        result = {
            f.name: getattr(self, f.name)
            for f in fields(self)
            if f.name != "extra" and getattr(self, f.name) is not None
        }
        result.update(self.extra)
        return result


_local = threading.local()
_EMPTY_CONTEXT = LogContext()


def get_current_context() -> LogContext:
    """Innermost active context for this thread."""
    stack = getattr(_local, "stack", None)
    return stack[-1] if stack else _EMPTY_CONTEXT


@contextmanager
def log_context(**kwargs):
    """
    Push context fields for the duration of a block.

    Unknown keyword names go into ``extra``.

    Example:
        with log_context(schema_name="public"):
            with log_context(table="locations"):
                logger.info("Fetching columns")   # schema=public, table=locations
    """
    if not hasattr(_local, "stack"):
        _local.stack = []
    context = get_current_context().child(**kwargs)
    _local.stack.append(context)
    try:
        yield context
    finally:
        _local.stack.pop()


# ============================================================================
# FORMATTERS
# ============================================================================

def _record_data(record: logging.LogRecord) -> Dict[str, Any]:
    return getattr(record, "extra", None) or {}


class StructuredFormatter(logging.Formatter):
    """
    One JSON object per line, for log shippers.

    Context fields go under ``context``; per-call ``extra`` data (beyond
    what the context already says) goes under ``data``.
    """

    def __init__(self, include_context: bool = True, include_source: bool = True):
        super().__init__()
        self.include_context = include_context
        self.include_source = include_source

    def format(self, record: logging.LogRecord) -> str:
        context = get_current_context().to_dict() if self.include_context else {}

        log_data: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc)
            .isoformat()
            .replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if context:
            log_data["context"] = context

        data = {k: v for k, v in _record_data(record).items() if k not in context}
        if data:
            log_data["data"] = data

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        if self.include_source:
            log_data["source"] = f"{record.filename}:{record.lineno}"

        return json.dumps(log_data, default=str)


class HumanFormatter(logging.Formatter):
    """Single-line format for terminals: timestamp, level, logger, [context]."""

    def format(self, record: logging.LogRecord) -> str:
        timestamp = datetime.fromtimestamp(record.created, timezone.utc).strftime("%Y-%m-%d %H:%M:%S")

        context = get_current_context()
        parts = [
            f"{label}={getattr(context, name)}"
            for name, label in _HUMAN_FIELDS
            if getattr(context, name)
        ]
        context_str = f" [{', '.join(parts)}]" if parts else ""

        result = f"{timestamp} {record.levelname:<8} {record.name}{context_str}: {record.getMessage()}"
        if record.exc_info:
            result += "\n" + self.formatException(record.exc_info)
        return result


# ============================================================================
# LOGGERS
# ============================================================================

class ContextLogger(logging.LoggerAdapter):
    """
    LoggerAdapter that snapshots the active context into ``record.extra``.

    The component given to ``get_logger`` is filled in unless the context
    already names one.
    """

    def process(self, msg, kwargs):
        extra = dict(kwargs.get("extra") or {})
        extra.update(get_current_context().to_dict())
        component = (self.extra or {}).get("component")
        if component:
            extra.setdefault("component", component)
        kwargs["extra"] = {"extra": extra}
        return msg, kwargs


def get_logger(name: str, component: Optional[ComponentType] = None) -> ContextLogger:
    """
    Context-aware logger for ``name``.

    Args:
        name: Usually ``__name__``
        component: Tag added to every record from this logger
    """
    return ContextLogger(
        logging.getLogger(name),
        {"component": component.value if component else None},
    )


def configure_logging(
    level: Union[str, int] = "INFO",
    json_output: bool = False,
    stream: Optional[TextIO] = None,
) -> logging.Handler:
    """
    Install a single root handler.

    Args:
        level: Root level (name or number)
        json_output: JSON lines instead of human format; LOG_FORMAT=json
                     has the same effect
        stream: Destination (default: stderr)

    Returns:
        The installed handler
    """
    if isinstance(level, str):
        level = getattr(logging, level.upper(), logging.INFO)

    if json_output or os.getenv("LOG_FORMAT", "").lower() == "json":
        formatter: logging.Formatter = StructuredFormatter()
    else:
        formatter = HumanFormatter()

    root = logging.getLogger()
    root.setLevel(level)
    for handler in root.handlers[:]:
        root.removeHandler(handler)

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(formatter)
    root.addHandler(handler)

    # Library debug output only when explicitly asked for
    library_level = logging.DEBUG if level <= logging.DEBUG else logging.WARNING
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(library_level)

    return handler


# ============================================================================
# EXPORTS
# ============================================================================

__all__ = [
    "ComponentType",
    "LogContext",
    "StructuredFormatter",
    "HumanFormatter",
    "ContextLogger",
    "get_logger",
    "configure_logging",
    "log_context",
    "get_current_context",
]
