# ============================================================================
# LITERAL RENDERING
# ============================================================================
# STATUS: Core - Literal quoting for the schema definition DSL
# PURPOSE: Render names, column lists and default values as DSL literals
# LAST_REVIEWED: 17 OCT 2026
# EXPORTS: quote_string, quote_list, default_literal
# ============================================================================
"""
Literal rendering for the schema definition DSL.

The output is Ruby-flavoured (``create_table "t" do |t| ... end``), so
strings are double-quoted with Ruby's escaping rules: a ``#`` that would
start an interpolation is escaped too.

Usage:
    quote_string('name')             # '"name"'
    quote_list(['a', 'b'])           # '["a", "b"]'
    default_literal(Decimal('1.50')) # '1.50'
"""

from datetime import date, datetime, time
from decimal import Decimal
from typing import Any, Optional, Sequence


_ESCAPES = {
    '"': '\\"',
    "\\": "\\\\",
    "\n": "\\n",
    "\t": "\\t",
    "\r": "\\r",
    "\f": "\\f",
    "\v": "\\v",
    "\a": "\\a",
    "\b": "\\b",
    "\x1b": "\\e",
}


def quote_string(value: str) -> str:
    """Double-quote a string the way the DSL's ``inspect`` does."""
    out = []
    for i, ch in enumerate(value):
        if ch in _ESCAPES:
            out.append(_ESCAPES[ch])
        elif ch == "#" and value[i + 1:i + 2] in ("{", "$", "@"):
            out.append("\\#")
        elif ord(ch) < 0x20 or ord(ch) == 0x7F:
            out.append(f"\\x{ord(ch):02X}")
        else:
            out.append(ch)
    return '"' + "".join(out) + '"'


def quote_list(values: Sequence[str]) -> str:
    """Render a list of strings as an array literal: ``["a", "b"]``."""
    return "[" + ", ".join(quote_string(v) for v in values) + "]"


def default_literal(value: Any, column: Optional[Any] = None) -> str:
    """
    Render a column default as a DSL literal.

    Args:
        value: Default value as reported by the metadata source
        column: The owning ColumnModel (unused here; part of the
                quoting-function signature so callers can specialise)

    Returns:
        Literal string, e.g. ``"abc"``, ``42``, ``true``, ``'2026-01-01'``
    """
    if value is None:
        return "nil"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, Decimal):
        return format(value, "f")
    if isinstance(value, datetime):
        return "'" + value.strftime("%Y-%m-%d %H:%M:%S") + "'"
    if isinstance(value, date):
        return "'" + value.strftime("%Y-%m-%d") + "'"
    if isinstance(value, time):
        return "'" + value.strftime("%H:%M:%S") + "'"
    if isinstance(value, (int, float)):
        return repr(value)
    return quote_string(str(value))


__all__ = [
    "quote_string",
    "quote_list",
    "default_literal",
]
