"""Dump generation: COPY encoding, query building, writing, orchestration.

Usage:
    from pg_dump_sample.dump import make_dump, format_row, build_query
"""

from pg_dump_sample.dump.copy import escape_value, format_row, parse_row, unescape_value
from pg_dump_sample.dump.orchestrator import dump_table, make_dump, plan_dump
from pg_dump_sample.dump.query import build_query, quote_ident, render_template
from pg_dump_sample.dump.writer import DumpWriter

__all__ = [
    "make_dump",
    "plan_dump",
    "dump_table",
    "DumpWriter",
    "build_query",
    "render_template",
    "quote_ident",
    "format_row",
    "parse_row",
    "escape_value",
    "unescape_value",
]
