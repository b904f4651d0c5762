"""Dump sources package.

Provides the ``DumpSource`` Protocol and the PostgreSQL implementation.

Usage:
    from pg_dump_sample.adapters import DumpSource, PostgresSource
"""

from pg_dump_sample.adapters.base import DumpSource
from pg_dump_sample.adapters.postgres import PostgresSource

__all__ = [
    "DumpSource",
    "PostgresSource",
]
