"""pg-dump-sample: manifest-driven partial PostgreSQL dumps.

Produces a referentially consistent subset of a database as a plain
``pg_dump``-style script: tables ordered by their foreign keys, rows
selected by per-table queries, COPY blocks replayable with ``psql``.

Usage:
    from pg_dump_sample import PostgresSource, connect_database, load_manifest, make_dump

    manifest = load_manifest("manifest.yaml")
    conn = connect_database("postgresql://app@localhost/app")
    with open("sample.sql", "w", encoding="utf-8", newline="") as out:
        make_dump(PostgresSource(conn), manifest, out)
    conn.close()
"""

__version__ = "0.1.0"

# Sources
from pg_dump_sample.adapters.base import DumpSource
from pg_dump_sample.adapters.postgres import PostgresSource

# Config
from pg_dump_sample.config.loader import load_db_config
from pg_dump_sample.config.models import DatabaseConfig, DatabaseProfile

# Dump engine
from pg_dump_sample.dump.copy import format_row, parse_row
from pg_dump_sample.dump.orchestrator import make_dump, plan_dump
from pg_dump_sample.dump.query import build_query, render_template

# Errors
from pg_dump_sample.errors import (
    CyclicDependencyError,
    DatabaseConnectionError,
    DumpError,
    ManifestError,
    OutputError,
    ProfileNotFoundError,
    QueryExecutionError,
    SchemaQueryError,
    UnknownColumnError,
)

# Factory
from pg_dump_sample.factory import build_conninfo, connect_database, resolve_url

# Manifest
from pg_dump_sample.manifest.loader import load_manifest, read_manifest
from pg_dump_sample.manifest.models import Manifest, ManifestItem

# Schema
from pg_dump_sample.schema.introspector import SchemaIntrospector
from pg_dump_sample.schema.models import DumpResult
from pg_dump_sample.schema.resolver import resolve_dump_order

__all__ = [
    # Sources
    "DumpSource",
    "PostgresSource",
    # Config
    "load_db_config",
    "DatabaseProfile",
    "DatabaseConfig",
    # Dump engine
    "make_dump",
    "plan_dump",
    "build_query",
    "render_template",
    "format_row",
    "parse_row",
    # Errors
    "DumpError",
    "SchemaQueryError",
    "UnknownColumnError",
    "CyclicDependencyError",
    "QueryExecutionError",
    "OutputError",
    "ManifestError",
    "DatabaseConnectionError",
    "ProfileNotFoundError",
    # Factory
    "connect_database",
    "build_conninfo",
    "resolve_url",
    # Manifest
    "load_manifest",
    "read_manifest",
    "Manifest",
    "ManifestItem",
    # Schema
    "SchemaIntrospector",
    "DumpResult",
    "resolve_dump_order",
]
