"""Dump generation driven by a manifest.

Two phases:

1. **Plan** -- introspect every manifest table, check explicit columns,
   resolve the foreign-key load order and build each table's query.
   Nothing is written yet, so schema errors and dependency cycles leave
   the output untouched.
2. **Write** -- emit the preamble, one COPY block per table in dump
   order (rows streamed straight from the source), each table's
   post-actions, and the trailer.

Any error aborts the run and propagates unchanged; there is no retry and
no skipping of failing tables.

Usage:
    from pg_dump_sample.adapters.postgres import PostgresSource
    from pg_dump_sample.dump.orchestrator import make_dump
    from pg_dump_sample.manifest import load_manifest

    manifest = load_manifest("manifest.yaml")
    with open("sample.sql", "w", encoding="utf-8", newline="") as out:
        result = make_dump(PostgresSource(conn), manifest, out)
    print(result.format_report())
"""

import logging
from typing import TextIO

from pg_dump_sample.adapters.base import DumpSource
from pg_dump_sample.dump.query import build_query
from pg_dump_sample.dump.writer import DumpWriter
from pg_dump_sample.errors import SchemaQueryError, UnknownColumnError
from pg_dump_sample.manifest.models import Manifest
from pg_dump_sample.schema.models import DumpResult, TablePlan, TableSchema
from pg_dump_sample.schema.resolver import resolve_dump_order

logger = logging.getLogger(__name__)


def plan_dump(source: DumpSource, manifest: Manifest) -> list[TablePlan]:
    """Resolve every manifest table into a ``TablePlan``, in dump order.

    Args:
        source: Database to introspect.
        manifest: Dump manifest.

    Returns:
        One plan per manifest table, referenced tables first.

    Raises:
        SchemaQueryError: If a table cannot be introspected, or two manifest
            entries name the same table.
        UnknownColumnError: If explicit columns are missing from a table.
        CyclicDependencyError: If the manifest tables reference each
            other in a cycle.
    """
    # catalog name -> manifest name
    manifest_names: dict[str, str] = {}
    for item in manifest.tables:
        catalog_name = source.get_table_name(item.table)
        if catalog_name in manifest_names:
            raise SchemaQueryError(
                f"Manifest tables '{manifest_names[catalog_name]}' and "
                f"'{item.table}' name the same table",
                table=item.table,
            )
        manifest_names[catalog_name] = item.table

    schemas: dict[str, TableSchema] = {}
    for item in manifest.tables:
        # foreign-key targets come back in catalog spelling
        dependencies = {
            manifest_names.get(dep, dep)
            for dep in source.get_table_dependencies(item.table)
        }
        schemas[item.table] = TableSchema(
            name=item.table,
            columns=source.get_table_columns(item.table),
            dependencies=dependencies,
        )
        if item.columns is not None:
            missing = [
                c for c in item.columns if not schemas[item.table].has_column(c)
            ]
            if missing:
                raise UnknownColumnError(item.table, missing)

    order = resolve_dump_order(
        manifest.table_names,
        {name: schema.dependencies for name, schema in schemas.items()},
    )
    logger.info(f"Dump order: {', '.join(order) if order else '(no tables)'}")

    plans: list[TablePlan] = []
    for table in order:
        item = manifest.get_item(table)
        columns = item.columns if item.columns is not None else schemas[table].columns
        plans.append(
            TablePlan(
                table=table,
                columns=list(columns),
                query=build_query(item, manifest.vars, columns),
                post_actions=list(item.post_actions),
            )
        )
    return plans


def dump_table(source: DumpSource, writer: DumpWriter, plan: TablePlan) -> int:
    """Write one table's COPY block and post-actions.

    Returns:
        Number of rows written.
    """
    logger.debug(f"Dumping {plan.table}: {plan.query}")

    writer.begin_table(plan.table, plan.columns)
    count = writer.write_rows(
        source.stream_rows(plan.table, plan.query, len(plan.columns))
    )
    writer.end_table()

    for statement in plan.post_actions:
        writer.write_sql(statement)

    logger.info(f"Dumped {count} rows from {plan.table}")
    return count


def make_dump(source: DumpSource, manifest: Manifest, out: TextIO) -> DumpResult:
    """Write a dump of the manifest tables to ``out``.

    An empty manifest produces a valid dump with no COPY blocks.

    Args:
        source: Database to read schema and rows from.
        manifest: Dump manifest.
        out: Text stream receiving the dump.

    Returns:
        ``DumpResult`` with the dump order and per-table row counts.

    Raises:
        SchemaQueryError: Introspection failed (nothing written).
        CyclicDependencyError: No valid load order (nothing written).
        QueryExecutionError: A table's query failed mid-dump.
        OutputError: Writing to ``out`` failed.
    """
    plans = plan_dump(source, manifest)

    writer = DumpWriter(out)
    result = DumpResult()

    writer.begin_dump()
    for plan in plans:
        result.row_counts[plan.table] = dump_table(source, writer, plan)
        result.tables.append(plan.table)
    writer.end_dump()

    return result
