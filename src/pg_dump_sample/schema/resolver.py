"""Dump order resolution from foreign-key dependencies.

Pure logic -- no I/O. The caller supplies the dependency graph (usually
collected through ``SchemaIntrospector.get_table_dependencies``).

Usage:
    from pg_dump_sample.schema.resolver import resolve_dump_order

    order = resolve_dump_order(
        ["comments", "users", "posts"],
        {"comments": {"users", "posts"}, "posts": {"users"}, "users": set()},
    )
    # ['users', 'posts', 'comments']
"""

import heapq
from collections.abc import Mapping, Sequence

from pg_dump_sample.errors import CyclicDependencyError


def resolve_dump_order(
    tables: Sequence[str],
    dependencies: Mapping[str, set[str]],
) -> list[str]:
    """Order tables so that every table follows the tables it references.

    Kahn's algorithm over the graph restricted to ``tables``: edges to
    tables outside the set and self references are dropped. Whenever
    several tables are ready, the one listed first in ``tables`` wins, so
    independent tables keep their manifest order.

    Args:
        tables: Table names in manifest order.
        dependencies: Table name -> set of tables it has foreign keys to.
            Tables missing from the mapping have no dependencies.

    Returns:
        Tables in dump order (referenced tables first).

    Raises:
        ValueError: If ``tables`` contains duplicates.
        CyclicDependencyError: If the restricted graph has a cycle.

    Example:
        >>> resolve_dump_order(["b", "a"], {"b": {"a"}})
        ['a', 'b']
    """
    position = {table: i for i, table in enumerate(tables)}
    if len(position) != len(tables):
        duplicates = sorted({t for t in tables if list(tables).count(t) > 1})
        raise ValueError(f"Duplicate tables in dump: {', '.join(duplicates)}")

    # Remaining unresolved predecessors per table, and reverse edges
    pending: dict[str, set[str]] = {}
    dependents: dict[str, list[str]] = {table: [] for table in tables}
    for table in tables:
        deps = {
            dep for dep in dependencies.get(table, set())
            if dep in position and dep != table
        }
        pending[table] = deps
        for dep in deps:
            dependents[dep].append(table)

    ready = [position[t] for t in tables if not pending[t]]
    heapq.heapify(ready)

    order: list[str] = []
    while ready:
        table = tables[heapq.heappop(ready)]
        order.append(table)
        for child in dependents[table]:
            pending[child].discard(table)
            if not pending[child]:
                heapq.heappush(ready, position[child])

    if len(order) != len(tables):
        raise CyclicDependencyError(_cycle_members(tables, pending))

    return order


def _cycle_members(tables: Sequence[str], pending: dict[str, set[str]]) -> list[str]:
    """Narrow the unresolved tables down to the ones forming cycles.

    Tables that merely depend on a cycle are peeled off: a table nothing
    else unresolved depends on cannot be part of a cycle.
    """
    blocked = {t for t in tables if pending[t]}
    while True:
        referenced = set().union(*(pending[t] for t in blocked)) if blocked else set()
        leaves = blocked - referenced
        if not leaves:
            break
        blocked -= leaves
    return [t for t in tables if t in blocked]
