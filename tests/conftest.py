"""Shared fixtures: an in-memory ``DumpSource`` with a small blog schema."""

import re
from collections.abc import Iterator

import pytest

from pg_dump_sample.errors import QueryExecutionError, SchemaQueryError

_PROJECTION = re.compile(r"^SELECT (.+?) FROM ", re.DOTALL)
_QUOTED = re.compile(r'"((?:[^"]|"")*)"')


class FakeSource:
    """In-memory stand-in for ``PostgresSource``.

    Tables are declared with their columns, FK targets and rows (dicts),
    keyed by catalog name. ``aliases`` maps other spellings (such as
    ``public.users``) onto a catalog name, the way ``regclass`` does.
    ``stream_rows`` honours the quoted projection of generated queries;
    anything else yields every column. Queries can be pinned to fixed
    results with ``query_results``.
    """

    def __init__(self) -> None:
        self.tables: dict[str, dict] = {}
        self.query_results: dict[str, list[tuple]] = {}
        self.failing_queries: set[str] = set()
        self.queries: list[tuple[str, str]] = []
        self.introspected: list[str] = []
        self.aliases: dict[str, str] = {}

    def add_table(
        self,
        name: str,
        columns: list[str],
        deps: set[str] | None = None,
        rows: list[dict] | None = None,
    ) -> "FakeSource":
        self.tables[name] = {
            "columns": columns,
            "deps": deps or set(),
            "rows": rows or [],
        }
        return self

    def _table(self, table: str) -> dict:
        table = self.aliases.get(table, table)
        if table not in self.tables:
            raise SchemaQueryError(
                f'relation "{table}" does not exist', table=table
            )
        return self.tables[table]

    def get_table_name(self, table: str) -> str:
        self._table(table)
        return self.aliases.get(table, table)

    def get_table_columns(self, table: str) -> list[str]:
        self.introspected.append(table)
        return list(self._table(table)["columns"])

    def get_table_dependencies(self, table: str) -> set[str]:
        return set(self._table(table)["deps"])

    def stream_rows(
        self, table: str, query: str, column_count: int
    ) -> Iterator[tuple]:
        self.queries.append((table, query))
        if query in self.failing_queries:
            raise QueryExecutionError(table, query, "syntax error")
        if query in self.query_results:
            yield from self.query_results[query]
            return

        entry = self._table(table)
        columns = entry["columns"]
        match = _PROJECTION.match(query)
        if match:
            quoted = _QUOTED.findall(match.group(1))
            if quoted:
                columns = [c.replace('""', '"') for c in quoted]
        for row in entry["rows"]:
            yield tuple(row.get(c) for c in columns)


@pytest.fixture
def make_source():
    """Factory for empty ``FakeSource`` instances."""
    return FakeSource


@pytest.fixture
def blog_source() -> FakeSource:
    """users <- posts <- comments, with a few rows each."""
    source = FakeSource()
    source.add_table(
        "users",
        ["id", "username", "email", "created_at"],
        rows=[
            {"id": "1", "username": "alice", "email": "alice@example.com",
             "created_at": "2024-01-01 10:00:00"},
            {"id": "2", "username": "bob", "email": "bob@example.com",
             "created_at": "2024-01-02 11:00:00"},
        ],
    )
    source.add_table(
        "posts",
        ["id", "user_id", "title", "body", "created_at"],
        deps={"users"},
        rows=[
            {"id": "1", "user_id": "1", "title": "First Post",
             "body": "Hello world!", "created_at": "2024-02-01 10:00:00"},
            {"id": "3", "user_id": "2", "title": "Bob's Post",
             "body": None, "created_at": "2024-02-03 12:00:00"},
        ],
    )
    source.add_table(
        "comments",
        ["id", "post_id", "user_id", "body", "created_at"],
        deps={"users", "posts"},
        rows=[
            {"id": "1", "post_id": "1", "user_id": "2",
             "body": "Nice post,\tAlice!\nReally.", "created_at": "2024-03-01 10:00:00"},
        ],
    )
    return source
