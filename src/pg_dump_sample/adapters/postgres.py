"""PostgreSQL dump source.

Provides ``PostgresSource``, an implementation of the ``DumpSource``
protocol on a psycopg (v3) connection.

Rows are fetched through ``COPY (<query>) TO STDOUT`` with every column
loaded as ``text``: values arrive exactly as the server renders them for
COPY, which keeps the dump byte-compatible with ``pg_dump``, and they are
streamed block by block instead of being fetched as a whole.

Usage:
    from pg_dump_sample.adapters.postgres import PostgresSource
    from pg_dump_sample.factory import connect_database

    conn = connect_database("postgresql://user@localhost/mydb")
    source = PostgresSource(conn)
    for row in source.stream_rows("users", "SELECT id, name FROM users", 2):
        ...
    conn.close()
"""

from collections.abc import Iterator

import psycopg
from psycopg import Connection

from pg_dump_sample.errors import QueryExecutionError
from pg_dump_sample.schema.introspector import SchemaIntrospector


class PostgresSource:
    """PostgreSQL implementation of the ``DumpSource`` protocol.

    The connection is passed in by the caller and stays owned by it.

    Args:
        conn: Open psycopg connection.

    Example:
        source = PostgresSource(conn)
        columns = source.get_table_columns("users")
    """

    def __init__(self, conn: Connection) -> None:
        self._conn = conn
        self._introspector = SchemaIntrospector(conn)

    # ------------------------------------------------------------------
    # Schema catalog
    # ------------------------------------------------------------------

    def get_table_name(self, table: str) -> str:
        return self._introspector.get_table_name(table)

    def get_table_columns(self, table: str) -> list[str]:
        return self._introspector.get_table_columns(table)

    def get_table_dependencies(self, table: str) -> set[str]:
        return self._introspector.get_table_dependencies(table)

    # ------------------------------------------------------------------
    # Row streaming
    # ------------------------------------------------------------------

    def stream_rows(
        self, table: str, query: str, column_count: int
    ) -> Iterator[tuple[str | None, ...]]:
        """Stream the rows of ``query`` as text tuples.

        Raises:
            QueryExecutionError: If the query fails at any point while
                rows are being read.
        """
        # Newlines keep a trailing line comment in the query from
        # swallowing the closing parenthesis
        statement = f"COPY (\n{query}\n) TO STDOUT"
        try:
            with self._conn.cursor() as cur:
                with cur.copy(statement) as copy:
                    copy.set_types(["text"] * column_count)
                    yield from copy.rows()
        except (psycopg.Error, UnicodeDecodeError) as e:
            raise QueryExecutionError(table, query, str(e)) from e
