"""Dump source protocol definition.

Defines the ``DumpSource`` Protocol the dump engine reads from. All
methods are synchronous -- the engine dumps one table at a time and
streams each result to a single output.

Usage:
    from pg_dump_sample.adapters.base import DumpSource

    def copy_users(source: DumpSource) -> None:
        columns = source.get_table_columns("users")
        for row in source.stream_rows("users", "SELECT * FROM users", len(columns)):
            print(row)
"""

from collections.abc import Iterator
from typing import Protocol


class DumpSource(Protocol):
    """Database interface the dump engine needs.

    This Protocol keeps the engine independent from the driver, so tests
    can feed it in-memory tables.
    """

    def get_table_name(self, table: str) -> str:
        """Get the name the catalog reports for ``table``.

        This is the form ``get_table_dependencies`` returns its targets
        in, so manifest names can be matched against foreign keys.

        Raises:
            SchemaQueryError: If the table does not exist or the catalog
                query fails.
        """
        ...

    def get_table_columns(self, table: str) -> list[str]:
        """Get the column names of a table in ordinal order.

        Raises:
            SchemaQueryError: If the table does not exist or the catalog
                query fails.
        """
        ...

    def get_table_dependencies(self, table: str) -> set[str]:
        """Get the tables ``table`` references through foreign keys.

        Raises:
            SchemaQueryError: If the table does not exist or the catalog
                query fails.
        """
        ...

    def stream_rows(
        self, table: str, query: str, column_count: int
    ) -> Iterator[tuple[str | None, ...]]:
        """Run ``query`` and yield its rows with every value as text.

        Rows are produced lazily; the result set is never held in memory
        as a whole.

        Args:
            table: Table the rows are dumped for (used in error reports).
            query: SELECT statement without trailing semicolon.
            column_count: Number of columns the query returns.

        Yields:
            One tuple per row, ``None`` for NULL.

        Raises:
            QueryExecutionError: If the query fails.
        """
        ...
