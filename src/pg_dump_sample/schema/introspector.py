"""PostgreSQL schema introspection via pg_catalog.

This module queries the live database for what the dump engine needs to
know about each table:
- Columns, in ordinal order (dropped columns excluded)
- Foreign-key targets (the tables that must be loaded first)

Table names are resolved through ``regclass``, so they follow the
connection's ``search_path`` and may be schema-qualified. A table that
does not exist makes the cast fail, which surfaces as
``SchemaQueryError``.

Uses psycopg (v3) for PostgreSQL connections.
"""

import psycopg
from psycopg import Connection

from pg_dump_sample.errors import SchemaQueryError


class SchemaIntrospector:
    """Introspects table columns and foreign keys.

    The connection is owned by the caller; the introspector never opens
    or closes it.

    Usage:
        with psycopg.connect(url) as conn:
            introspector = SchemaIntrospector(conn)
            columns = introspector.get_table_columns("users")
            parents = introspector.get_table_dependencies("posts")
    """

    COLUMNS_QUERY = """
        SELECT a.attname
        FROM pg_catalog.pg_attribute a
        WHERE a.attrelid = %s::regclass
          AND a.attnum > 0
          AND NOT a.attisdropped
        ORDER BY a.attnum
    """

    TABLE_NAME_QUERY = "SELECT %s::regclass::text"

    DEPENDENCIES_QUERY = """
        SELECT DISTINCT c.confrelid::regclass::text
        FROM pg_catalog.pg_constraint c
        WHERE c.conrelid = %s::regclass
          AND c.contype = 'f'
    """

    def __init__(self, conn: Connection):
        """Initialize with an open connection.

        Args:
            conn: psycopg connection used for every catalog query
        """
        self._conn = conn

    def get_table_name(self, table: str) -> str:
        """Get the catalog spelling of a table name.

        ``public.users`` and ``"users"`` both come back as ``users`` when
        ``public`` is on the search_path, the same form foreign-key
        targets are reported in.

        Raises:
            SchemaQueryError: If the table does not exist or the query fails.
        """
        rows = self._fetch(self.TABLE_NAME_QUERY, table)
        return rows[0][0]

    def get_table_columns(self, table: str) -> list[str]:
        """Get the column names of a table in ordinal order.

        Raises:
            SchemaQueryError: If the table does not exist or the query fails.
        """
        rows = self._fetch(self.COLUMNS_QUERY, table)
        return [row[0] for row in rows]

    def get_table_dependencies(self, table: str) -> set[str]:
        """Get the tables a table references through foreign keys.

        Self references are included; the resolver ignores them.

        Raises:
            SchemaQueryError: If the table does not exist or the query fails.
        """
        rows = self._fetch(self.DEPENDENCIES_QUERY, table)
        return {row[0] for row in rows}

    def _fetch(self, query: str, table: str) -> list[tuple]:
        try:
            with self._conn.cursor() as cur:
                cur.execute(query, (table,))
                return cur.fetchall()
        except psycopg.Error as e:
            raise SchemaQueryError(
                f"Failed to introspect table '{table}': {e}", table=table
            ) from e
