"""Exception hierarchy for dump generation.

Every failure raised while producing a dump derives from ``DumpError`` so
callers can catch the whole family at once, while still telling apart the
four failure kinds:

- ``SchemaQueryError``: catalog introspection failed (missing table,
  permission denied, lost connection).
- ``CyclicDependencyError``: the foreign-key graph of the manifest tables
  has a cycle, so no load order exists.
- ``QueryExecutionError``: a per-table row query failed at the database.
- ``OutputError``: the output stream rejected a write.

Manifest and connection errors live outside the dump family because they
happen before a dump starts.

Usage:
    from pg_dump_sample.errors import DumpError, CyclicDependencyError

    try:
        make_dump(source, manifest, out)
    except CyclicDependencyError as e:
        print(f"Cycle between: {', '.join(e.tables)}")
    except DumpError as e:
        print(f"Dump failed: {e}")
"""


class DumpError(Exception):
    """Base class for errors raised while generating a dump."""

    pass


class SchemaQueryError(DumpError):
    """Raised when a catalog query against the live schema fails."""

    def __init__(self, message: str, table: str | None = None):
        super().__init__(message)
        self.table = table


class UnknownColumnError(SchemaQueryError):
    """Raised when a manifest lists columns the table does not have."""

    def __init__(self, table: str, columns: list[str]):
        super().__init__(
            f"Table '{table}' has no column(s): {', '.join(columns)}",
            table=table,
        )
        self.columns = columns


class CyclicDependencyError(DumpError):
    """Raised when manifest tables reference each other in a cycle.

    Attributes:
        tables: Tables that could not be ordered, in manifest order.
    """

    def __init__(self, tables: list[str]):
        super().__init__(
            f"Cyclic foreign key dependency between tables: {', '.join(tables)}"
        )
        self.tables = tables


class QueryExecutionError(DumpError):
    """Raised when the row query for a table fails."""

    def __init__(self, table: str, query: str, reason: str):
        super().__init__(f"Query for table '{table}' failed: {reason}")
        self.table = table
        self.query = query


class OutputError(DumpError):
    """Raised when writing to the output stream fails."""

    pass


class ManifestError(Exception):
    """Raised when a manifest file cannot be read or is invalid."""

    pass


class DatabaseConnectionError(Exception):
    """Raised when the database connection or its health check fails."""

    pass


class ProfileNotFoundError(Exception):
    """Raised when no database profile is configured or it does not exist."""

    pass
