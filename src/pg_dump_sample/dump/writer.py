"""Dump text writer.

Emits the structural parts of a plain-format dump: the preamble, one
COPY block per table, post-action statements, and the trailer. Every
write failure on the underlying stream is raised as ``OutputError``.
"""

from collections.abc import Iterable, Sequence
from typing import TextIO

from pg_dump_sample.dump.copy import TERMINATOR, format_row
from pg_dump_sample.dump.query import column_list
from pg_dump_sample.errors import OutputError

PREAMBLE = """\
--
-- PostgreSQL database dump
--

BEGIN;

SET client_encoding = 'UTF8';
SET standard_conforming_strings = on;
"""

TRAILER = """\

COMMIT;

--
-- PostgreSQL database dump complete
--

"""


class DumpWriter:
    """Writes a dump to a text stream.

    Usage:
        writer = DumpWriter(sys.stdout)
        writer.begin_dump()
        writer.begin_table("users", ["id", "name"])
        writer.write_rows([("1", "alice")])
        writer.end_table()
        writer.write_sql("SELECT pg_catalog.setval('users_id_seq', 1, true)")
        writer.end_dump()
    """

    def __init__(self, out: TextIO):
        self._out = out
        self._in_table = False

    def begin_dump(self) -> None:
        self._write(PREAMBLE)

    def end_dump(self) -> None:
        if self._in_table:
            raise RuntimeError("end_dump() called inside a COPY block")
        self._write(TRAILER)
        self.flush()

    def begin_table(self, table: str, columns: Sequence[str]) -> None:
        """Write the header comment and COPY statement of a table block."""
        if self._in_table:
            raise RuntimeError("begin_table() called inside a COPY block")
        self._write(
            "\n"
            "--\n"
            f"-- Data for Name: {table}; Type: TABLE DATA\n"
            "--\n"
            "\n"
            f"COPY {table} ({column_list(columns)}) FROM stdin;\n"
        )
        self._in_table = True

    def write_rows(self, rows: Iterable[Sequence[str | bytes | None]]) -> int:
        """Serialize and write rows one at a time.

        Returns:
            Number of rows written.
        """
        count = 0
        for row in rows:
            self._write(format_row(row))
            count += 1
        return count

    def end_table(self) -> None:
        """Close the current COPY block."""
        if not self._in_table:
            raise RuntimeError("end_table() called outside a COPY block")
        self._write(f"{TERMINATOR}\n\n")
        self._in_table = False

    def write_sql(self, statement: str) -> None:
        """Write a standalone SQL statement, terminated with a semicolon."""
        statement = statement.rstrip()
        if not statement.endswith(";"):
            statement += ";"
        self._write(f"{statement}\n")

    def flush(self) -> None:
        try:
            self._out.flush()
        except (OSError, ValueError) as e:
            raise OutputError(f"Failed to flush dump output: {e}") from e

    def _write(self, text: str) -> None:
        try:
            self._out.write(text)
        except (OSError, ValueError) as e:
            # ValueError: write to a closed file
            raise OutputError(f"Failed to write dump output: {e}") from e
