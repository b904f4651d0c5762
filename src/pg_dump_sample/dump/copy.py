"""COPY text format encoding.

Rows are written the way ``COPY ... TO STDOUT`` (text format) writes them:
tab-separated values, ``\\N`` for NULL, and backslash escapes for the
characters that would otherwise break the line structure.

Values may also arrive as ``bytes`` (psycopg loads text as bytes from
SQL_ASCII databases). They are decoded as UTF-8 with ``surrogateescape``,
so bytes that are not valid UTF-8 come back out unchanged when the dump
stream is written with the same error handler.

Usage:
    from pg_dump_sample.dump.copy import format_row, parse_row

    line = format_row(["1", "alice", None])
    # '1\\talice\\t\\\\N\\n'
    parse_row(line)
    # ['1', 'alice', None]
"""

from collections.abc import Iterable

NULL = "\\N"
DELIMITER = "\t"
TERMINATOR = "\\."
ENCODING = "utf-8"
ENCODING_ERRORS = "surrogateescape"

_ESCAPES = str.maketrans({
    "\\": "\\\\",
    "\t": "\\t",
    "\n": "\\n",
    "\r": "\\r",
})

# Inverse of the escapes above, plus the other single-letter escapes COPY
# accepts on input. Octal (\NNN) and hex (\xHH) byte escapes are not decoded.
_UNESCAPES = {
    "\\": "\\",
    "t": "\t",
    "n": "\n",
    "r": "\r",
    "b": "\b",
    "f": "\f",
    "v": "\v",
}


def escape_value(value: str | bytes | None) -> str:
    """Encode a single value for the COPY text format."""
    if value is None:
        return NULL
    if isinstance(value, bytes):
        value = value.decode(ENCODING, ENCODING_ERRORS)
    return value.translate(_ESCAPES)


def format_row(values: Iterable[str | bytes | None]) -> str:
    """Encode one row as a COPY text line, newline included.

    Args:
        values: Column values as text, ``None`` for NULL.

    Returns:
        The encoded line.
    """
    return DELIMITER.join(escape_value(v) for v in values) + "\n"


def unescape_value(field: str) -> str | None:
    """Decode a single COPY text field."""
    if field == NULL:
        return None
    if "\\" not in field:
        return field

    chars: list[str] = []
    i = 0
    while i < len(field):
        ch = field[i]
        if ch == "\\" and i + 1 < len(field):
            nxt = field[i + 1]
            chars.append(_UNESCAPES.get(nxt, nxt))
            i += 2
        else:
            chars.append(ch)
            i += 1
    return "".join(chars)


def parse_row(line: str) -> list[str | None]:
    """Decode a COPY text line back into values.

    Raises:
        ValueError: If ``line`` is the end-of-data marker.
    """
    line = line.removesuffix("\n")
    if line == TERMINATOR:
        raise ValueError("End-of-data marker is not a row")
    return [unescape_value(field) for field in line.split(DELIMITER)]
