"""Row selection query building from manifest entries.

Pure logic -- no I/O. Custom queries are ``{{name}}`` templates filled in
from the manifest ``vars``; tables without one get a plain
``SELECT <columns> FROM <table>``.

Usage:
    from pg_dump_sample.dump.query import build_query, render_template

    render_template("SELECT * FROM users WHERE id <= {{max_id}}", {"max_id": "2"})
    # 'SELECT * FROM users WHERE id <= 2'
"""

import re
from collections.abc import Mapping, Sequence

from pg_dump_sample.manifest.models import ManifestItem

_PLACEHOLDER = re.compile(r"\{\{\s*([A-Za-z_][A-Za-z0-9_.-]*)\s*\}\}")

SUBQUERY_ALIAS = "_sample"


def render_template(template: str, variables: Mapping[str, str]) -> str:
    """Substitute ``{{name}}`` placeholders with values from ``variables``.

    Placeholders without a matching variable are left untouched, so text
    that merely looks like a template survives as written.

    Example:
        >>> render_template("{{a}} {{ b }} {{c}}", {"a": "1", "b": "2"})
        '1 2 {{c}}'
    """
    def substitute(match: re.Match) -> str:
        name = match.group(1)
        if name in variables:
            return variables[name]
        return match.group(0)

    return _PLACEHOLDER.sub(substitute, template)


def quote_ident(name: str) -> str:
    """Quote an identifier the way PostgreSQL does."""
    return '"' + name.replace('"', '""') + '"'


def column_list(columns: Sequence[str]) -> str:
    """Render a quoted, comma-separated column list."""
    return ", ".join(quote_ident(c) for c in columns)


def build_query(
    item: ManifestItem,
    variables: Mapping[str, str],
    columns: Sequence[str],
) -> str:
    """Build the SELECT statement that produces a table's dump rows.

    Args:
        item: Manifest entry for the table.
        variables: Manifest ``vars`` for template substitution.
        columns: Resolved column list (the explicit ``columns`` of the
            entry, or every column of the table).

    Returns:
        SQL text without a trailing semicolon, ready to be wrapped in
        ``COPY (...) TO STDOUT``.

    Example:
        >>> build_query(ManifestItem(table="users"), {}, ["id", "name"])
        'SELECT "id", "name" FROM users'
    """
    if item.query is None:
        return f"SELECT {column_list(columns)} FROM {item.table}"

    query = render_template(item.query, variables).strip().rstrip(";").rstrip()

    # Explicit columns pin the projection even over a custom query
    if item.columns is not None:
        return f"SELECT {column_list(columns)} FROM ({query}) AS {SUBQUERY_ALIAS}"

    return query
