"""Tests for query building and template substitution (dump/query.py)."""

import pytest

from pg_dump_sample.dump.query import (
    build_query,
    column_list,
    quote_ident,
    render_template,
)
from pg_dump_sample.manifest.models import ManifestItem


class TestRenderTemplate:
    """``{{name}}`` substitution from manifest vars."""

    def test_substitutes_variable(self) -> None:
        query = "SELECT * FROM users WHERE id <= {{max_user_id}}"
        assert render_template(query, {"max_user_id": "2"}) == (
            "SELECT * FROM users WHERE id <= 2"
        )

    def test_whitespace_inside_braces(self) -> None:
        assert render_template("{{ a }}-{{a}}", {"a": "x"}) == "x-x"

    def test_repeated_placeholders(self) -> None:
        assert render_template("{{n}} {{n}} {{n}}", {"n": "1"}) == "1 1 1"

    def test_unresolved_placeholder_left_verbatim(self) -> None:
        """Unknown names are not an error and are not blanked out."""
        query = "SELECT '{{not_a_var}}' AS literal, {{known}}"
        assert render_template(query, {"known": "42"}) == (
            "SELECT '{{not_a_var}}' AS literal, 42"
        )

    def test_no_vars(self) -> None:
        assert render_template("SELECT 1", {}) == "SELECT 1"

    def test_value_is_not_rescanned(self) -> None:
        """A value that looks like a placeholder is inserted literally."""
        assert render_template("{{a}}", {"a": "{{b}}", "b": "x"}) == "{{b}}"


class TestQuoting:
    """Identifier quoting."""

    def test_quote_ident(self) -> None:
        assert quote_ident("id") == '"id"'

    def test_quote_ident_doubles_quotes(self) -> None:
        assert quote_ident('we"ird') == '"we""ird"'

    def test_column_list(self) -> None:
        assert column_list(["id", "username", "email"]) == (
            '"id", "username", "email"'
        )


class TestBuildQuery:
    """SELECT statement generation per manifest entry."""

    def test_default_query_selects_all_columns(self) -> None:
        item = ManifestItem(table="users")
        query = build_query(item, {}, ["id", "username", "email", "created_at"])
        assert query == (
            'SELECT "id", "username", "email", "created_at" FROM users'
        )

    def test_default_query_has_no_filter_or_order(self) -> None:
        query = build_query(ManifestItem(table="users"), {}, ["id"])
        assert "WHERE" not in query
        assert "ORDER BY" not in query

    def test_default_query_with_explicit_columns(self) -> None:
        item = ManifestItem(table="users", columns=["email", "id"])
        assert build_query(item, {}, item.columns) == (
            'SELECT "email", "id" FROM users'
        )

    def test_custom_query_rendered(self) -> None:
        item = ManifestItem(
            table="users", query="SELECT * FROM users WHERE id <= {{max_id}}"
        )
        assert build_query(item, {"max_id": "2"}, ["id"]) == (
            "SELECT * FROM users WHERE id <= 2"
        )

    @pytest.mark.parametrize(
        "raw", ["SELECT * FROM users;", "SELECT * FROM users ;\n", "  SELECT * FROM users\n"]
    )
    def test_custom_query_trailing_semicolon_stripped(self, raw: str) -> None:
        item = ManifestItem(table="users", query=raw)
        assert build_query(item, {}, ["id"]) == "SELECT * FROM users"

    def test_custom_query_with_explicit_columns_is_projected(self) -> None:
        """Explicit columns restrict the projection of a custom query too."""
        item = ManifestItem(
            table="users",
            query="SELECT * FROM users WHERE id <= {{max_id}}",
            columns=["id", "username"],
        )
        assert build_query(item, {"max_id": "2"}, item.columns) == (
            'SELECT "id", "username" FROM '
            "(SELECT * FROM users WHERE id <= 2) AS _sample"
        )
