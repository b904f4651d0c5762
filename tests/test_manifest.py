"""Tests for manifest models and YAML loading (manifest/)."""

import io
import textwrap
from pathlib import Path

import pytest
from pydantic import ValidationError

from pg_dump_sample.errors import ManifestError
from pg_dump_sample.manifest.loader import load_manifest, read_manifest
from pg_dump_sample.manifest.models import Manifest, ManifestItem

FULL_MANIFEST = textwrap.dedent("""\
    tables:
      - table: users
      - table: posts
      - table: comments
""")

SAMPLE_MANIFEST = textwrap.dedent("""\
    vars:
      max_user_id: 2
    tables:
      - table: users
        query: "SELECT * FROM users WHERE id <= {{max_user_id}}"
        columns: [id, username, email]
        post_actions:
          - "SELECT pg_catalog.setval('users_id_seq', 100, true)"
      - table: posts
        query: "SELECT * FROM posts WHERE user_id <= {{max_user_id}}"
""")


class TestManifestModels:

    def test_item_defaults(self) -> None:
        item = ManifestItem(table="users")
        assert item.query is None
        assert item.columns is None
        assert item.post_actions == []

    def test_table_required(self) -> None:
        with pytest.raises(ValidationError):
            ManifestItem()

    def test_empty_table_name_rejected(self) -> None:
        with pytest.raises(ValidationError):
            ManifestItem(table="")

    def test_empty_columns_rejected(self) -> None:
        with pytest.raises(ValidationError):
            ManifestItem(table="users", columns=[])

    def test_unknown_field_rejected(self) -> None:
        with pytest.raises(ValidationError):
            ManifestItem(table="users", where="id < 3")

    def test_duplicate_tables_rejected(self) -> None:
        with pytest.raises(ValidationError, match="Duplicate table entries"):
            Manifest(tables=[ManifestItem(table="users"), ManifestItem(table="users")])

    def test_vars_coerced_to_strings(self) -> None:
        manifest = Manifest(vars={"limit": 10, "flag": True, "none": None})
        assert manifest.vars == {"limit": "10", "flag": "True", "none": ""}

    def test_immutable(self) -> None:
        manifest = Manifest()
        with pytest.raises(ValidationError):
            manifest.tables = []

    def test_table_names_and_get_item(self) -> None:
        manifest = Manifest(tables=[ManifestItem(table="a"), ManifestItem(table="b")])
        assert manifest.table_names == ["a", "b"]
        assert manifest.get_item("b").table == "b"
        with pytest.raises(KeyError):
            manifest.get_item("c")


class TestReadManifest:

    def test_full(self) -> None:
        manifest = read_manifest(io.StringIO(FULL_MANIFEST))
        assert manifest.table_names == ["users", "posts", "comments"]
        assert manifest.vars == {}

    def test_vars_queries_columns_post_actions(self) -> None:
        manifest = read_manifest(SAMPLE_MANIFEST)
        assert manifest.vars["max_user_id"] == "2"
        users = manifest.get_item("users")
        assert users.columns == ["id", "username", "email"]
        assert "{{max_user_id}}" in users.query
        assert len(users.post_actions) == 1
        assert "setval" in users.post_actions[0]
        assert all(item.query for item in manifest.tables)

    def test_empty_document(self) -> None:
        manifest = read_manifest("")
        assert manifest.tables == []

    def test_invalid_yaml(self) -> None:
        with pytest.raises(ManifestError, match="Invalid manifest YAML"):
            read_manifest("{{{{invalid yaml!!")

    def test_non_mapping_document(self) -> None:
        with pytest.raises(ManifestError, match="must be a mapping"):
            read_manifest("- users\n- posts\n")

    def test_validation_error_wrapped(self) -> None:
        with pytest.raises(ManifestError, match="Invalid manifest"):
            read_manifest("tables:\n  - query: SELECT 1\n")


class TestLoadManifest:

    def test_load_from_file(self, tmp_path: Path) -> None:
        path = tmp_path / "manifest.yaml"
        path.write_text(SAMPLE_MANIFEST, encoding="utf-8")
        manifest = load_manifest(path)
        assert manifest.table_names == ["users", "posts"]

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(ManifestError, match="not found"):
            load_manifest(tmp_path / "nope.yaml")
