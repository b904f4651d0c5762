"""Pydantic models for the dump manifest.

A manifest declares which tables go into a dump, how their rows are
selected, and which SQL runs after each table's data is loaded.

Usage:
    from pg_dump_sample.manifest.models import Manifest, ManifestItem

    manifest = Manifest(
        vars={"max_user_id": "2"},
        tables=[
            ManifestItem(
                table="users",
                query="SELECT * FROM users WHERE id <= {{max_user_id}}",
                post_actions=["SELECT pg_catalog.setval('users_id_seq', 100, true)"],
            ),
            ManifestItem(table="posts", columns=["id", "user_id", "title"]),
        ],
    )
"""

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class ManifestItem(BaseModel):
    """Dump settings for a single table.

    Example:
        >>> item = ManifestItem(table="users")
        >>> item.query is None
        True
        >>> item.post_actions
        []
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    table: str = Field(min_length=1)
    query: str | None = None                        # row selection template
    columns: list[str] | None = None                # explicit projection, in order
    post_actions: list[str] = Field(default_factory=list)

    @field_validator("columns")
    @classmethod
    def _columns_not_empty(cls, value: list[str] | None) -> list[str] | None:
        if value is not None and not value:
            raise ValueError("columns must list at least one column when given")
        return value


class Manifest(BaseModel):
    """Complete dump manifest.

    Table order is a hint: the dump order is resolved from foreign keys,
    and manifest order only breaks ties between independent tables.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    vars: dict[str, str] = Field(default_factory=dict)
    tables: list[ManifestItem] = Field(default_factory=list)

    @field_validator("vars", mode="before")
    @classmethod
    def _stringify_vars(cls, value: object) -> object:
        # YAML turns `max_user_id: 2` into an int; templates only deal in text
        if isinstance(value, dict):
            return {
                str(k): ("" if v is None else str(v)) for k, v in value.items()
            }
        return value

    @model_validator(mode="after")
    def _unique_tables(self) -> "Manifest":
        seen: set[str] = set()
        duplicates: list[str] = []
        for item in self.tables:
            if item.table in seen and item.table not in duplicates:
                duplicates.append(item.table)
            seen.add(item.table)
        if duplicates:
            raise ValueError(
                f"Duplicate table entries in manifest: {', '.join(duplicates)}"
            )
        return self

    @property
    def table_names(self) -> list[str]:
        """Table names in manifest order."""
        return [item.table for item in self.tables]

    def get_item(self, table: str) -> ManifestItem:
        """Return the entry for ``table``.

        Raises:
            KeyError: If the table is not in the manifest.
        """
        for item in self.tables:
            if item.table == table:
                return item
        raise KeyError(table)
