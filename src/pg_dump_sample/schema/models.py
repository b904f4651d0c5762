"""Pydantic models for schema introspection and dump planning.

This module contains schema-domain models:
- Introspection model: TableSchema
- Planning model: TablePlan (one table's resolved dump settings)
- Result model: DumpResult

Manifest models (Manifest, ManifestItem) live in
pg_dump_sample.manifest.models.
"""

from pydantic import BaseModel, Field


# ============================================================================
# Schema Introspection Models
# ============================================================================


class TableSchema(BaseModel):
    """What the dump engine knows about a live table.

    Example:
        >>> t = TableSchema(name="posts", columns=["id", "user_id"], dependencies={"users"})
        >>> t.has_column("user_id")
        True
    """

    name: str
    columns: list[str] = Field(default_factory=list)
    dependencies: set[str] = Field(default_factory=set)  # tables referenced by FKs

    def has_column(self, column: str) -> bool:
        """True if the table has ``column``."""
        return column in self.columns


# ============================================================================
# Dump Planning Models
# ============================================================================


class TablePlan(BaseModel):
    """A table's dump block, fully resolved before any output is written."""

    table: str
    columns: list[str]
    query: str
    post_actions: list[str] = Field(default_factory=list)


class DumpResult(BaseModel):
    """Summary of a finished dump.

    Example:
        >>> result = DumpResult(tables=["users"], row_counts={"users": 5})
        >>> result.total_rows
        5
    """

    tables: list[str] = Field(default_factory=list)         # dump order
    row_counts: dict[str, int] = Field(default_factory=dict)

    @property
    def total_rows(self) -> int:
        """Rows written across all tables."""
        return sum(self.row_counts.values())

    def format_report(self) -> str:
        """Format the summary as a human-readable report."""
        if not self.tables:
            return "Dumped 0 tables"

        lines = [f"Dumped {len(self.tables)} tables, {self.total_rows} rows:"]
        for table in self.tables:
            lines.append(f"    - {table}: {self.row_counts.get(table, 0)}")
        return "\n".join(lines)
