"""Schema introspection and dump order resolution.

Provides live catalog introspection (``SchemaIntrospector``) and
foreign-key based ordering (``resolve_dump_order``).

Usage:
    from pg_dump_sample.schema import SchemaIntrospector, resolve_dump_order
"""

from pg_dump_sample.schema.introspector import SchemaIntrospector
from pg_dump_sample.schema.models import DumpResult, TablePlan, TableSchema
from pg_dump_sample.schema.resolver import resolve_dump_order

__all__ = [
    "SchemaIntrospector",
    "resolve_dump_order",
    "TableSchema",
    "TablePlan",
    "DumpResult",
]
