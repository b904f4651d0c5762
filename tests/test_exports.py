"""Tests for the public package surface (pg_dump_sample/__init__.py)."""

import importlib

import pytest

import pg_dump_sample

SUBPACKAGES = [
    "pg_dump_sample.adapters",
    "pg_dump_sample.config",
    "pg_dump_sample.dump",
    "pg_dump_sample.manifest",
    "pg_dump_sample.schema",
]


class TestPackageExports:

    def test_version(self) -> None:
        assert pg_dump_sample.__version__ == "0.1.0"

    @pytest.mark.parametrize("name", pg_dump_sample.__all__)
    def test_all_names_resolve(self, name: str) -> None:
        assert getattr(pg_dump_sample, name) is not None

    @pytest.mark.parametrize("module_name", SUBPACKAGES)
    def test_subpackage_all_resolves(self, module_name: str) -> None:
        module = importlib.import_module(module_name)
        for name in module.__all__:
            assert hasattr(module, name), f"{module_name} missing {name}"

    def test_dump_errors_share_base(self) -> None:
        for error in (
            pg_dump_sample.SchemaQueryError,
            pg_dump_sample.CyclicDependencyError,
            pg_dump_sample.QueryExecutionError,
            pg_dump_sample.OutputError,
        ):
            assert issubclass(error, pg_dump_sample.DumpError)

    def test_postgres_source_satisfies_protocol_methods(self) -> None:
        for method in (
            "get_table_name", "get_table_columns", "get_table_dependencies", "stream_rows"
        ):
            assert callable(getattr(pg_dump_sample.PostgresSource, method))
