"""Command line interface for partial database dumps.

Connection options follow the PostgreSQL client tools (``-h`` is the
host, help is ``--help``); connections can also come from a db.toml
profile.

Usage:
    pg-dump-sample -h localhost -U app -f manifest.yaml mydb > sample.sql
    pg-dump-sample -f manifest.yaml -o sample.sql mydb
    pg-dump-sample --profile local -f manifest.yaml -o sample.sql
    pg-dump-sample --profile local -f manifest.yaml --dry-run
    pg-dump-sample --list-profiles

Exit codes:
    0 - dump written
    1 - any error (manifest, connection, schema, query, output)
"""

import argparse
import logging
import os
import sys
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from pg_dump_sample import __version__
from pg_dump_sample.adapters.postgres import PostgresSource
from pg_dump_sample.config.loader import load_db_config
from pg_dump_sample.dump.copy import ENCODING, ENCODING_ERRORS
from pg_dump_sample.dump.orchestrator import make_dump, plan_dump
from pg_dump_sample.errors import (
    DatabaseConnectionError,
    DumpError,
    ManifestError,
    ProfileNotFoundError,
)
from pg_dump_sample.factory import (
    DEFAULT_CONNECT_TIMEOUT,
    build_conninfo,
    connect_database,
    get_active_profile_name,
    get_profile,
    resolve_url,
)
from pg_dump_sample.manifest.loader import load_manifest

# stdout may carry the dump itself, so everything else goes to stderr
console = Console(stderr=True)

logger = logging.getLogger("pg_dump_sample")


# ============================================================================
# Helpers
# ============================================================================


def _setup_logging(verbose: bool) -> None:
    handler = RichHandler(console=console, show_path=False)
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[handler],
        force=True,
    )


def _config_path(args: argparse.Namespace) -> Path | None:
    return Path(args.config) if args.config else None


def _resolve_conninfo(args: argparse.Namespace) -> str:
    """Build the connection string from a profile or libpq-style flags.

    Raises:
        ProfileNotFoundError: If the requested profile does not exist.
    """
    profile_name = get_active_profile_name(args.profile)
    if profile_name:
        profile, timeout = get_profile(profile_name, _config_path(args))
        logger.debug(f"Using profile {profile_name}")
        return build_conninfo(url=resolve_url(profile), connect_timeout=timeout)

    password = None
    if args.password_prompt:
        password = console.input("Password: ", password=True)

    return build_conninfo(
        host=args.host,
        port=args.port,
        user=args.username,
        dbname=args.dbname,
        password=password,
        connect_timeout=DEFAULT_CONNECT_TIMEOUT,
    )


def _print_plan(plans) -> None:
    table = Table(title="Dump Plan", show_header=True, header_style="bold")
    table.add_column("#", style="dim")
    table.add_column("Table")
    table.add_column("Columns")
    table.add_column("Post-actions")

    for i, plan in enumerate(plans, 1):
        table.add_row(
            str(i),
            f"[bold cyan]{plan.table}[/bold cyan]",
            ", ".join(plan.columns),
            str(len(plan.post_actions)),
        )

    console.print(table)


# ============================================================================
# Commands
# ============================================================================


def cmd_profiles(args: argparse.Namespace) -> int:
    """List available profiles from db.toml.

    Reads only local TOML config -- no database calls.

    Returns:
        0 on success, 1 if db.toml not found or invalid.
    """
    try:
        config = load_db_config(_config_path(args))
    except (FileNotFoundError, ValueError) as e:
        console.print(f"[red]Error: {e}[/red]")
        return 1

    current = get_active_profile_name(args.profile)

    table = Table(
        title="Database Profiles", show_header=True, header_style="bold"
    )
    table.add_column("", width=2)
    table.add_column("Profile")
    table.add_column("Description")

    for name, profile in config.profiles.items():
        marker = "[green]*[/green]" if name == current else ""
        table.add_row(marker, name, profile.description)

    console.print(table)
    return 0


def cmd_dump(args: argparse.Namespace) -> int:
    """Write the dump described by the manifest.

    Returns:
        0 on success, 1 on any failure.
    """
    try:
        manifest = load_manifest(args.manifest_file)
    except ManifestError as e:
        console.print(f"[bold red]x[/bold red] {e}")
        return 1

    try:
        conninfo = _resolve_conninfo(args)
        conn = connect_database(conninfo)
    except (ProfileNotFoundError, ValueError, DatabaseConnectionError) as e:
        console.print(f"[bold red]x[/bold red] {e}")
        return 1

    try:
        source = PostgresSource(conn)

        if args.dry_run:
            try:
                _print_plan(plan_dump(source, manifest))
            except DumpError as e:
                console.print(f"[bold red]x[/bold red] {e}")
                return 1
            return 0

        return _write_dump(args, source, manifest)
    finally:
        conn.close()


def _write_dump(args: argparse.Namespace, source: PostgresSource, manifest) -> int:
    if not args.output_file:
        out = sys.stdout
        if hasattr(out, "reconfigure"):
            out.reconfigure(encoding=ENCODING, errors=ENCODING_ERRORS, newline="")
        try:
            result = make_dump(source, manifest, out)
        except DumpError as e:
            console.print(f"[bold red]x[/bold red] {e}")
            return 1
        logger.info(result.format_report())
        return 0

    output_path = Path(args.output_file)
    try:
        out = open(
            output_path, "w", encoding=ENCODING, errors=ENCODING_ERRORS, newline=""
        )
    except OSError as e:
        console.print(f"[bold red]x[/bold red] Cannot open output file: {e}")
        return 1

    try:
        with out:
            result = make_dump(source, manifest, out)
    except (DumpError, OSError) as e:
        console.print(f"[bold red]x[/bold red] {e}")
        # A partial dump would load inconsistent data; drop it
        if output_path.is_file():
            output_path.unlink()
        return 1

    logger.info(result.format_report())
    console.print(
        f"[bold green]v[/bold green] Wrote {result.total_rows} rows from "
        f"{len(result.tables)} tables to [cyan]{output_path}[/cyan]"
    )
    return 0


# ============================================================================
# Main entry point
# ============================================================================


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog="pg-dump-sample",
        description="Dump a referentially consistent sample of a PostgreSQL database",
        add_help=False,
    )
    parser.add_argument("--help", action="help", help="Show this help and exit")
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}"
    )

    parser.add_argument(
        "dbname",
        nargs="?",
        default=None,
        help="Database to dump (default: PGDATABASE)",
    )
    parser.add_argument(
        "-f",
        "--manifest-file",
        help="YAML manifest describing the tables to dump",
    )
    parser.add_argument(
        "-o",
        "--output-file",
        help="Write the dump to this file (default: stdout)",
    )

    conn_group = parser.add_argument_group("connection options")
    conn_group.add_argument(
        "-h", "--host", default=os.environ.get("PGHOST"), help="Database server host"
    )
    conn_group.add_argument(
        "-p", "--port", default=os.environ.get("PGPORT"), help="Database server port"
    )
    conn_group.add_argument(
        "-U",
        "--username",
        default=os.environ.get("PGUSER"),
        help="Database user name",
    )
    password_group = conn_group.add_mutually_exclusive_group()
    password_group.add_argument(
        "-w",
        "--no-password",
        dest="password_prompt",
        action="store_false",
        help="Never prompt for password (default; PGPASSWORD and .pgpass still apply)",
    )
    password_group.add_argument(
        "-W",
        "--password",
        dest="password_prompt",
        action="store_true",
        help="Prompt for password",
    )
    conn_group.add_argument(
        "--profile",
        help="Connection profile from db.toml (or set PG_DUMP_SAMPLE_PROFILE)",
    )
    conn_group.add_argument(
        "--config",
        help="Path to the profile file (default: ./db.toml)",
    )

    parser.add_argument(
        "--list-profiles",
        action="store_true",
        help="List profiles from db.toml and exit",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Show the resolved dump order without writing a dump",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Log progress to stderr"
    )
    parser.set_defaults(password_prompt=False)
    return parser


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point.

    Returns:
        Exit code (0 for success, non-zero for errors).
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    _setup_logging(args.verbose)

    if args.list_profiles:
        return cmd_profiles(args)

    if not args.manifest_file:
        parser.error("the following arguments are required: -f/--manifest-file")

    if args.dbname is None:
        args.dbname = os.environ.get("PGDATABASE")

    return cmd_dump(args)


if __name__ == "__main__":
    sys.exit(main())
