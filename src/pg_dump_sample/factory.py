"""Database connection factory.

Supports two configuration modes:
1. Profile mode (db.toml + PG_DUMP_SAMPLE_PROFILE or --profile): named
   connection URLs with optional password substitution
2. libpq mode (host/port/user/dbname flags or PG* environment variables):
   the usual PostgreSQL client conventions
"""

import os
from pathlib import Path
from urllib.parse import quote

import psycopg
from psycopg import Connection
from psycopg.conninfo import make_conninfo

from pg_dump_sample.config.loader import load_db_config
from pg_dump_sample.config.models import DatabaseProfile
from pg_dump_sample.errors import DatabaseConnectionError, ProfileNotFoundError

PROFILE_ENV_VAR = "PG_DUMP_SAMPLE_PROFILE"
DEFAULT_CONNECT_TIMEOUT = 10


# ============================================================================
# Profile Resolution
# ============================================================================


def get_active_profile_name(profile_name: str | None = None) -> str | None:
    """Get the profile to use, if any.

    Priority:
    1. Explicit ``profile_name`` (the --profile flag)
    2. PG_DUMP_SAMPLE_PROFILE env var
    3. None (libpq mode)
    """
    if profile_name:
        return profile_name
    return os.environ.get(PROFILE_ENV_VAR) or None


def get_profile(
    profile_name: str, config_path: Path | None = None
) -> tuple[DatabaseProfile, int]:
    """Look up a profile in db.toml.

    Returns:
        Tuple of (DatabaseProfile, connect_timeout)

    Raises:
        ProfileNotFoundError: If db.toml is missing or lacks the profile
    """
    try:
        config = load_db_config(config_path)
    except FileNotFoundError as e:
        raise ProfileNotFoundError(str(e)) from e

    if profile_name not in config.profiles:
        available = ", ".join(config.profiles.keys()) or "(none)"
        raise ProfileNotFoundError(
            f"Profile '{profile_name}' not found. Available: {available}"
        )
    return config.profiles[profile_name], config.connect_timeout


def resolve_url(profile: DatabaseProfile) -> str:
    """Resolve profile URL with password substitution.

    Args:
        profile: Database profile from config

    Returns:
        Connection URL with password substituted
    """
    url = profile.url
    if profile.db_password and "[YOUR-PASSWORD]" in url:
        url = url.replace("[YOUR-PASSWORD]", quote(profile.db_password, safe=""))
    return url


def build_conninfo(
    host: str | None = None,
    port: str | int | None = None,
    user: str | None = None,
    dbname: str | None = None,
    password: str | None = None,
    url: str | None = None,
    connect_timeout: int = DEFAULT_CONNECT_TIMEOUT,
) -> str:
    """Build a libpq connection string.

    Unset parameters are left out so libpq falls back to the PG*
    environment variables and its own defaults.

    Example:
        >>> build_conninfo(host="localhost", port=5432, dbname="app")
        'host=localhost port=5432 dbname=app connect_timeout=10'

    Raises:
        ValueError: If the URL or a parameter cannot be parsed
    """
    params = {
        "host": host,
        "port": str(port) if port is not None else None,
        "user": user,
        "dbname": dbname,
        "password": password,
        "connect_timeout": str(connect_timeout),
    }
    try:
        return make_conninfo(url or "", **{k: v for k, v in params.items() if v})
    except psycopg.ProgrammingError as e:
        raise ValueError(f"Invalid connection parameters: {e}") from e


# ============================================================================
# Connection
# ============================================================================


def connect_database(conninfo: str) -> Connection:
    """Open a connection suitable for dumping and check it is alive.

    The session is read-only with REPEATABLE READ isolation, so every
    table of the dump is read from the same snapshot. The client encoding
    is UTF8, matching the ``SET client_encoding`` line of the dump. The
    connection is closed again if the health check fails.

    Args:
        conninfo: libpq connection string or URL

    Returns:
        Open psycopg connection (caller closes it)

    Raises:
        DatabaseConnectionError: If connecting or the health check fails
    """
    try:
        conn = psycopg.connect(conninfo, client_encoding="UTF8")
    except psycopg.Error as e:
        raise DatabaseConnectionError(f"Failed to connect to database: {e}") from e

    try:
        conn.isolation_level = psycopg.IsolationLevel.REPEATABLE_READ
        conn.read_only = True
        conn.execute("SELECT 1")
    except psycopg.Error as e:
        conn.close()
        raise DatabaseConnectionError(f"Database health check failed: {e}") from e

    return conn
