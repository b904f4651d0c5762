"""Configuration management: profiles, TOML loading, and config models.

Usage:
    >>> from pg_dump_sample.config import load_db_config, DatabaseProfile, DatabaseConfig
"""

from pg_dump_sample.config.loader import load_db_config
from pg_dump_sample.config.models import DatabaseConfig, DatabaseProfile

__all__ = ["load_db_config", "DatabaseConfig", "DatabaseProfile"]
