"""Manifest loading from YAML files."""

from pathlib import Path
from typing import IO

import yaml
from pydantic import ValidationError

from pg_dump_sample.errors import ManifestError
from pg_dump_sample.manifest.models import Manifest


def read_manifest(stream: IO[str] | str) -> Manifest:
    """Parse a YAML manifest from an open stream or a string.

    An empty document is an empty manifest (no tables, no vars).

    Args:
        stream: Text stream or YAML source text.

    Returns:
        Validated ``Manifest``.

    Raises:
        ManifestError: If the YAML is malformed, the document is not a
            mapping, or it fails validation.
    """
    try:
        data = yaml.safe_load(stream)
    except yaml.YAMLError as e:
        raise ManifestError(f"Invalid manifest YAML: {e}") from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ManifestError(
            f"Manifest must be a mapping, got {type(data).__name__}"
        )

    try:
        return Manifest.model_validate(data)
    except ValidationError as e:
        raise ManifestError(f"Invalid manifest: {e}") from e


def load_manifest(path: str | Path) -> Manifest:
    """Load a manifest from a YAML file.

    Raises:
        ManifestError: If the file is missing, unreadable, or invalid.
    """
    manifest_path = Path(path)
    if not manifest_path.exists():
        raise ManifestError(f"Manifest file not found: {manifest_path}")

    try:
        with open(manifest_path, "r", encoding="utf-8") as f:
            return read_manifest(f)
    except OSError as e:
        raise ManifestError(f"Cannot read manifest {manifest_path}: {e}") from e
