"""Dump manifest: models and YAML loading.

Usage:
    from pg_dump_sample.manifest import load_manifest, Manifest, ManifestItem
"""

from pg_dump_sample.manifest.loader import load_manifest, read_manifest
from pg_dump_sample.manifest.models import Manifest, ManifestItem

__all__ = ["load_manifest", "read_manifest", "Manifest", "ManifestItem"]
