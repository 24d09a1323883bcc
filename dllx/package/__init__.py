"""
dllx Package Format.

This module handles:
- manifest.json parsing from inside the archive
- Full archive extraction
- Building packages from a directory
"""

from dllx.package.archive import build_package, extract_package
from dllx.package.manifest import MANIFEST_NAME, Manifest, parse_manifest_data, read_manifest

__all__ = [
    "MANIFEST_NAME",
    "Manifest",
    "build_package",
    "extract_package",
    "parse_manifest_data",
    "read_manifest",
]
