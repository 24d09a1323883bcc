"""
Package Manifest System.

This module provides manifest parsing and validation for .dllx packages.

Key features:
- Locate manifest.json inside the package archive without extracting it
- JSON structure validation for the name/platforms schema
- Serialization back to the on-disk form
"""

import json
import logging
import zipfile
import zlib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from dllx.errors import (
    ManifestFormatError,
    ManifestNotFoundError,
    PackageFormatError,
    PackageIOError,
)

logger = logging.getLogger(__name__)

MANIFEST_NAME = "manifest.json"


@dataclass
class Manifest:
    """
    Represents a package manifest.

    Attributes:
        name: Package name (free-form, not checked for uniqueness)
        platforms: Dict of platform identifier -> relative module path
        raw_data: Raw manifest data
    """

    name: str
    platforms: dict[str, str]
    raw_data: dict[str, Any] = field(default_factory=dict)

    def to_json(self) -> str:
        """Serialize the manifest to the form stored inside a package."""
        data = dict(self.raw_data)
        data["name"] = self.name
        data["platforms"] = dict(self.platforms)
        return json.dumps(data, indent=2)


def parse_manifest_data(data: Any) -> Manifest:
    """
    Build a Manifest from decoded manifest JSON.

    Args:
        data: Decoded JSON value

    Returns:
        Manifest object

    Raises:
        ManifestFormatError: If the structure does not match the schema
    """
    validate_manifest_structure(data)

    return Manifest(
        name=data["name"],
        platforms=dict(data["platforms"]),
        raw_data=data,
    )


def validate_manifest_structure(data: Any) -> None:
    """
    Validate manifest structure and required fields.

    Args:
        data: Decoded manifest JSON

    Raises:
        ManifestFormatError: If manifest structure is invalid
    """
    if not isinstance(data, dict):
        raise ManifestFormatError(
            f"Manifest must be a JSON object, got {type(data).__name__}"
        )

    for required in ("name", "platforms"):
        if required not in data:
            raise ManifestFormatError(f"Missing required field: {required}")

    if not isinstance(data["name"], str):
        raise ManifestFormatError("'name' field must be a string")

    platforms = data["platforms"]
    if not isinstance(platforms, dict):
        raise ManifestFormatError("'platforms' field must be an object")

    for platform_id, rel_path in platforms.items():
        if not isinstance(rel_path, str):
            raise ManifestFormatError(
                f"Path for platform '{platform_id}' must be a string"
            )


def read_manifest(package_path: Path | str) -> Manifest:
    """
    Read manifest.json from a package without extracting it.

    Only an entry named exactly manifest.json at the archive root counts.

    Args:
        package_path: Path to the .dllx package

    Returns:
        Manifest object

    Raises:
        PackageIOError: If the package cannot be read
        PackageFormatError: If the package is not a zip archive or the
            manifest entry is encrypted, compressed with an unsupported
            method, or corrupt
        ManifestNotFoundError: If the package has no manifest.json
        ManifestFormatError: If the manifest is invalid
    """
    package_path = Path(package_path)

    try:
        with zipfile.ZipFile(package_path) as archive:
            info = next(
                (i for i in archive.infolist() if i.filename == MANIFEST_NAME),
                None,
            )
            if info is None:
                raise ManifestNotFoundError(
                    f"{MANIFEST_NAME} not found in package: {package_path}"
                )
            raw = archive.read(info)
    except zipfile.BadZipFile as e:
        raise PackageFormatError(f"Not a valid package archive: {package_path}") from e
    except (RuntimeError, NotImplementedError, zlib.error) as e:
        raise PackageFormatError(f"Cannot read manifest from {package_path}: {e}") from e
    except OSError as e:
        raise PackageIOError(f"Failed to read package {package_path}: {e}") from e

    try:
        data = json.loads(raw.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        raise ManifestFormatError(f"Failed to parse manifest JSON: {e}") from e

    manifest = parse_manifest_data(data)
    logger.debug(
        "Read manifest '%s' from %s (platforms: %s)",
        manifest.name,
        package_path,
        ", ".join(sorted(manifest.platforms)) or "none",
    )
    return manifest
