"""
Package Archive I/O.

This module unpacks .dllx packages onto the filesystem and builds them
from a directory tree.

Key features:
- Full extraction preserving entry paths (supporting assets included)
- Directory marker entries recreate directories only
- Unconditional overwrite of existing files
- Entries resolving outside the destination are rejected
"""

import logging
import os
import shutil
import zipfile
import zlib
from pathlib import Path

from dllx.errors import (
    ExtractionError,
    ManifestNotFoundError,
    PackageFormatError,
    PackageIOError,
)
from dllx.package.manifest import MANIFEST_NAME, Manifest

logger = logging.getLogger(__name__)


def resolve_entry_path(dest_dir: Path, entry_name: str) -> Path:
    """
    Resolve where a package-relative path lands under dest_dir.

    Raises:
        ExtractionError: If the path is malformed or would land outside dest_dir
    """
    if "\0" in entry_name:
        raise ExtractionError(f"Invalid package path {entry_name!r}: embedded null byte")

    target = (dest_dir / entry_name).resolve()
    root = dest_dir.resolve()
    if target != root and root not in target.parents:
        raise ExtractionError(f"Archive entry escapes destination: {entry_name}")
    return target


def extract_package(package_path: Path | str, dest_dir: Path | str) -> list[Path]:
    """
    Extract every entry of a package into dest_dir.

    The destination is created if missing and does not need to be empty.
    Extraction stops at the first failure; files already written stay.

    Args:
        package_path: Path to the .dllx package
        dest_dir: Destination directory

    Returns:
        Paths of the files written, in archive order

    Raises:
        ExtractionError: If the package or an entry cannot be read, or a
            file or directory cannot be created
        PackageFormatError: If the package is not a zip archive, or an
            entry is encrypted, uses an unsupported compression method or
            holds corrupt data
    """
    package_path = Path(package_path)
    dest_dir = Path(dest_dir)
    written: list[Path] = []

    try:
        dest_dir.mkdir(parents=True, exist_ok=True)

        with zipfile.ZipFile(package_path) as archive:
            for info in archive.infolist():
                target = resolve_entry_path(dest_dir, info.filename)

                if info.filename.endswith("/"):
                    target.mkdir(parents=True, exist_ok=True)
                    continue

                target.parent.mkdir(parents=True, exist_ok=True)
                with archive.open(info) as src, open(target, "wb") as dst:
                    shutil.copyfileobj(src, dst)
                written.append(target)
    except zipfile.BadZipFile as e:
        raise PackageFormatError(f"Not a valid package archive: {package_path}") from e
    except (RuntimeError, NotImplementedError, zlib.error) as e:
        raise PackageFormatError(f"Cannot read entry from {package_path}: {e}") from e
    except OSError as e:
        raise ExtractionError(f"Failed to extract {package_path}: {e}") from e

    logger.debug("Extracted %d file(s) from %s to %s", len(written), package_path, dest_dir)
    return written


def build_package(
    source_dir: Path | str,
    out_path: Path | str,
    manifest: Manifest | None = None,
) -> Path:
    """
    Zip a directory tree into a .dllx package.

    Args:
        source_dir: Directory holding the native modules and assets
        out_path: Output package path
        manifest: Manifest to embed; when None, source_dir/manifest.json is used

    Returns:
        Path of the written package

    Raises:
        ManifestNotFoundError: If no manifest is given and source_dir has none
        PackageIOError: If the source cannot be read or the package written
    """
    source_dir = Path(source_dir)
    out_path = Path(out_path)

    if manifest is None and not (source_dir / MANIFEST_NAME).is_file():
        raise ManifestNotFoundError(f"{MANIFEST_NAME} not found in {source_dir}")

    try:
        out_path.parent.mkdir(parents=True, exist_ok=True)
        with zipfile.ZipFile(out_path, "w", compression=zipfile.ZIP_DEFLATED) as zf:
            if manifest is not None:
                zf.writestr(MANIFEST_NAME, manifest.to_json())

            for p in sorted(source_dir.rglob("*")):
                arcname = str(p.relative_to(source_dir)).replace(os.sep, "/")
                if manifest is not None and arcname == MANIFEST_NAME:
                    continue
                if p.resolve() == out_path.resolve():
                    continue
                if p.is_dir():
                    zf.writestr(arcname + "/", b"")
                else:
                    zf.write(p, arcname=arcname)
    except OSError as e:
        raise PackageIOError(f"Failed to build package {out_path}: {e}") from e

    logger.info("Built package %s from %s", out_path, source_dir)
    return out_path
