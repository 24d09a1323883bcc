"""
Package Runner.

Runs the full pipeline for one package:
read manifest -> resolve platform -> extract package -> load module -> call export.

The first failure aborts the run. Nothing is retried and nothing already
written is rolled back.
"""

import logging
import tempfile
from pathlib import Path

from dllx.config import Settings
from dllx.errors import ExtractionError, ModuleLoadError, NoPlatformMatchError
from dllx.native.loader import invoke_export, load_native_module
from dllx.package.archive import extract_package, resolve_entry_path
from dllx.package.manifest import read_manifest
from dllx.platform import current_platform, resolve_platform_file

logger = logging.getLogger(__name__)


def _run_in(
    package_path: Path, export_name: str, dest_dir: Path, rel_path: str
) -> None:
    # The whole archive is extracted so supporting assets sit next to the module
    extract_package(package_path, dest_dir)

    try:
        module_path = resolve_entry_path(dest_dir, rel_path)
    except ExtractionError as e:
        raise ModuleLoadError(
            f"Module path {rel_path!r} does not point inside the package: {e}"
        ) from e

    with load_native_module(module_path) as module:
        invoke_export(module, export_name)


def load_and_call(
    package_path: Path | str,
    export_name: str,
    *,
    dest_dir: Path | str | None = None,
    platform_id: str | None = None,
) -> None:
    """
    Load a package and call one of its native exports.

    Args:
        package_path: Path to the .dllx package
        export_name: Name of a zero-argument, no-return export
        dest_dir: Extraction destination, kept after the run. When None a
            temporary directory is used and removed on every exit path.
        platform_id: Platform identity; detected from the running OS when None

    Raises:
        ManifestNotFoundError: If the package has no manifest.json
        NoPlatformMatchError: If the manifest has no file for the platform
        SymbolNotFoundError: If the module does not export export_name
        ModuleLoadError: If the platform loader rejects the module, or the
            manifest path points outside the extracted package
        PackageIOError: If the package or destination cannot be accessed
        PackageFormatError: If the package or manifest cannot be parsed
    """
    package_path = Path(package_path)
    manifest = read_manifest(package_path)

    if platform_id is None:
        platform_id = current_platform()

    rel_path = resolve_platform_file(manifest, platform_id)
    if rel_path is None:
        raise NoPlatformMatchError(platform_id, sorted(manifest.platforms))

    logger.info(
        "Running %s from '%s' (%s: %s)", export_name, manifest.name, platform_id, rel_path
    )

    if dest_dir is not None:
        _run_in(package_path, export_name, Path(dest_dir), rel_path)
        return

    with tempfile.TemporaryDirectory(
        prefix="dllx_", ignore_cleanup_errors=True
    ) as tmpdir:
        _run_in(package_path, export_name, Path(tmpdir), rel_path)


def run_package(
    package_path: Path | str, export_name: str, settings: Settings | None = None
) -> None:
    """
    Run load_and_call with loader settings applied.

    Args:
        package_path: Path to the .dllx package
        export_name: Name of the export to call
        settings: Loader settings (defaults when None)
    """
    settings = settings or Settings()
    load_and_call(
        package_path,
        export_name,
        dest_dir=settings.extract_dir,
        platform_id=settings.platform,
    )
