"""
Platform Resolution.

Maps the running interpreter's operating system onto the platform
identifiers used in package manifests, and picks the module file a
manifest registers for that identifier.
"""

import logging
import sys

from dllx.package.manifest import Manifest

logger = logging.getLogger(__name__)

KNOWN_PLATFORMS: tuple[str, ...] = ("windows", "macos", "linux", "ios", "android")

# sys.platform value -> manifest platform identifier
_SYS_PLATFORMS: dict[str, str] = {
    "win32": "windows",
    "cygwin": "windows",
    "darwin": "macos",
    "ios": "ios",
    "android": "android",
    "linux": "linux",
}


def current_platform() -> str | None:
    """
    Detect the platform identifier of the running process.

    Returns:
        One of KNOWN_PLATFORMS, or None for an unrecognized OS
    """
    platform_id = _SYS_PLATFORMS.get(sys.platform)

    # Older Android builds of CPython report "linux"
    if platform_id == "linux" and hasattr(sys, "getandroidapilevel"):
        platform_id = "android"

    return platform_id


def resolve_platform_file(
    manifest: Manifest, platform_id: str | None = None
) -> str | None:
    """
    Get the module path a manifest registers for a platform.

    Args:
        manifest: Package manifest
        platform_id: Platform identifier; detected when None

    Returns:
        Relative module path, or None when there is no match
    """
    if platform_id is None:
        platform_id = current_platform()

    if platform_id not in KNOWN_PLATFORMS:
        logger.debug("Platform %r is not a recognized identifier", platform_id)
        return None

    rel_path = manifest.platforms.get(platform_id)
    if rel_path is None:
        logger.debug("Manifest '%s' has no entry for %s", manifest.name, platform_id)
    return rel_path
