"""
dllx - Platform-aware native plugin packages.

A .dllx package is a zip archive holding a manifest.json and one native
library per platform. This package reads the manifest, picks the library
for the running OS, extracts the archive and calls an export.

Example usage:
    import dllx

    dllx.load_and_call("plugin.dllx", "run")
"""

__version__ = "0.1.0"

from dllx.errors import (
    DllxError,
    ManifestNotFoundError,
    ModuleLoadError,
    NoPlatformMatchError,
    SymbolNotFoundError,
)
from dllx.package.manifest import Manifest, read_manifest
from dllx.runner import load_and_call, run_package

__all__ = [
    "__version__",
    "DllxError",
    "Manifest",
    "ManifestNotFoundError",
    "ModuleLoadError",
    "NoPlatformMatchError",
    "SymbolNotFoundError",
    "load_and_call",
    "read_manifest",
    "run_package",
]
