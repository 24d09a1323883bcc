"""
Error taxonomy for the dllx pipeline.

Every failure raised by the pipeline derives from DllxError:
- PackageIOError: package unreadable, destination unwritable
- PackageFormatError: archive or manifest cannot be parsed
- NotFoundError: manifest, platform mapping or export absent
- ModuleLoadError: native module rejected by the platform loader
"""


class DllxError(Exception):
    """Base exception for all dllx errors."""

    pass


class PackageIOError(DllxError):
    """Raised when the package or the extraction destination cannot be accessed."""

    pass


class ExtractionError(PackageIOError):
    """Raised when an archive entry cannot be written to the destination."""

    pass


class PackageFormatError(DllxError):
    """Raised when the package is not a readable zip archive."""

    pass


class ManifestFormatError(PackageFormatError):
    """Raised when manifest.json is malformed or fails validation."""

    pass


class NotFoundError(DllxError):
    """Base exception for lookups that came back empty."""

    pass


class ManifestNotFoundError(NotFoundError):
    """Raised when the package has no manifest.json entry at its root."""

    pass


class NoPlatformMatchError(NotFoundError):
    """Raised when the manifest has no file for the requested platform."""

    def __init__(self, platform_id: str | None, available: list[str]):
        self.platform_id = platform_id
        self.available = available
        shown = ", ".join(available) if available else "none"
        super().__init__(
            f"No platform match for '{platform_id or 'unknown'}' "
            f"(package provides: {shown})"
        )


class SymbolNotFoundError(NotFoundError):
    """Raised when a native module does not export the requested symbol."""

    pass


class ModuleLoadError(DllxError):
    """Raised when the platform loader refuses a native module."""

    pass


class ModuleClosedError(DllxError):
    """Raised when an export is used after its module scope has ended."""

    pass
