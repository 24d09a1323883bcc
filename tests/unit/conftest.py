"""Shared fixtures for the dllx test suite."""

import json
import shutil
import subprocess
import sys
import zipfile
from pathlib import Path

import pytest

import dllx.native.loader

RUN_SOURCE = r"""
#include <stdio.h>
#include <stdlib.h>

void run(void)
{
    const char *path = getenv("DLLX_TEST_MARKER");
    if (path) {
        FILE *f = fopen(path, "w");
        if (f) {
            fputs("ran", f);
            fclose(f);
        }
    }
}
"""


def write_package(
    package_path: Path,
    manifest: dict | str | None,
    files: dict[str, bytes] | None = None,
) -> Path:
    """Write a zip package. A str manifest is stored verbatim; None omits it."""
    with zipfile.ZipFile(package_path, "w") as zf:
        if manifest is not None:
            text = manifest if isinstance(manifest, str) else json.dumps(manifest)
            zf.writestr("manifest.json", text)
        for name, content in (files or {}).items():
            zf.writestr(name, content)
    return package_path


@pytest.fixture
def make_package(tmp_path):
    """Factory building packages under tmp_path."""

    def _make(manifest, files=None, name="plugin.dllx"):
        return write_package(tmp_path / name, manifest, files)

    return _make


# (signature, offset of general purpose flags) for local and central headers
_ZIP_HEADERS = ((b"PK\x03\x04", 6), (b"PK\x01\x02", 8))


def patch_zip_headers(
    package_path: Path, flag_bits: int = 0, compress_type: int | None = None
) -> Path:
    """
    Rewrite every entry header of a stored (uncompressed) zip in place.

    flag_bits is OR-ed into the general purpose flags; compress_type
    replaces the compression method, which directly follows the flags.
    """
    data = bytearray(package_path.read_bytes())
    for signature, offset in _ZIP_HEADERS:
        pos = data.find(signature)
        while pos != -1:
            data[pos + offset] |= flag_bits
            if compress_type is not None:
                data[pos + offset + 2 : pos + offset + 4] = compress_type.to_bytes(2, "little")
            pos = data.find(signature, pos + 4)
    package_path.write_bytes(bytes(data))
    return package_path


@pytest.fixture
def damaged_package(make_package):
    """Factory for packages whose entries are flagged encrypted or use an unknown method."""

    def _make(manifest, files=None, flag_bits=0, compress_type=None):
        package = make_package(manifest, files)
        return patch_zip_headers(package, flag_bits, compress_type)

    return _make


class FakeFunction:
    """Stands in for a ctypes foreign function."""

    def __init__(self, name, calls):
        self.name = name
        self.calls = calls
        self.argtypes = None
        self.restype = "unset"

    def __call__(self):
        self.calls.append(self.name)


class FakeLibrary:
    """
    Stands in for ctypes.CDLL.

    The "library" file lists its exports one per line; a file starting
    with "BAD" is rejected like a wrong-format binary.
    """

    calls: list[str] = []
    loaded: list[str] = []

    def __init__(self, path):
        try:
            content = Path(path).read_text()
        except OSError as e:
            raise OSError(f"{path}: cannot open shared object file") from e
        if content.startswith("BAD"):
            raise OSError(f"{path}: invalid ELF header")
        self._exports = set(content.split())
        FakeLibrary.loaded.append(path)

    def __getitem__(self, name):
        if "\0" in name:
            raise ValueError("embedded null character")
        if name not in self._exports:
            raise AttributeError(f"undefined symbol: {name}")
        return FakeFunction(name, FakeLibrary.calls)


@pytest.fixture
def fake_cdll(monkeypatch):
    """Replace ctypes.CDLL in the loader with FakeLibrary."""
    FakeLibrary.calls = []
    FakeLibrary.loaded = []
    monkeypatch.setattr(dllx.native.loader.ctypes, "CDLL", FakeLibrary)
    return FakeLibrary


def _find_compiler() -> str | None:
    if sys.platform not in ("linux", "darwin"):
        return None
    for candidate in ("cc", "gcc", "clang"):
        found = shutil.which(candidate)
        if found:
            return found
    return None


@pytest.fixture(scope="session")
def native_library(tmp_path_factory):
    """Compile a shared library exporting run(); skip without a C compiler."""
    compiler = _find_compiler()
    if compiler is None:
        pytest.skip("No C compiler available")

    build_dir = tmp_path_factory.mktemp("native")
    source = build_dir / "run.c"
    source.write_text(RUN_SOURCE)
    suffix = ".dylib" if sys.platform == "darwin" else ".so"
    output = build_dir / f"librun{suffix}"

    result = subprocess.run(
        [compiler, "-shared", "-fPIC", "-o", str(output), str(source)],
        capture_output=True,
        text=True,
    )
    if result.returncode != 0:
        pytest.skip(f"Failed to compile test library: {result.stderr}")

    return output
