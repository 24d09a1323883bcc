"""
Native Module Loader.

This module provides dynamic loading of native shared libraries and
invocation of their exports.

Key features:
- ctypes integration for dynamic loading
- Scoped module handles (context manager)
- Exports bound to a single zero-argument, no-return signature

The signature contract is not checked: ctypes cannot inspect the real
signature of a foreign symbol, so calling an export that expects
arguments or returns a struct is undefined behavior at the call boundary.
"""

import ctypes
import logging
from pathlib import Path

from dllx.errors import ModuleClosedError, ModuleLoadError, SymbolNotFoundError

logger = logging.getLogger(__name__)


class NativeExport:
    """
    A resolved export, callable as ``void name(void)``.

    Holds a reference to its owning NativeModule and refuses to run once
    the module's scope has ended.
    """

    def __init__(self, module: "NativeModule", name: str, func):
        self._module = module
        self._func = func
        self.name = name

    def __call__(self) -> None:
        if self._module.closed:
            raise ModuleClosedError(
                f"Cannot call '{self.name}': module {self._module.path} is closed"
            )

        logger.debug("Calling %s!%s", self._module.path.name, self.name)
        self._func()

    def __repr__(self) -> str:
        return f"NativeExport({self.name!r}, {self._module.path})"


class NativeModule:
    """
    Scoped handle to a loaded native library.

    Use as a context manager; exports resolved from it are only usable
    inside the ``with`` block. Closing does not unload the library from
    the process.

    Example:
        with load_native_module(path) as module:
            module.lookup("run")()
    """

    def __init__(self, path: Path, library: ctypes.CDLL):
        self.path = path
        self._library = library
        self.closed = False

    def lookup(self, name: str) -> NativeExport:
        """
        Resolve an export by exact name.

        Args:
            name: Export name

        Returns:
            NativeExport bound as a zero-argument, no-return function

        Raises:
            ModuleClosedError: If the module is closed
            SymbolNotFoundError: If the library has no such export
        """
        if self.closed:
            raise ModuleClosedError(f"Module {self.path} is closed")

        try:
            func = self._library[name]
        except (AttributeError, ValueError) as e:
            raise SymbolNotFoundError(
                f"Export '{name}' not found in {self.path}"
            ) from e

        func.argtypes = []
        func.restype = None
        return NativeExport(self, name, func)

    def close(self) -> None:
        """End the handle's scope."""
        self.closed = True

    def __enter__(self) -> "NativeModule":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def __repr__(self) -> str:
        state = "closed" if self.closed else "open"
        return f"NativeModule({self.path}, {state})"


def load_native_module(path: Path | str) -> NativeModule:
    """
    Load a native shared library.

    The file is not checked beforehand; the platform loader's own
    validation decides.

    Args:
        path: Path to the .so/.dylib/.dll file

    Returns:
        NativeModule handle

    Raises:
        ModuleLoadError: If the library cannot be loaded for any reason
    """
    path = Path(path).absolute()

    try:
        library = ctypes.CDLL(str(path))
    except (OSError, ValueError) as e:
        raise ModuleLoadError(f"Failed to load native module {path}: {e}") from e

    logger.debug("Loaded native module %s", path)
    return NativeModule(path, library)


def invoke_export(module: NativeModule, name: str) -> None:
    """
    Resolve an export and call it.

    Args:
        module: Open native module
        name: Export name

    Raises:
        SymbolNotFoundError: If the export is missing (nothing is called)
        ModuleClosedError: If the module is closed
    """
    export = module.lookup(name)
    export()
