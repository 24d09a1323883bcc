"""Native library loading and export invocation."""

from dllx.native.loader import NativeExport, NativeModule, invoke_export, load_native_module

__all__ = ["NativeExport", "NativeModule", "invoke_export", "load_native_module"]
