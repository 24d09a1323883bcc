"""
dllx CLI - run and build native plugin packages.

Usage:
    dllx run <package> <export>      Load a package and call an export
    dllx inspect <package>           Show manifest and platform selection
    dllx pack <source-dir> <output>  Build a package from a directory
    dllx init-config [path]          Write a default dllx.toml
"""

import argparse
import json
import sys
from pathlib import Path

from dllx import __version__
from dllx.config import Settings, load_settings, write_default_config
from dllx.errors import DllxError
from dllx.log import setup_logging
from dllx.package.archive import build_package
from dllx.package.manifest import read_manifest
from dllx.platform import KNOWN_PLATFORMS, current_platform, resolve_platform_file
from dllx.runner import run_package


def create_parser() -> argparse.ArgumentParser:
    """Create argument parser with one subcommand per operation."""
    parser = argparse.ArgumentParser(
        prog="dllx",
        description="Load platform-aware native plugin packages",
    )
    parser.add_argument("--version", action="version", version=f"dllx {__version__}")
    parser.add_argument("-v", "--verbose", action="store_true", help="Verbose output")
    parser.add_argument("-c", "--config", type=Path, help="Path to dllx.toml")

    commands = parser.add_subparsers(dest="command")

    run = commands.add_parser("run", help="Load a package and call an export")
    run.add_argument("package", type=Path, help="Path to the .dllx package")
    run.add_argument("export", help="Name of the export to call")
    run.add_argument("--dest", type=Path, help="Extract here and keep the files")
    run.add_argument("--platform", choices=KNOWN_PLATFORMS, help="Override platform")

    inspect = commands.add_parser("inspect", help="Show manifest and selection")
    inspect.add_argument("package", type=Path, help="Path to the .dllx package")
    inspect.add_argument("--platform", choices=KNOWN_PLATFORMS, help="Override platform")

    pack = commands.add_parser("pack", help="Build a package from a directory")
    pack.add_argument("source", type=Path, help="Directory containing manifest.json")
    pack.add_argument("output", type=Path, help="Output .dllx path")

    init = commands.add_parser("init-config", help="Write a default config file")
    init.add_argument("path", type=Path, nargs="?", help="Target path")

    return parser


def run_command(args: argparse.Namespace, settings: Settings) -> int:
    """Execute the run command."""
    if args.dest is not None:
        settings.extract_dir = args.dest
    if args.platform is not None:
        settings.platform = args.platform

    run_package(args.package, args.export, settings)
    return 0


def inspect_command(args: argparse.Namespace, settings: Settings) -> int:
    """Print the manifest and the module selected for the platform."""
    manifest = read_manifest(args.package)
    platform_id = args.platform or settings.platform or current_platform()
    selected = resolve_platform_file(manifest, platform_id)

    print(f"name:      {manifest.name}")
    print("platforms:")
    for key, rel_path in sorted(manifest.platforms.items()):
        print(f"  {key:<8} {rel_path}")
    print(f"platform:  {platform_id or 'unknown'}")
    print(f"selected:  {selected if selected is not None else '(no match)'}")
    return 0


def pack_command(args: argparse.Namespace) -> int:
    """Build a package and echo its manifest."""
    out = build_package(args.source, args.output)
    manifest = read_manifest(out)
    print(f"Built {out}")
    print(json.dumps({"name": manifest.name, "platforms": manifest.platforms}, indent=2))
    return 0


def main(argv: list[str] | None = None) -> int:
    """Main entry point for dllx CLI."""
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 0

    try:
        if args.command == "init-config":
            path = write_default_config(args.path or args.config)
            print(f"Wrote {path}")
            return 0

        settings = load_settings(args.config)
        setup_logging("DEBUG" if args.verbose else settings.log_level)

        if args.command == "run":
            return run_command(args, settings)
        elif args.command == "inspect":
            return inspect_command(args, settings)
        elif args.command == "pack":
            return pack_command(args)

    except DllxError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        print("\nInterrupted", file=sys.stderr)
        return 130

    return 1


if __name__ == "__main__":
    sys.exit(main())
