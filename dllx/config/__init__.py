"""
dllx Configuration - TOML-based settings for the loader.

Example config (dllx.toml):

    [dllx]
    extract_dir = "build/extracted"
    platform = ""
    log_level = "DEBUG"

Example usage:
    from dllx.config import load_settings

    settings = load_settings(Path("dllx.toml"))
    print(settings.extract_dir)  # None -> temporary directory
"""

from dataclasses import dataclass
from pathlib import Path

from dllx.config.schema import (
    SETTINGS_SCHEMA,
    ValidationError,
    generate_default_config,
    validate_config,
)
from dllx.config.toml_handler import (
    TOMLError,
    generate_toml_from_schema,
    read_toml,
    write_toml_text,
)
from dllx.errors import DllxError

SECTION = "dllx"

# Default config file path
DEFAULT_CONFIG_FILE = Path("dllx.toml")


class ConfigError(DllxError):
    """Base exception for config API errors."""

    pass


@dataclass
class Settings:
    """
    Loader settings.

    Attributes:
        extract_dir: Extraction destination, or None for a scoped temp dir
        platform: Platform identity override, or None to detect
        log_level: Console log level name
    """

    extract_dir: Path | None = None
    platform: str | None = None
    log_level: str = "INFO"


def load_settings(config_file: Path | None = None) -> Settings:
    """
    Load settings from the [dllx] table of a TOML file.

    A missing file or table yields the defaults.

    Args:
        config_file: Path to the TOML file (defaults to ./dllx.toml)

    Returns:
        Settings instance

    Raises:
        ConfigError: If the file cannot be parsed or holds invalid values
    """
    config_file = config_file or DEFAULT_CONFIG_FILE
    values = generate_default_config(SETTINGS_SCHEMA)

    if config_file.exists():
        try:
            data = read_toml(config_file)
            table = data.get(SECTION, {})
            if not isinstance(table, dict):
                raise ConfigError(
                    f"Invalid config {config_file}: [{SECTION}] must be a table"
                )
            validate_config(table, SETTINGS_SCHEMA)
        except (TOMLError, ValidationError) as e:
            raise ConfigError(f"Invalid config {config_file}: {e}") from e
        values.update(table)

    return Settings(
        extract_dir=Path(values["extract_dir"]) if values["extract_dir"] else None,
        platform=values["platform"] or None,
        log_level=values["log_level"],
    )


def write_default_config(config_file: Path | None = None) -> Path:
    """
    Write a commented default config file.

    Args:
        config_file: Target path (defaults to ./dllx.toml)

    Returns:
        Path written

    Raises:
        ConfigError: If the file cannot be written
    """
    config_file = config_file or DEFAULT_CONFIG_FILE
    content = generate_toml_from_schema(
        SECTION, SETTINGS_SCHEMA, generate_default_config(SETTINGS_SCHEMA)
    )

    try:
        write_toml_text(config_file, content)
    except TOMLError as e:
        raise ConfigError(str(e)) from e

    return config_file


__all__ = [
    "ConfigError",
    "DEFAULT_CONFIG_FILE",
    "Settings",
    "load_settings",
    "write_default_config",
]
