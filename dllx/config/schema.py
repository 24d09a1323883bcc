"""
Configuration Schema System.

This module provides the field declarations for the [dllx] config table
and validation of values against them.

Key features:
- Type-checked field definitions with optional choices
- Validation of a whole config table against the schema
"""

from dataclasses import dataclass
from typing import Any

from dllx.errors import DllxError


class SchemaError(DllxError):
    """Base exception for schema-related errors."""

    pass


class ValidationError(SchemaError):
    """Raised when value validation fails."""

    pass


@dataclass
class ConfigField:
    """
    Represents a configuration field with type and constraints.

    Attributes:
        type_: The expected type of the field value
        default: Default value for the field
        description: Human-readable description
        choices: List of allowed values (optional)
    """

    type_: type
    default: Any
    description: str = ""
    choices: list[Any] | None = None

    def __post_init__(self):
        """Validate field definition."""
        if not isinstance(self.default, self.type_):
            raise SchemaError(
                f"Default value {self.default!r} does not match type {self.type_.__name__}"
            )

        if self.choices is not None and self.default not in self.choices:
            raise SchemaError(
                f"Default value {self.default!r} not in choices {self.choices}"
            )

    def validate(self, value: Any) -> None:
        """
        Validate a value against this field's constraints.

        Args:
            value: The value to validate

        Raises:
            ValidationError: If validation fails
        """
        if not isinstance(value, self.type_):
            raise ValidationError(
                f"Expected type {self.type_.__name__}, got {type(value).__name__}"
            )

        if self.choices is not None and value not in self.choices:
            raise ValidationError(
                f"Value {value!r} not in allowed choices {self.choices}"
            )


SETTINGS_SCHEMA: dict[str, ConfigField] = {
    "extract_dir": ConfigField(
        str,
        "",
        "Directory packages are extracted into. Empty: a temporary directory removed after each run",
    ),
    "platform": ConfigField(
        str,
        "",
        "Platform identity to resolve against. Empty: detect from the running OS",
        choices=["", "windows", "macos", "linux", "ios", "android"],
    ),
    "log_level": ConfigField(
        str,
        "INFO",
        "Console log level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
    ),
}


def validate_config(config: dict[str, Any], schema: dict[str, ConfigField]) -> None:
    """
    Validate a configuration table against a schema.

    Missing fields are allowed and take their defaults.

    Args:
        config: The configuration dictionary to validate
        schema: The schema dictionary (field_name -> ConfigField)

    Raises:
        ValidationError: If validation fails
    """
    for key in config:
        if key not in schema:
            raise ValidationError(f"Unknown configuration field: {key}")

    for field_name, value in config.items():
        try:
            schema[field_name].validate(value)
        except ValidationError as e:
            raise ValidationError(f"Field '{field_name}': {e}") from e


def generate_default_config(schema: dict[str, ConfigField]) -> dict[str, Any]:
    """
    Generate a default configuration from a schema.

    Args:
        schema: The schema dictionary (field_name -> ConfigField)

    Returns:
        A dictionary with default values for all fields
    """
    return {field_name: field.default for field_name, field in schema.items()}
