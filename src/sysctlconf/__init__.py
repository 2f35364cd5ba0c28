"""
sysctlconf package initialisation.

Exposes the public API for parsing sysctl.conf-style configuration text into nested
nodes and validating the result against a type schema.
"""

from importlib import metadata

from sysctlconf.parser import LoadError, Node, ParseError, SysctlConfError, Value, load, parse
from sysctlconf.schema import (
    InvalidTypeError,
    Schema,
    SchemaLoadError,
    SchemaParseError,
    SchemaSyntaxError,
    SchemaType,
    SchemaValidationError,
    UnknownKeyError,
    UnknownTypeError,
    check_value,
    load_schema,
    parse_schema,
    validate,
)


def get_version() -> str:
    """Return the installed package version, falling back to source version during development."""
    try:
        return metadata.version("sysctlconf")
    except metadata.PackageNotFoundError:  # pragma: no cover - only occurs during dev
        return "0.1.0"


__all__ = [
    "InvalidTypeError",
    "LoadError",
    "Node",
    "ParseError",
    "Schema",
    "SchemaLoadError",
    "SchemaParseError",
    "SchemaSyntaxError",
    "SchemaType",
    "SchemaValidationError",
    "SysctlConfError",
    "UnknownKeyError",
    "UnknownTypeError",
    "Value",
    "check_value",
    "get_version",
    "load",
    "load_schema",
    "parse",
    "parse_schema",
    "validate",
]
