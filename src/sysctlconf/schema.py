"""Schema validation for sysctl.conf-style configs.

Schema files share the configuration grammar, one ``key = type`` per line, with
dotted keys allowed (``log.file = string``). Recognised type names are
``string``, ``bool``/``boolean``, ``integer``/``int`` and ``float``/``number``,
matched case-insensitively.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Mapping
from enum import Enum
from pathlib import Path
from types import MappingProxyType
from typing import Dict, Optional

from sysctlconf.parser import Node, ParseError, SysctlConfError, parse
from sysctlconf.utils import iter_leaves

LOG = logging.getLogger(__name__)

BOOL_LITERALS = frozenset({"true", "false", "1", "0", "yes", "no"})
INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1
_INTEGER_PATTERN = re.compile(r"-?[0-9]+")


class SchemaType(Enum):
    """Expected type of a configuration value."""

    STRING = "string"
    BOOL = "bool"
    INTEGER = "integer"
    FLOAT = "float"

    @classmethod
    def from_name(cls, name: str) -> Optional["SchemaType"]:
        """Resolve a schema type name, or return None when it is not recognised."""
        return _TYPE_NAMES.get(name.strip().lower())

    def check_value(self, raw: str) -> bool:
        return check_value(self, raw)


_TYPE_NAMES = {
    "string": SchemaType.STRING,
    "bool": SchemaType.BOOL,
    "boolean": SchemaType.BOOL,
    "integer": SchemaType.INTEGER,
    "int": SchemaType.INTEGER,
    "float": SchemaType.FLOAT,
    "number": SchemaType.FLOAT,
}

Schema = Mapping[str, SchemaType]


class SchemaParseError(SysctlConfError, ValueError):
    """Raised when schema text cannot be turned into a schema."""


class SchemaSyntaxError(SchemaParseError):
    """Raised when schema text is not valid sysctl.conf syntax."""

    def __init__(self, cause: ParseError) -> None:
        self.cause = cause
        super().__init__(f"parse: {cause}")


class UnknownTypeError(SchemaParseError):
    """Raised when a schema key declares a type name outside the supported set."""

    def __init__(self, key: str, type_name: str) -> None:
        self.key = key
        self.type_name = type_name
        super().__init__(f"schema key '{key}': unknown type '{type_name}'")


class SchemaLoadError(SysctlConfError):
    """Raised when a schema file cannot be read or parsed."""

    def __init__(self, path: Path, cause: OSError | UnicodeDecodeError | SchemaParseError) -> None:
        self.path = path
        self.cause = cause
        message = str(cause) if isinstance(cause, SchemaParseError) else f"io: {cause}"
        super().__init__(message)

    @property
    def is_io(self) -> bool:
        return not isinstance(self.cause, SchemaParseError)


class SchemaValidationError(SysctlConfError, ValueError):
    """Raised for the first configuration key that violates the schema."""

    def __init__(self, key: str, message: str) -> None:
        self.key = key
        super().__init__(f"validation error: {message}")


class UnknownKeyError(SchemaValidationError):
    """Raised when a configured key path is not declared in the schema."""

    def __init__(self, key: str) -> None:
        super().__init__(key, f"key '{key}' is not defined in schema")


class InvalidTypeError(SchemaValidationError):
    """Raised when a configured value does not parse as its declared type."""

    def __init__(self, key: str, expected: str, value: str) -> None:
        self.expected = expected
        self.value = value
        super().__init__(key, f"key '{key}' expected type '{expected}', got value '{value}'")


def parse_schema(text: str) -> Schema:
    """
    Parse schema text into a flat mapping of dotted paths to schema types.

    Raises SchemaSyntaxError for malformed lines and UnknownTypeError for the
    first unrecognised type name encountered.
    """
    try:
        tree = parse(text)
    except ParseError as exc:
        raise SchemaSyntaxError(exc) from exc

    schema: Dict[str, SchemaType] = {}
    for path, type_name in iter_leaves(tree):
        schema_type = SchemaType.from_name(type_name)
        if schema_type is None:
            raise UnknownTypeError(path, type_name)
        schema[path] = schema_type
    LOG.debug("Parsed schema with %d key(s)", len(schema))
    return MappingProxyType(schema)


def load_schema(path: Path | str) -> Schema:
    """Read a schema file as UTF-8 and parse it with :func:`parse_schema`."""
    path_obj = Path(path)
    try:
        text = path_obj.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise SchemaLoadError(path_obj, exc) from exc
    try:
        schema = parse_schema(text)
    except SchemaParseError as exc:
        raise SchemaLoadError(path_obj, exc) from exc
    LOG.debug("Loaded schema %s", path_obj)
    return schema


def check_value(schema_type: SchemaType, raw: str) -> bool:
    """Return True when ``raw`` is a valid literal of ``schema_type``."""
    text = raw.strip()
    if schema_type is SchemaType.STRING:
        return True
    if schema_type is SchemaType.BOOL:
        return text.lower() in BOOL_LITERALS
    if schema_type is SchemaType.INTEGER:
        if not _INTEGER_PATTERN.fullmatch(text):
            return False
        return INT64_MIN <= int(text) <= INT64_MAX
    if schema_type is SchemaType.FLOAT:
        # float() also accepts "1_000"; digit separators are not part of the grammar.
        if "_" in text:
            return False
        try:
            float(text)
        except ValueError:
            return False
        return True
    raise ValueError(f"Unsupported schema type {schema_type!r}")


def validate(config: Node, schema: Schema) -> None:
    """
    Check every leaf of ``config`` against ``schema``.

    Stops at the first violation: UnknownKeyError when a leaf path is not declared,
    InvalidTypeError when its value does not match the declared type.
    """
    checked = 0
    for path, raw in iter_leaves(config):
        expected = schema.get(path)
        if expected is None:
            raise UnknownKeyError(path)
        if not check_value(expected, raw):
            raise InvalidTypeError(path, expected.value, raw)
        checked += 1
    LOG.debug("Validated %d key(s) against schema", checked)
