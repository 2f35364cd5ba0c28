from __future__ import annotations

from pathlib import Path

import pytest

from sysctlconf.parser import ParseError, load, parse
from sysctlconf.schema import (
    InvalidTypeError,
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

SCHEMA_TEXT = "endpoint = string\ndebug = bool\nlog.file = string\n"
CONFIG_TEXT = """
endpoint = localhost:3000
debug = true
log.file = /var/log/console.log
"""


def test_parse_schema_flattens_dotted_paths() -> None:
    schema = parse_schema(
        """
endpoint = string
debug = bool
log.file = string
retry = integer
ratio = float
"""
    )

    assert dict(schema) == {
        "endpoint": SchemaType.STRING,
        "debug": SchemaType.BOOL,
        "log.file": SchemaType.STRING,
        "retry": SchemaType.INTEGER,
        "ratio": SchemaType.FLOAT,
    }


@pytest.mark.parametrize(
    ("name", "expected"),
    [
        ("string", SchemaType.STRING),
        ("bool", SchemaType.BOOL),
        ("Boolean", SchemaType.BOOL),
        ("INTEGER", SchemaType.INTEGER),
        ("int", SchemaType.INTEGER),
        ("float", SchemaType.FLOAT),
        ("  Number ", SchemaType.FLOAT),
    ],
)
def test_type_names_are_case_insensitive(name: str, expected: SchemaType) -> None:
    assert SchemaType.from_name(name) is expected


def test_unknown_type_name_resolves_to_none() -> None:
    assert SchemaType.from_name("list") is None


def test_parse_schema_unknown_type() -> None:
    with pytest.raises(UnknownTypeError) as excinfo:
        parse_schema("endpoint = string\nlog.level = enum\n")
    assert excinfo.value.key == "log.level"
    assert excinfo.value.type_name == "enum"
    assert str(excinfo.value) == "schema key 'log.level': unknown type 'enum'"


def test_parse_schema_several_unknown_types_reports_one() -> None:
    with pytest.raises(UnknownTypeError) as excinfo:
        parse_schema("a = list\nb = map\n")
    assert excinfo.value.key in {"a", "b"}


def test_parse_schema_wraps_syntax_error() -> None:
    with pytest.raises(SchemaSyntaxError) as excinfo:
        parse_schema("a = string\nnot a declaration\n")
    assert isinstance(excinfo.value, SchemaParseError)
    assert isinstance(excinfo.value.cause, ParseError)
    assert excinfo.value.cause.line == 2
    assert str(excinfo.value) == "parse: line 2: missing '='"


def test_schema_is_read_only() -> None:
    schema = parse_schema("k = int")
    with pytest.raises(TypeError):
        schema["k"] = SchemaType.STRING  # type: ignore[index]


def test_integer_schema_checks_values() -> None:
    schema = parse_schema("k = integer")
    assert check_value(schema["k"], "42")
    assert not check_value(schema["k"], "abc")


@pytest.mark.parametrize(
    ("schema_type", "raw", "expected"),
    [
        (SchemaType.STRING, "", True),
        (SchemaType.STRING, "anything at all", True),
        (SchemaType.BOOL, "true", True),
        (SchemaType.BOOL, " FALSE ", True),
        (SchemaType.BOOL, "Yes", True),
        (SchemaType.BOOL, "no", True),
        (SchemaType.BOOL, "1", True),
        (SchemaType.BOOL, "0", True),
        (SchemaType.BOOL, "on", False),
        (SchemaType.BOOL, "notabool", False),
        (SchemaType.INTEGER, "0", True),
        (SchemaType.INTEGER, "-17", True),
        (SchemaType.INTEGER, " 42 ", True),
        (SchemaType.INTEGER, "9223372036854775807", True),
        (SchemaType.INTEGER, "-9223372036854775808", True),
        (SchemaType.INTEGER, "9223372036854775808", False),
        (SchemaType.INTEGER, "-9223372036854775809", False),
        (SchemaType.INTEGER, "+5", False),
        (SchemaType.INTEGER, "1_000", False),
        (SchemaType.INTEGER, "1,000", False),
        (SchemaType.INTEGER, "1.5", False),
        (SchemaType.INTEGER, "", False),
        (SchemaType.INTEGER, "-", False),
        (SchemaType.FLOAT, "1.5", True),
        (SchemaType.FLOAT, "-2", True),
        (SchemaType.FLOAT, "6.02e23", True),
        (SchemaType.FLOAT, ".5", True),
        (SchemaType.FLOAT, "inf", True),
        (SchemaType.FLOAT, "NaN", True),
        (SchemaType.FLOAT, "1_0.5", False),
        (SchemaType.FLOAT, "+1.5", True),
        (SchemaType.FLOAT, "1.2.3", False),
        (SchemaType.FLOAT, "", False),
    ],
)
def test_check_value(schema_type: SchemaType, raw: str, expected: bool) -> None:
    assert check_value(schema_type, raw) is expected
    assert schema_type.check_value(raw) is expected


def test_validate_ok() -> None:
    assert validate(parse(CONFIG_TEXT), parse_schema(SCHEMA_TEXT)) is None


def test_validate_unknown_key() -> None:
    schema = parse_schema(SCHEMA_TEXT)
    config = parse(CONFIG_TEXT + "unknown = value\n")

    with pytest.raises(UnknownKeyError) as excinfo:
        validate(config, schema)
    assert excinfo.value.key == "unknown"
    assert str(excinfo.value) == "validation error: key 'unknown' is not defined in schema"


def test_validate_unknown_nested_key() -> None:
    schema = parse_schema(SCHEMA_TEXT)
    config = parse(CONFIG_TEXT + "log.level = debug\n")

    with pytest.raises(UnknownKeyError) as excinfo:
        validate(config, schema)
    assert excinfo.value.key == "log.level"


def test_validate_invalid_bool() -> None:
    schema = parse_schema(SCHEMA_TEXT)
    config = parse(CONFIG_TEXT.replace("debug = true", "debug = notabool"))

    with pytest.raises(InvalidTypeError) as excinfo:
        validate(config, schema)
    assert excinfo.value.key == "debug"
    assert excinfo.value.expected == "bool"
    assert excinfo.value.value == "notabool"
    assert str(excinfo.value) == (
        "validation error: key 'debug' expected type 'bool', got value 'notabool'"
    )


def test_validate_invalid_integer_reports_canonical_name() -> None:
    schema = parse_schema("retry = int\n")
    config = parse("retry = abc\n")

    with pytest.raises(InvalidTypeError) as excinfo:
        validate(config, schema)
    assert excinfo.value.expected == "integer"


def test_validate_declared_node_path_is_not_a_leaf() -> None:
    schema = parse_schema("log.file = string\n")
    config = parse("log = /var/log/console.log\n")

    with pytest.raises(UnknownKeyError) as excinfo:
        validate(config, schema)
    assert excinfo.value.key == "log"


def test_validate_errors_share_base_class() -> None:
    schema = parse_schema("a = bool\n")
    with pytest.raises(SchemaValidationError):
        validate(parse("a = maybe\n"), schema)
    with pytest.raises(ValueError):
        validate(parse("b = 1\n"), schema)


def test_validate_empty_config_passes() -> None:
    validate(parse("# nothing here\n"), parse_schema("a = string\n"))


def test_load_schema_sample(sample_schema_path: Path, sample_config_path: Path) -> None:
    schema = load_schema(sample_schema_path)
    assert schema["log.name"] is SchemaType.STRING
    validate(load(sample_config_path), schema)


def test_load_schema_missing_file(tmp_path: Path) -> None:
    with pytest.raises(SchemaLoadError) as excinfo:
        load_schema(tmp_path / "absent.schema")
    assert excinfo.value.is_io
    assert str(excinfo.value).startswith("io: ")


def test_load_schema_unknown_type(tmp_path: Path) -> None:
    path = tmp_path / "bad.schema"
    path.write_text("a = whatever\n", encoding="utf-8")

    with pytest.raises(SchemaLoadError) as excinfo:
        load_schema(path)
    assert not excinfo.value.is_io
    assert isinstance(excinfo.value.cause, UnknownTypeError)
    assert str(excinfo.value) == "schema key 'a': unknown type 'whatever'"


def test_load_schema_syntax_error(tmp_path: Path) -> None:
    path = tmp_path / "broken.schema"
    path.write_text("a = string\n\nno assignment here\n", encoding="utf-8")

    with pytest.raises(SchemaLoadError) as excinfo:
        load_schema(path)
    assert not excinfo.value.is_io
    assert isinstance(excinfo.value.cause, SchemaSyntaxError)
    assert excinfo.value.cause.cause.line == 3
    assert str(excinfo.value) == "parse: line 3: missing '='"


def test_validate_deep_dotted_key() -> None:
    key = ".".join(f"k{index}" for index in range(1500))
    schema = parse_schema(f"{key} = integer\n")

    validate(parse(f"{key} = 42\n"), schema)
    with pytest.raises(InvalidTypeError) as excinfo:
        validate(parse(f"{key} = many\n"), schema)
    assert excinfo.value.key == key
