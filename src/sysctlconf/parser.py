"""Parser for sysctl.conf-style configuration text.

Grammar, following sysctl.conf(5):

* ``key = value`` with surrounding whitespace trimmed from both sides;
* blank lines and lines starting with ``#`` or ``;`` are ignored;
* a leading ``-`` marks a line whose failure should be ignored; the marker is
  stripped and the line is parsed normally.

Dots in keys create nested nodes: ``log.file = path`` yields
``{"log": {"file": "path"}}``.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator, Mapping
from pathlib import Path
from typing import Any, Dict, Union

from sysctlconf.utils import PATH_SEPARATOR, split_key

LOG = logging.getLogger(__name__)

COMMENT_PREFIXES = ("#", ";")
IGNORE_FAILURE_PREFIX = "-"


class SysctlConfError(Exception):
    """Base class for every error raised by sysctlconf."""


class ParseError(SysctlConfError, ValueError):
    """Raised for a malformed line; ``line`` is 1-based."""

    def __init__(self, line: int, message: str) -> None:
        self.line = line
        self.message = message
        super().__init__(f"line {line}: {message}")


class LoadError(SysctlConfError):
    """Raised when a configuration file cannot be read or parsed."""

    def __init__(self, path: Path, cause: OSError | UnicodeDecodeError | ParseError) -> None:
        self.path = path
        self.cause = cause
        kind = "parse" if isinstance(cause, ParseError) else "io"
        super().__init__(f"{kind}: {cause}")

    @property
    def is_io(self) -> bool:
        return not isinstance(self.cause, ParseError)


class Node(Mapping[str, "Value"]):
    """Read-only mapping of keys to leaf strings or nested nodes."""

    __slots__ = ("_children",)

    def __init__(self, children: Mapping[str, Any] | None = None) -> None:
        self._children: Dict[str, Value] = {}
        pending = [(self._children, children or {})]
        while pending:
            target, source = pending.pop()
            for key, value in source.items():
                if isinstance(value, Node):
                    target[key] = value
                elif isinstance(value, Mapping):
                    child = Node()
                    target[key] = child
                    pending.append((child._children, value))
                else:
                    target[key] = str(value)

    def __getitem__(self, key: str) -> Value:
        return self._children[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._children)

    def __len__(self) -> int:
        return len(self._children)

    def __repr__(self) -> str:
        return f"Node({self._children!r})"

    def lookup(self, dotted_path: str) -> Value:
        """
        Follow ``dotted_path`` from this node.

        Raises KeyError when a segment is missing or the path runs through a leaf.
        """
        current: Value = self
        for segment in split_key(dotted_path):
            if not isinstance(current, Node) or segment not in current:
                raise KeyError(dotted_path)
            current = current[segment]
        return current

    def to_dict(self) -> Dict[str, Any]:
        """Return a plain nested ``dict`` copy of the tree."""
        result: Dict[str, Any] = {}
        pending = [(result, self)]
        while pending:
            target, node = pending.pop()
            for key, value in node._children.items():
                if isinstance(value, Node):
                    copy: Dict[str, Any] = {}
                    target[key] = copy
                    pending.append((copy, value))
                else:
                    target[key] = value
        return result


Value = Union[str, Node]


def parse(text: str) -> Node:
    """
    Parse sysctl.conf-style text into a tree of nested nodes.

    Later assignments to the same dotted path overwrite earlier ones. Raises
    ParseError on the first line that has no ``=`` or an empty key.
    """
    tree: Dict[str, Any] = {}
    assignments = 0
    # Only "\n" ends a line; a trailing "\r" goes with strip().
    for line_number, raw_line in enumerate(text.split("\n"), start=1):
        line = raw_line.strip()
        if not line or line.startswith(COMMENT_PREFIXES):
            continue
        if line.startswith(IGNORE_FAILURE_PREFIX):
            line = line[len(IGNORE_FAILURE_PREFIX) :].strip()
            if not line:
                continue

        key_part, separator, value_part = line.partition("=")
        if not separator:
            raise ParseError(line_number, "missing '='")
        key = key_part.strip()
        if not key:
            raise ParseError(line_number, "empty key")

        _insert(tree, key, value_part.strip(), line_number)
        assignments += 1

    LOG.debug("Parsed %d assignment(s) into %d top-level key(s)", assignments, len(tree))
    return Node(tree)


def load(path: Path | str) -> Node:
    """Read a whole file as UTF-8 and parse it with :func:`parse`."""
    path_obj = Path(path)
    try:
        text = path_obj.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise LoadError(path_obj, exc) from exc
    try:
        node = parse(text)
    except ParseError as exc:
        raise LoadError(path_obj, exc) from exc
    LOG.debug("Loaded %s", path_obj)
    return node


def _insert(tree: Dict[str, Any], key: str, value: str, line_number: int) -> None:
    parts = split_key(key)
    current = tree
    for depth, part in enumerate(parts[:-1]):
        child = current.get(part)
        if not isinstance(child, dict):
            if child is not None:
                LOG.debug(
                    "line %d: '%s' replaces leaf '%s'",
                    line_number,
                    key,
                    PATH_SEPARATOR.join(parts[: depth + 1]),
                )
            child = {}
            current[part] = child
        current = child
    current[parts[-1]] = value
