"""Utility helpers for dotted key paths."""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from typing import Any

PATH_SEPARATOR = "."


def split_key(key: str) -> list[str]:
    """Split a dotted key into trimmed segments; empty segments are kept."""
    return [segment.strip() for segment in key.split(PATH_SEPARATOR)]


def join_path(prefix: str, key: str) -> str:
    """Append ``key`` to a dotted ``prefix`` (an empty prefix means the root)."""
    if not prefix:
        return key
    return f"{prefix}{PATH_SEPARATOR}{key}"


def iter_leaves(tree: Mapping[str, Any], prefix: str = "") -> Iterator[tuple[str, Any]]:
    """Yield ``(dotted_path, leaf)`` pairs of a nested mapping, depth-first."""
    # Explicit stack: depth is bounded only by the dot count of the input keys.
    stack = [(prefix, iter(tree.items()))]
    while stack:
        parent, items = stack[-1]
        for key, value in items:
            path = join_path(parent, key)
            if isinstance(value, Mapping):
                stack.append((path, iter(value.items())))
                break
            yield path, value
        else:
            stack.pop()
