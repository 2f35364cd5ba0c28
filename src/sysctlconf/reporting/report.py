"""Presentation utilities for parsed configs and validation outcomes."""

from __future__ import annotations

import json
import logging
from collections.abc import Iterator
from pathlib import Path

import typer
from rich.console import Console
from rich.text import Text
from rich.tree import Tree

from sysctlconf.config import AppConfig
from sysctlconf.parser import Node
from sysctlconf.schema import Schema
from sysctlconf.utils import iter_leaves

LOG = logging.getLogger(__name__)


def emit_config(node: Node, config: AppConfig, title: str = "config") -> None:
    """Print a parsed tree in the configured format and export it if requested."""
    output = config.output
    if output.format == "json":
        typer.echo(render_json(node, indent=output.indent, sort_keys=output.sort_keys))
    elif output.format == "plain":
        for line in render_plain(node, sort_keys=output.sort_keys):
            typer.echo(line)
    elif output.rich_tree:
        Console().print(build_tree(node, title=title, sort_keys=output.sort_keys))
    else:
        for line in render_outline(node, indent=output.indent, sort_keys=output.sort_keys):
            typer.echo(line)

    if output.export_json:
        _export_json(node, output.export_json, indent=output.indent, sort_keys=output.sort_keys)


def emit_validation_success(node: Node, schema: Schema, source: str) -> None:
    leaves = sum(1 for _ in iter_leaves(node))
    Console().print(
        Text(
            f"OK: {source} ({leaves} key(s) checked against {len(schema)} declared)",
            style="bold green",
        ),
    )


def render_json(node: Node, indent: int = 2, sort_keys: bool = True) -> str:
    return json.dumps(node.to_dict(), indent=indent, sort_keys=sort_keys, ensure_ascii=False)


def render_plain(node: Node, sort_keys: bool = True) -> list[str]:
    """Return one sysctl.conf line (``dotted.key = value``) per leaf."""
    pairs = list(iter_leaves(node))
    if sort_keys:
        pairs.sort(key=lambda item: item[0])
    return [f"{path} = {value}" for path, value in pairs]


def render_outline(node: Node, indent: int = 2, sort_keys: bool = True) -> list[str]:
    """Return an indented outline of the tree without rich styling."""
    return list(_outline_lines(node, 0, indent, sort_keys))


def build_tree(node: Node, title: str = "config", sort_keys: bool = True) -> Tree:
    tree = Tree(Text(title, style="bold cyan"))
    _populate_tree(tree, node, sort_keys)
    return tree


def _populate_tree(branch: Tree, node: Node, sort_keys: bool) -> None:
    for key in _ordered_keys(node, sort_keys):
        value = node[key]
        if isinstance(value, Node):
            child = branch.add(Text(key, style="bold"))
            _populate_tree(child, value, sort_keys)
        else:
            label = Text(key)
            label.append(" = ")
            label.append(value, style="green")
            branch.add(label)


def _outline_lines(node: Node, depth: int, indent: int, sort_keys: bool) -> Iterator[str]:
    pad = " " * (indent * depth)
    for key in _ordered_keys(node, sort_keys):
        value = node[key]
        if isinstance(value, Node):
            yield f"{pad}{key}:"
            yield from _outline_lines(value, depth + 1, indent, sort_keys)
        else:
            yield f"{pad}{key} = {value}"


def _ordered_keys(node: Node, sort_keys: bool) -> list[str]:
    keys = list(node)
    if sort_keys:
        keys.sort()
    return keys


def _export_json(node: Node, path: Path, indent: int, sort_keys: bool) -> None:
    path.write_text(render_json(node, indent=indent, sort_keys=sort_keys) + "\n", encoding="utf-8")
    LOG.info("JSON exported to %s", path)
