"""Ordered node writer for configuration documents.

The exporter builds a list of nodes (comments, key/value pairs, nested
mappings and dash lists) and the writer serializes them in one pass.
Strings that could be misread by a YAML parser are written as
double-quoted scalars produced by the YAML emitter itself, so every
character the reader would reject or fold comes out escaped.
"""

import re
from dataclasses import dataclass, field
from datetime import date
from pathlib import Path
from typing import Any

import yaml

INDENT = "  "

_PLAIN_KEY = re.compile(r"[A-Za-z][A-Za-z0-9_.\-]*")
_PLAIN_VALUE = re.compile(r"[A-Za-z][A-Za-z0-9_\-]*")
# Words YAML 1.1 parsers read as booleans or null
_RESERVED = {"y", "n", "yes", "no", "on", "off", "true", "false", "null"}


@dataclass
class Comment:
    text: str


@dataclass
class Blank:
    pass


@dataclass
class Scalar:
    key: str
    value: Any


@dataclass
class Sequence:
    key: str
    items: list[Any] = field(default_factory=list)


@dataclass
class Mapping:
    key: str
    children: list["Node"] = field(default_factory=list)


Node = Comment | Blank | Scalar | Sequence | Mapping


def format_key(key: str) -> str:
    """Render a mapping key, quoting it when a parser could misread it."""
    if _PLAIN_KEY.fullmatch(key) and key.lower() not in _RESERVED:
        return key
    return _quote(key)


def format_value(value: Any) -> str:
    """Render a scalar value on a single line."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int | float):
        return str(value)
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, Path):
        value = str(value)
    text = str(value)
    if _PLAIN_VALUE.fullmatch(text) and text.lower() not in _RESERVED:
        return text
    return _quote(text)


def _quote(text: str) -> str:
    """Double-quote ``text`` on one line with YAML escapes."""
    dumped = yaml.safe_dump(text, default_style='"', allow_unicode=True, width=float("inf"))
    return dumped.split("\n", 1)[0]


class DocumentWriter:
    """Collects top-level nodes and renders them as YAML text."""

    def __init__(self) -> None:
        self.nodes: list[Node] = []

    def add(self, node: Node) -> None:
        self.nodes.append(node)

    def extend(self, nodes: list[Node]) -> None:
        self.nodes.extend(nodes)

    def blank(self) -> None:
        """Add a separating blank line, never two in a row."""
        if self.nodes and not isinstance(self.nodes[-1], Blank):
            self.nodes.append(Blank())

    def render(self) -> str:
        lines: list[str] = []
        for node in self.nodes:
            _render_node(node, 0, lines)
        while lines and not lines[-1]:
            lines.pop()
        return "\n".join(lines) + "\n"


def _render_node(node: Node, depth: int, lines: list[str]) -> None:
    pad = INDENT * depth
    if isinstance(node, Blank):
        lines.append("")
    elif isinstance(node, Comment):
        for part in node.text.splitlines() or [""]:
            lines.append(f"{pad}# {part}".rstrip())
    elif isinstance(node, Scalar):
        lines.append(f"{pad}{format_key(node.key)}: {format_value(node.value)}")
    elif isinstance(node, Sequence):
        if not node.items:
            lines.append(f"{pad}{format_key(node.key)}: []")
            return
        lines.append(f"{pad}{format_key(node.key)}:")
        for item in node.items:
            lines.append(f"{pad}{INDENT}- {format_value(item)}")
    elif isinstance(node, Mapping):
        # A mapping holding only comments would parse back as null
        if all(isinstance(child, Comment | Blank) for child in node.children):
            lines.append(f"{pad}{format_key(node.key)}: {{}}")
            return
        lines.append(f"{pad}{format_key(node.key)}:")
        for child in node.children:
            _render_node(child, depth + 1, lines)
