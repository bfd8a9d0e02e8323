"""Syntax colouring: node -> styled runs for one rendered line."""

from __future__ import annotations

import json
from enum import Enum
from typing import TYPE_CHECKING

from rich.text import Text

from jpreview._tree import Node, NodeKind

if TYPE_CHECKING:
    from jpreview.style import HighlightStyle


class Category(Enum):
    KEY = "key"
    STRING = "string"
    LINK = "link"
    NUMBER = "number"
    LITERAL = "literal"
    PUNCTUATION = "punctuation"
    PLAIN = "plain"
    FOLD = "fold"
    LINE_NUMBER = "line_number"


Run = tuple[str, Category]

FOLD_MARKER = "..."

_OPEN = {NodeKind.OBJECT: "{", NodeKind.ARRAY: "["}
_CLOSE = {NodeKind.OBJECT: "}", NodeKind.ARRAY: "]"}
_LINK_PREFIXES = ("http://", "https://")


def _string_category(literal: str) -> Category:
    try:
        value = json.loads(literal)
    except ValueError:
        return Category.STRING
    if value.startswith(_LINK_PREFIXES):
        return Category.LINK
    return Category.STRING


def _prefix(node: Node, indent: int) -> list[Run]:
    """Indentation plus the ``"key": `` part of an object member."""
    runs: list[Run] = []
    if node.depth:
        runs.append((" " * (node.depth * indent), Category.PLAIN))
    if node.key is not None:
        runs.append((node.key, Category.KEY))
        runs.append((":", Category.PUNCTUATION))
        runs.append((" ", Category.PLAIN))
    return runs


def _comma(node: Node, runs: list[Run]) -> tuple[Run, ...]:
    if node.has_next:
        runs.append((",", Category.PUNCTUATION))
    return tuple(runs)


def leaf_line(node: Node, indent: int) -> tuple[Run, ...]:
    """Line for a scalar value, or for an empty container (``{}`` / ``[]``)."""
    runs = _prefix(node, indent)
    kind = node.kind
    if kind is NodeKind.STRING:
        runs.append((node.text, _string_category(node.text)))
    elif kind is NodeKind.NUMBER:
        runs.append((node.text, Category.NUMBER))
    elif kind is NodeKind.BOOLEAN or kind is NodeKind.NULL:
        runs.append((node.text, Category.LITERAL))
    else:
        runs.append((_OPEN[kind] + _CLOSE[kind], Category.PUNCTUATION))
    return _comma(node, runs)


def opening_line(node: Node, indent: int) -> tuple[Run, ...]:
    runs = _prefix(node, indent)
    runs.append((_OPEN[node.kind], Category.PUNCTUATION))
    return tuple(runs)


def closing_line(node: Node, indent: int) -> tuple[Run, ...]:
    runs: list[Run] = []
    if node.depth:
        runs.append((" " * (node.depth * indent), Category.PLAIN))
    runs.append((_CLOSE[node.kind], Category.PUNCTUATION))
    return _comma(node, runs)


def folded_line(node: Node, indent: int) -> tuple[Run, ...]:
    """Opening line, the fold marker and the closing bracket on one line."""
    runs = _prefix(node, indent)
    runs.append((_OPEN[node.kind], Category.PUNCTUATION))
    runs.append((FOLD_MARKER, Category.FOLD))
    runs.append((_CLOSE[node.kind], Category.PUNCTUATION))
    return _comma(node, runs)


def plain_text(runs: tuple[Run, ...]) -> str:
    return "".join(text for text, _ in runs)


def to_text(runs: tuple[Run, ...], style: HighlightStyle) -> Text:
    """Materialize *runs* as a :class:`rich.text.Text`."""
    result = Text(no_wrap=True)
    for text, category in runs:
        result.append(text, style=style.style_for(category))
    return result
