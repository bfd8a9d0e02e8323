"""Flatten a document tree into numbered display lines."""

from __future__ import annotations

from collections.abc import Container
from dataclasses import dataclass

from jpreview._highlight import (
    Run,
    closing_line,
    folded_line,
    leaf_line,
    opening_line,
    plain_text,
)
from jpreview._tree import Node


@dataclass
class Slice:
    """One visible line.

    ``owner_id`` is the node the line belongs to; a container owns both its
    opening and closing line.  ``line_number`` is the display position and
    is renumbered as folds change.
    """

    line_number: int
    styled_content: tuple[Run, ...]
    owner_id: int
    foldable: bool = False
    folded: bool = False

    @property
    def text(self) -> str:
        return plain_text(self.styled_content)


def project(
    root: Node,
    collapsed: Container[int],
    indent: int,
    first_line: int = 1,
) -> list[Slice]:
    """Emit the slices of *root*'s subtree, numbered from *first_line*.

    Containers whose id is in *collapsed* produce a single folded line and
    nothing for their children.
    """
    out: list[Slice] = []
    emit = out.append
    # (node, closing) pairs; closing entries emit the container's last line
    stack: list[tuple[Node, bool]] = [(root, False)]
    while stack:
        node, closing = stack.pop()
        line = first_line + len(out)
        if closing:
            emit(Slice(line, closing_line(node, indent), node.id))
        elif not node.is_container or not node.children:
            emit(Slice(line, leaf_line(node, indent), node.id))
        elif node.id in collapsed:
            emit(Slice(line, folded_line(node, indent), node.id, True, True))
        else:
            emit(Slice(line, opening_line(node, indent), node.id, True))
            stack.append((node, True))
            stack.extend((child, False) for child in reversed(node.children))
    return out
