"""Fold/collapse mixin for DecorationResult."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from jpreview._project import Slice, project
from jpreview.errors import FoldError

if TYPE_CHECKING:
    from jpreview._tree import Document, Node

logger = logging.getLogger(__name__)


@dataclass
class SliceRangeUpdate:
    """``slices[start:stop]`` of the old sequence was replaced by ``slices``.

    ``delta`` is the net change in line count; every slice after the range
    had its line number shifted by it.
    """

    start: int
    stop: int
    slices: list[Slice] = field(default_factory=list)
    delta: int = 0

    @property
    def changed(self) -> bool:
        return bool(self.slices) or self.stop > self.start


class FoldMixin:
    """Fold and collapse related methods for DecorationResult."""

    document: Document
    slices: list[Slice]
    indent: int
    _collapsed: set[int]
    _sizes: dict[int, int]

    def _foldable_node(self, node_id: int) -> Node:
        node = self.document.get(node_id)
        if node is None:
            raise FoldError("unknown node", node_id)
        if not node.is_container:
            raise FoldError(f"{node.kind.value} node cannot be folded", node_id)
        if not node.children:
            raise FoldError(f"empty {node.kind.value} has nothing to fold", node_id)
        return node

    def _visible_size(self, node: Node) -> int:
        """Number of slices *node*'s subtree currently projects to."""
        sizes = self._sizes
        stack: list[tuple[Node, bool]] = [(node, False)]
        while stack:
            n, done = stack.pop()
            if n.id in sizes:
                continue
            if not n.children or n.id in self._collapsed:
                sizes[n.id] = 1
            elif done:
                sizes[n.id] = 2 + sum(sizes[c.id] for c in n.children)
            else:
                stack.append((n, True))
                stack.extend((c, False) for c in n.children if c.id not in sizes)
        return sizes[node.id]

    def _locate(self, node_id: int) -> tuple[int | None, list[Node]]:
        """Slice index of the node's first line and its ancestor path.

        The index is None when a collapsed ancestor hides the node.  Only
        the ancestors and their earlier siblings are visited.
        """
        node = self.document.root
        path: list[Node] = []
        index = 0
        hidden = False
        while node.id != node_id:
            path.append(node)
            hidden = hidden or node.id in self._collapsed
            index += 1
            for child in node.children:
                if child.id <= node_id <= child.last_id:
                    node = child
                    break
                if not hidden:
                    index += self._visible_size(child)
        return (None if hidden else index), path

    def is_collapsed(self, node_id: int) -> bool:
        return node_id in self._collapsed

    def toggle_fold(self, node_id: int) -> SliceRangeUpdate:
        """Fold or unfold a container and patch the slice list in place.

        Only the node's own range is reprojected; slices after it are
        renumbered by the line-count delta.  A node hidden inside a folded
        ancestor just flips state and yields an empty update.
        """
        node = self._foldable_node(node_id)
        start, path = self._locate(node_id)
        span = self._visible_size(node) if start is not None else 0
        if node_id in self._collapsed:
            self._collapsed.discard(node_id)
        else:
            self._collapsed.add(node_id)
        for ancestor in path:
            self._sizes.pop(ancestor.id, None)
        self._sizes.pop(node_id, None)

        if start is None:
            logger.debug("toggled hidden node %d", node_id)
            return SliceRangeUpdate(0, 0)

        stop = start + span
        first_line = self.slices[start].line_number
        fresh = project(node, self._collapsed, self.indent, first_line)
        delta = len(fresh) - (stop - start)
        self.slices[start:stop] = fresh
        if delta:
            for sl in self.slices[start + len(fresh) :]:
                sl.line_number += delta
        logger.debug(
            "toggled node %d: slices %d..%d -> %d lines (delta %+d)",
            node_id, start, stop, len(fresh), delta,
        )
        return SliceRangeUpdate(start, stop, fresh, delta)

    def _reproject(self) -> list[Slice]:
        self._sizes.clear()
        self.slices = project(self.document.root, self._collapsed, self.indent)
        return self.slices

    def fold_all(self) -> list[Slice]:
        """Collapse every foldable container except the root."""
        root_id = self.document.root.id
        self._collapsed = {
            n.id
            for n in self.document.nodes
            if n.is_container and n.children and n.id != root_id
        }
        return self._reproject()

    def unfold_all(self) -> list[Slice]:
        self._collapsed.clear()
        return self._reproject()

    def fold_to_depth(self, depth: int) -> list[Slice]:
        """Collapse the foldable containers sitting at exactly *depth*."""
        self._collapsed = {
            n.id
            for n in self.document.nodes
            if n.is_container and n.children and n.depth == depth
        }
        return self._reproject()
