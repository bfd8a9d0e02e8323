"""Decoration pass: JSON text -> numbered, highlighted, foldable slices."""

from __future__ import annotations

import logging

from jpreview._fold import FoldMixin
from jpreview._metrics import measure
from jpreview._project import Slice, project
from jpreview._tokenizer import tokenize
from jpreview._tree import Document, build_tree
from jpreview.style import HighlightStyle

logger = logging.getLogger(__name__)

DEFAULT_INDENT = 4


class DecorationResult(FoldMixin):
    """Output of one decoration pass.

    ``slices`` is the live line list; fold operations patch it in place.
    ``max_line_width``/``max_line_text`` describe the widest line of the
    fully expanded document and do not move when folds change.
    """

    def __init__(
        self, document: Document, style: HighlightStyle, indent: int = DEFAULT_INDENT
    ) -> None:
        self.document = document
        self.style = style
        self.indent = indent
        self._collapsed: set[int] = set()
        self._sizes: dict[int, int] = {}
        self.slices: list[Slice] = project(document.root, self._collapsed, indent)
        self.max_line_width, self.max_line_text = measure(self.slices, style)

    def __len__(self) -> int:
        return len(self.slices)

    def restyle(self, style: HighlightStyle) -> None:
        """Switch to *style* and re-measure against the expanded document."""
        self.style = style
        if self._collapsed:
            expanded = project(self.document.root, (), self.indent)
        else:
            expanded = self.slices
        self.max_line_width, self.max_line_text = measure(expanded, style)


def decorate(
    text: str, style: HighlightStyle | None = None, *, indent: int = DEFAULT_INDENT
) -> DecorationResult:
    """Run one full decoration pass over *text*.

    Raises :class:`~jpreview.errors.TokenizeError` or
    :class:`~jpreview.errors.ParseError`; nothing partial is returned.
    """
    if style is None:
        style = HighlightStyle.default()
    document = build_tree(tokenize(text))
    result = DecorationResult(document, style, indent)
    logger.debug(
        "decorated %d chars: %d nodes, %d lines, widest %d",
        len(text), len(document.nodes), len(result.slices), result.max_line_width,
    )
    return result
