"""Widest-line bookkeeping for content sizing."""

from __future__ import annotations

from collections.abc import Iterable

from jpreview._project import Slice
from jpreview.style import HighlightStyle


def measure(slices: Iterable[Slice], style: HighlightStyle) -> tuple[int, str]:
    """Return ``(width, text)`` of the widest slice under *style*.

    The first of several equally wide lines wins.  An empty sequence
    measures as the style's padding alone.
    """
    max_width = style.measure("")
    max_text = ""
    for sl in slices:
        text = sl.text
        width = style.measure(text)
        if width > max_width:
            max_width = width
            max_text = text
    return max_width, max_text
