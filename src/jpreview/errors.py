"""Exceptions raised by the decoration engine."""

from __future__ import annotations


class JsonPreviewError(Exception):
    """Base class for every jpreview error."""


class DecorationError(JsonPreviewError):
    """A decoration pass failed; no slices were produced."""

    def __init__(self, msg: str, line: int, column: int = 1) -> None:
        self.msg = msg
        self.line = line
        self.column = column
        super().__init__(f"{msg} (line {line}, column {column})")


class TokenizeError(DecorationError):
    """Malformed string or number literal, or a stray character."""

    def __init__(self, msg: str, line: int, column: int, offset: int) -> None:
        self.offset = offset
        super().__init__(msg, line, column)


class ParseError(DecorationError):
    """Grammar violation while building the document tree."""

    def __init__(self, msg: str, line: int, column: int = 1, *, expected: str = "") -> None:
        self.expected = expected
        if expected:
            msg = f"{msg}: expected {expected}"
        super().__init__(msg, line, column)


class FoldError(JsonPreviewError):
    """Fold toggle on a node that cannot be folded."""

    def __init__(self, msg: str, node_id: int) -> None:
        self.node_id = node_id
        super().__init__(f"{msg} (node {node_id})")
