"""Document tree built from the token stream."""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from enum import Enum

from jpreview._tokenizer import Token, TokenKind
from jpreview.errors import ParseError


class NodeKind(Enum):
    OBJECT = "object"
    ARRAY = "array"
    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    NULL = "null"


_SCALARS = {
    TokenKind.STRING: NodeKind.STRING,
    TokenKind.NUMBER: NodeKind.NUMBER,
    TokenKind.BOOLEAN: NodeKind.BOOLEAN,
    TokenKind.NULL: NodeKind.NULL,
}
_OPENERS = {
    TokenKind.OBJECT_OPEN: NodeKind.OBJECT,
    TokenKind.ARRAY_OPEN: NodeKind.ARRAY,
}
_CLOSERS = {
    NodeKind.OBJECT: TokenKind.OBJECT_CLOSE,
    NodeKind.ARRAY: TokenKind.ARRAY_CLOSE,
}
_CLOSE_CHAR = {NodeKind.OBJECT: "'}'", NodeKind.ARRAY: "']'"}


@dataclass(eq=False)
class Node:
    """One value of the document.

    ``start_line``/``end_line`` are 1-based source lines of the first and
    last token of the value.  ``key`` is the raw (quoted) key literal when
    the node is an object member.  ``has_next`` is set when a sibling
    follows, so the rendered line takes a trailing comma.
    """

    id: int
    kind: NodeKind
    depth: int
    start_line: int
    end_line: int
    key: str | None = None
    text: str = ""
    children: list[Node] = field(default_factory=list)
    has_next: bool = False
    last_id: int = 0  # highest id inside the subtree

    @property
    def is_container(self) -> bool:
        return self.kind is NodeKind.OBJECT or self.kind is NodeKind.ARRAY


@dataclass
class Document:
    """Arena of nodes in preorder; ``nodes[i].id == i``."""

    root: Node
    nodes: list[Node]

    def get(self, node_id: int) -> Node | None:
        if 0 <= node_id < len(self.nodes):
            return self.nodes[node_id]
        return None


# Parser states for an open container.
_OPENED = 0  # right after the opening bracket
_AFTER_COMMA = 1
_AFTER_VALUE = 2


class _Parser:
    def __init__(self, tokens: Iterable[Token]) -> None:
        self._tokens: Iterator[Token] = iter(tokens)
        self._last: Token | None = None
        self.nodes: list[Node] = []

    def _next(self) -> Token | None:
        tok = next(self._tokens, None)
        if tok is not None:
            self._last = tok
        return tok

    def _eof_line(self) -> int:
        return self._last.line if self._last is not None else 1

    def _new_node(
        self, kind: NodeKind, tok: Token, depth: int, key: str | None
    ) -> Node:
        node = Node(
            id=len(self.nodes),
            kind=kind,
            depth=depth,
            start_line=tok.line,
            end_line=tok.line,
            key=key,
            text="" if kind in _CLOSERS else tok.text,
            last_id=len(self.nodes),
        )
        self.nodes.append(node)
        return node

    def _begin_value(
        self, tok: Token | None, depth: int, key: str | None, stack: list[Node]
    ) -> Node:
        """Start the value at *tok*; containers are pushed onto *stack*."""
        if tok is None:
            raise ParseError(
                "unexpected end of input", self._eof_line(), expected="a JSON value"
            )
        kind = _SCALARS.get(tok.kind)
        if kind is not None:
            return self._new_node(kind, tok, depth, key)
        kind = _OPENERS.get(tok.kind)
        if kind is None:
            raise ParseError(
                f"unexpected {tok.text!r}", tok.line, tok.column, expected="a JSON value"
            )
        node = self._new_node(kind, tok, depth, key)
        stack.append(node)
        return node

    def parse(self) -> Document:
        first = self._next()
        if first is None:
            raise ParseError("empty document", 1, expected="a JSON value")

        stack: list[Node] = []
        states: list[int] = []
        root = self._begin_value(first, 0, None, stack)
        if stack:
            states.append(_OPENED)

        while stack:
            container = stack[-1]
            state = states[-1]
            tok = self._next()
            close_kind = _CLOSERS[container.kind]

            if tok is None:
                raise ParseError(
                    f"unterminated {container.kind.value} opened on line "
                    f"{container.start_line}",
                    self._eof_line(),
                    expected=_CLOSE_CHAR[container.kind],
                )

            if tok.kind is close_kind and state != _AFTER_COMMA:
                container.end_line = tok.line
                container.last_id = len(self.nodes) - 1
                stack.pop()
                states.pop()
                continue

            if state == _AFTER_VALUE:
                if tok.kind is not TokenKind.COMMA:
                    raise ParseError(
                        f"unexpected {tok.text!r}",
                        tok.line,
                        tok.column,
                        expected=f"',' or {_CLOSE_CHAR[container.kind]}",
                    )
                container.children[-1].has_next = True
                states[-1] = _AFTER_COMMA
                continue

            depth = container.depth + 1
            key = None
            if container.kind is NodeKind.OBJECT:
                if tok.kind is not TokenKind.STRING:
                    expected = "a string key"
                    if state == _OPENED:
                        expected += " or '}'"
                    raise ParseError(
                        f"unexpected {tok.text!r}", tok.line, tok.column, expected=expected
                    )
                key = tok.text
                colon = self._next()
                if colon is None or colon.kind is not TokenKind.COLON:
                    where = colon or tok
                    raise ParseError(
                        "missing colon after key", where.line, where.column, expected="':'"
                    )
                tok = self._next()

            states[-1] = _AFTER_VALUE
            child = self._begin_value(tok, depth, key, stack)
            container.children.append(child)
            if stack[-1] is child:
                states.append(_OPENED)

        trailing = self._next()
        if trailing is not None:
            raise ParseError(
                f"unexpected {trailing.text!r} after the root value",
                trailing.line,
                trailing.column,
                expected="end of input",
            )
        return Document(root=root, nodes=self.nodes)


def build_tree(tokens: Iterable[Token]) -> Document:
    """Build a :class:`Document` from *tokens*.

    Nesting depth is bounded only by memory: open containers live on an
    explicit stack rather than the call stack.
    """
    return _Parser(tokens).parse()
