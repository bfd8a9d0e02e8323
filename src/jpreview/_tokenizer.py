"""Lazy JSON tokenizer with line tracking."""

from __future__ import annotations

import re
from collections.abc import Iterator
from dataclasses import dataclass
from enum import Enum, auto

from jpreview.errors import TokenizeError


class TokenKind(Enum):
    OBJECT_OPEN = auto()
    OBJECT_CLOSE = auto()
    ARRAY_OPEN = auto()
    ARRAY_CLOSE = auto()
    COLON = auto()
    COMMA = auto()
    STRING = auto()
    NUMBER = auto()
    BOOLEAN = auto()
    NULL = auto()


@dataclass(frozen=True)
class Token:
    kind: TokenKind
    text: str
    line: int  # 1-based
    column: int  # 1-based
    offset: int


_PUNCT = {
    "{": TokenKind.OBJECT_OPEN,
    "}": TokenKind.OBJECT_CLOSE,
    "[": TokenKind.ARRAY_OPEN,
    "]": TokenKind.ARRAY_CLOSE,
    ":": TokenKind.COLON,
    ",": TokenKind.COMMA,
}
_LITERALS = (
    ("true", TokenKind.BOOLEAN),
    ("false", TokenKind.BOOLEAN),
    ("null", TokenKind.NULL),
)
_WHITESPACE = frozenset(" \t\r\n")
_NUMBER_START = frozenset("-0123456789")
_DIGIT = frozenset("0123456789.-+eE")
_ESCAPES = frozenset('"\\/bfnrt')
_HEX = frozenset("0123456789abcdefABCDEF")
_NUMBER_RE = re.compile(r"-?(?:0|[1-9][0-9]*)(?:\.[0-9]+)?(?:[eE][+-]?[0-9]+)?")


def tokenize(text: str) -> Iterator[Token]:
    """Yield tokens from *text*.

    Whitespace is never emitted; each ``\\n`` outside a string bumps the
    line stamped on the following tokens.  Raises :class:`TokenizeError`
    at the first malformed literal or stray character.
    """
    n = len(text)
    line = 1
    line_start = 0
    i = 0
    while i < n:
        ch = text[i]
        if ch in _WHITESPACE:
            if ch == "\n":
                line += 1
                line_start = i + 1
            i += 1
            continue

        column = i - line_start + 1
        kind = _PUNCT.get(ch)
        if kind is not None:
            yield Token(kind, ch, line, column, i)
            i += 1
        elif ch == '"':
            end = _scan_string(text, i, line, line_start)
            yield Token(TokenKind.STRING, text[i:end], line, column, i)
            i = end
        elif ch in _NUMBER_START:
            end = i
            while end < n and text[end] in _DIGIT:
                end += 1
            literal = text[i:end]
            if not _NUMBER_RE.fullmatch(literal):
                raise TokenizeError(
                    f"invalid number literal {literal!r}", line, column, i
                )
            yield Token(TokenKind.NUMBER, literal, line, column, i)
            i = end
        else:
            for word, word_kind in _LITERALS:
                if text.startswith(word, i):
                    yield Token(word_kind, word, line, column, i)
                    i += len(word)
                    break
            else:
                raise TokenizeError(
                    f"unexpected character {ch!r}", line, column, i
                )


def _scan_string(text: str, start: int, line: int, line_start: int) -> int:
    """Return the offset just past the closing quote of the string at *start*."""
    n = len(text)
    i = start + 1
    while i < n:
        ch = text[i]
        if ch == '"':
            return i + 1
        if ch == "\\":
            if i + 1 >= n:
                break
            nxt = text[i + 1]
            if nxt == "u":
                digits = text[i + 2 : i + 6]
                if len(digits) != 4 or not all(c in _HEX for c in digits):
                    raise TokenizeError(
                        "invalid \\u escape", line, i - line_start + 1, i
                    )
                i += 6
                continue
            if nxt not in _ESCAPES:
                raise TokenizeError(
                    f"invalid escape '\\{nxt}'", line, i - line_start + 1, i
                )
            i += 2
            continue
        if ch < " ":
            raise TokenizeError(
                "control character in string", line, i - line_start + 1, i
            )
        i += 1
    raise TokenizeError(
        "unterminated string", line, start - line_start + 1, start
    )
