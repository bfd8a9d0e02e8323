"""Tests for the JSON tokenizer."""

import pytest

from jpreview._tokenizer import TokenKind, tokenize
from jpreview.errors import TokenizeError


def kinds(text):
    return [t.kind for t in tokenize(text)]


class TestTokenKinds:
    """Token classification."""

    def test_punctuation(self):
        assert kinds("{}[]:,") == [
            TokenKind.OBJECT_OPEN,
            TokenKind.OBJECT_CLOSE,
            TokenKind.ARRAY_OPEN,
            TokenKind.ARRAY_CLOSE,
            TokenKind.COLON,
            TokenKind.COMMA,
        ]

    def test_literals(self):
        assert kinds("true false null") == [
            TokenKind.BOOLEAN,
            TokenKind.BOOLEAN,
            TokenKind.NULL,
        ]

    def test_string_keeps_quotes_and_escapes(self):
        tokens = list(tokenize(r'"a\"bé"'))
        assert len(tokens) == 1
        assert tokens[0].kind is TokenKind.STRING
        assert tokens[0].text == r'"a\"bé"'

    def test_numbers(self):
        tokens = list(tokenize("0 -1 3.25 1e10 -2.5E-3"))
        assert [t.text for t in tokens] == ["0", "-1", "3.25", "1e10", "-2.5E-3"]
        assert all(t.kind is TokenKind.NUMBER for t in tokens)

    def test_whitespace_not_emitted(self):
        assert kinds(" \t\r\n [ \n ] \n") == [
            TokenKind.ARRAY_OPEN,
            TokenKind.ARRAY_CLOSE,
        ]


class TestLinePositions:
    """Line/column stamping."""

    def test_lines_advance_on_newline(self):
        tokens = list(tokenize('{\n  "a": 1\n}'))
        assert [t.line for t in tokens] == [1, 2, 2, 2, 3]

    def test_columns_and_offsets(self):
        tokens = list(tokenize('[1,\n   true]'))
        true = tokens[3]
        assert true.text == "true"
        assert true.line == 2
        assert true.column == 4
        assert true.offset == 7

    def test_lazy_generator(self):
        """Tokens before a bad character are still produced."""
        gen = tokenize("[1, @]")
        assert next(gen).kind is TokenKind.ARRAY_OPEN
        assert next(gen).kind is TokenKind.NUMBER
        assert next(gen).kind is TokenKind.COMMA
        with pytest.raises(TokenizeError):
            next(gen)


class TestTokenizeErrors:
    """Malformed literals propagate as TokenizeError."""

    def test_unterminated_string(self):
        with pytest.raises(TokenizeError) as exc:
            list(tokenize('{"abc'))
        assert exc.value.line == 1
        assert exc.value.offset == 1
        assert "unterminated string" in str(exc.value)

    def test_trailing_backslash_is_unterminated(self):
        with pytest.raises(TokenizeError, match="unterminated"):
            list(tokenize('"abc\\'))

    def test_invalid_escape(self):
        with pytest.raises(TokenizeError, match="invalid escape"):
            list(tokenize(r'"a\qb"'))

    def test_invalid_unicode_escape(self):
        with pytest.raises(TokenizeError, match=r"\\u escape"):
            list(tokenize(r'"\u12G4"'))

    def test_control_character_in_string(self):
        with pytest.raises(TokenizeError) as exc:
            list(tokenize('"a\nb"'))
        assert "control character" in str(exc.value)

    @pytest.mark.parametrize("literal", ["01", "1.", "-", "1e", "1.2.3", "--1"])
    def test_invalid_number(self, literal):
        with pytest.raises(TokenizeError, match="invalid number literal"):
            list(tokenize(literal))

    def test_unexpected_character(self):
        with pytest.raises(TokenizeError) as exc:
            list(tokenize("\n\n  nul"))
        assert exc.value.line == 3
        assert exc.value.column == 3
