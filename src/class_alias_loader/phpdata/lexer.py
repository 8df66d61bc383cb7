"""Lexer for PHP data files.

Alias-map files are ordinary PHP scripts that ``return`` an array
literal.  This lexer scans the small subset of PHP needed to read such
files without running a PHP interpreter: the open/close tags, a few
keywords, qualified names, string and number literals, and the
punctuation of array literals.

Comment styles skipped:
    - ``//`` and ``#`` single-line comments
    - ``/* ... */`` block comments (including ``/** docblocks */``)

String literals follow PHP rules: single-quoted strings only recognise
``\\\\`` and ``\\'``; double-quoted strings support the usual escapes
but variable interpolation is rejected.
"""
from __future__ import annotations

import re
from typing import Final

from class_alias_loader.errors import AliasMapSyntaxError
from class_alias_loader.phpdata.tokens import KEYWORDS, Token, TokenType

_NAME: Final[re.Pattern[str]] = re.compile(
    r"\\?[A-Za-z_\x80-\uffff][A-Za-z0-9_\x80-\uffff]*(?:\\[A-Za-z_\x80-\uffff][A-Za-z0-9_\x80-\uffff]*)*"
)
_NUMBER: Final[re.Pattern[str]] = re.compile(
    r"0[xX][0-9a-fA-F_]+|0[bB][01_]+|0[oO][0-7_]+|(?:[0-9][0-9_]*)?\.[0-9][0-9_]*(?:[eE][+-]?[0-9]+)?"
    r"|[0-9][0-9_]*(?:\.[0-9_]*)?(?:[eE][+-]?[0-9]+)?"
)
_OPEN_TAG: Final[re.Pattern[str]] = re.compile(r"<\?php(?=\s|$)", re.IGNORECASE)

_SIMPLE_ESCAPES: Final[dict[str, str]] = {
    "n": "\n",
    "t": "\t",
    "r": "\r",
    "v": "\v",
    "e": "\x1b",
    "f": "\f",
    "\\": "\\",
    "$": "$",
    '"': '"',
}

_PUNCTUATION: Final[dict[str, TokenType]] = {
    "=>": TokenType.DOUBLE_ARROW,
    "::": TokenType.DOUBLE_COLON,
    "?>": TokenType.CLOSE_TAG,
    "[": TokenType.LBRACKET,
    "]": TokenType.RBRACKET,
    "(": TokenType.LPAREN,
    ")": TokenType.RPAREN,
    ",": TokenType.COMMA,
    ";": TokenType.SEMICOLON,
    "=": TokenType.ASSIGN,
    "-": TokenType.MINUS,
}


class Lexer:
    """Single-pass lexer for PHP data files.

    Parameters
    ----------
    source:
        The complete PHP source text.
    """

    __slots__ = ("_source", "_pos", "_line", "_col", "_tokens")

    def __init__(self, source: str) -> None:
        self._source = source.lstrip("\ufeff")
        self._pos = 0
        self._line = 1
        self._col = 1
        self._tokens: list[Token] = []

    def tokenize(self) -> list[Token]:
        """Scan the source and return its tokens, terminated by ``EOF``.

        Raises
        ------
        AliasMapSyntaxError
            If the file does not start with ``<?php`` or contains a
            character sequence outside the supported subset.
        """
        self._skip_whitespace()
        match = _OPEN_TAG.match(self._source, self._pos)
        if match is None:
            raise self._error("expected '<?php' open tag")
        self._emit(TokenType.OPEN_TAG, match.group(0))
        self._consume(len(match.group(0)))

        while True:
            self._skip_trivia()
            if self._pos >= len(self._source):
                break
            self._scan_one()
            if self._tokens[-1].type is TokenType.CLOSE_TAG:
                # Anything after the close tag is inline output, not code.
                break
        self._emit(TokenType.EOF, "")
        return self._tokens

    # ------------------------------------------------------------------
    # Internal scanner
    # ------------------------------------------------------------------

    def _error(self, message: str) -> AliasMapSyntaxError:
        return AliasMapSyntaxError(message, self._line, self._col)

    def _emit(self, token_type: TokenType, value: str, line: int | None = None, col: int | None = None) -> None:
        self._tokens.append(
            Token(type=token_type, value=value, line=line or self._line, col=col or self._col)
        )

    def _consume(self, count: int) -> str:
        text = self._source[self._pos:self._pos + count]
        for ch in text:
            if ch == "\n":
                self._line += 1
                self._col = 1
            else:
                self._col += 1
        self._pos += count
        return text

    def _skip_whitespace(self) -> None:
        while self._pos < len(self._source) and self._source[self._pos].isspace():
            self._consume(1)

    def _skip_trivia(self) -> None:
        while True:
            self._skip_whitespace()
            rest = self._source.startswith
            if rest("//", self._pos) or rest("#", self._pos):
                self._skip_line_comment()
            elif rest("/*", self._pos):
                end = self._source.find("*/", self._pos + 2)
                if end == -1:
                    raise self._error("unterminated block comment")
                self._consume(end + 2 - self._pos)
            else:
                return

    def _skip_line_comment(self) -> None:
        # A line comment ends at the newline or right before a close tag.
        while self._pos < len(self._source):
            if self._source[self._pos] == "\n" or self._source.startswith("?>", self._pos):
                return
            self._consume(1)

    def _scan_one(self) -> None:
        ch = self._source[self._pos]
        line, col = self._line, self._col

        if ch == "'":
            self._emit(TokenType.STRING, self._scan_single_quoted(), line, col)
            return
        if ch == '"':
            self._emit(TokenType.STRING, self._scan_double_quoted(), line, col)
            return

        match = _NUMBER.match(self._source, self._pos)
        if match is not None:
            text = self._consume(len(match.group(0)))
            is_float = "." in text or ("e" in text.lower() and not text.lower().startswith("0x"))
            self._emit(TokenType.FLOAT if is_float else TokenType.INTEGER, text, line, col)
            return

        match = _NAME.match(self._source, self._pos)
        if match is not None:
            text = self._consume(len(match.group(0)))
            keyword = KEYWORDS.get(text.lower())
            self._emit(keyword or TokenType.NAME, text, line, col)
            return

        for text, token_type in _PUNCTUATION.items():
            if self._source.startswith(text, self._pos):
                self._consume(len(text))
                self._emit(token_type, text, line, col)
                return

        raise self._error(f"unexpected character {ch!r}")

    def _scan_single_quoted(self) -> str:
        self._consume(1)
        parts: list[str] = []
        while True:
            if self._pos >= len(self._source):
                raise self._error("unterminated string literal")
            ch = self._consume(1)
            if ch == "'":
                return "".join(parts)
            if ch == "\\" and self._pos < len(self._source) and self._source[self._pos] in ("\\", "'"):
                parts.append(self._consume(1))
            else:
                parts.append(ch)

    def _scan_double_quoted(self) -> str:
        self._consume(1)
        parts: list[str] = []
        while True:
            if self._pos >= len(self._source):
                raise self._error("unterminated string literal")
            ch = self._consume(1)
            if ch == '"':
                return "".join(parts)
            if ch == "$" and self._pos < len(self._source) and (
                self._source[self._pos] == "{" or _NAME.match(self._source, self._pos)
            ):
                raise self._error("variable interpolation is not supported")
            if ch != "\\" or self._pos >= len(self._source):
                parts.append(ch)
                continue
            parts.append(self._scan_escape())

    def _scan_escape(self) -> str:
        nxt = self._source[self._pos]
        if nxt in _SIMPLE_ESCAPES:
            self._consume(1)
            return _SIMPLE_ESCAPES[nxt]
        octal = re.match(r"[0-7]{1,3}", self._source[self._pos:self._pos + 3])
        if octal:
            self._consume(len(octal.group(0)))
            return chr(int(octal.group(0), 8) & 0xFF)
        hexa = re.match(r"x([0-9a-fA-F]{1,2})", self._source[self._pos:self._pos + 3])
        if hexa:
            self._consume(len(hexa.group(0)))
            return chr(int(hexa.group(1), 16))
        unicode = re.match(r"u\{([0-9a-fA-F]+)\}", self._source[self._pos:self._pos + 12])
        if unicode:
            self._consume(len(unicode.group(0)))
            return chr(int(unicode.group(1), 16))
        # Unknown escapes are kept verbatim, backslash included.
        return "\\"


def tokenize(source: str) -> list[Token]:
    """Tokenize *source* and return the token list."""
    return Lexer(source).tokenize()
