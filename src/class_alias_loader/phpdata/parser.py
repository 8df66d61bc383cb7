"""Recursive-descent parser for PHP data files.

Reads the value of the top-level ``return`` statement of a PHP file
without executing it.  Supported statements before the ``return``::

    declare(strict_types=1);
    namespace Vendor\\Package;
    use Vendor\\Other\\Thing;
    use Vendor\\Other\\Thing as Alias, Vendor\\More;

Supported expressions::

    array(...) / [...]           nested, trailing commas, implicit keys
    'string' / "string"
    123 / -1 / 1.5
    true / false / null
    Some\\Name::class            resolved against namespace and imports

PHP arrays are returned as ordered ``dict`` objects.  Keys follow PHP
array-key casting: decimal integer strings, booleans and floats become
integers, ``null`` becomes the empty string, and implicit keys continue
from the largest integer key seen so far.
"""
from __future__ import annotations

import re
from typing import Any, Final

from class_alias_loader.errors import AliasMapSyntaxError
from class_alias_loader.phpdata.lexer import tokenize
from class_alias_loader.phpdata.tokens import Token, TokenType

_INTEGER_KEY: Final[re.Pattern[str]] = re.compile(r"-?(?:0|[1-9][0-9]*)")


def _normalize_key(key: Any) -> int | str:
    if isinstance(key, bool):
        return int(key)
    if isinstance(key, int):
        return key
    if isinstance(key, float):
        return int(key)
    if key is None:
        return ""
    if isinstance(key, str) and _INTEGER_KEY.fullmatch(key):
        return int(key)
    if isinstance(key, str):
        return key
    raise TypeError(f"illegal array key type {type(key).__name__}")


def _parse_number(text: str, negative: bool) -> int | float:
    clean = text.replace("_", "")
    lowered = clean.lower()
    if lowered.startswith("0x"):
        value: int | float = int(clean[2:], 16)
    elif lowered.startswith("0b"):
        value = int(clean[2:], 2)
    elif "." in clean or "e" in lowered:
        value = float(clean)
    elif lowered.startswith("0o"):
        value = int(clean[2:], 8)
    elif len(clean) > 1 and clean.startswith("0"):
        value = int(clean[1:], 8)
    else:
        value = int(clean)
    return -value if negative else value


class Parser:
    """Parse a token list into the value of the file's ``return`` statement.

    Parameters
    ----------
    tokens:
        Tokens produced by ``phpdata.lexer.tokenize``, ending with ``EOF``.
    """

    def __init__(self, tokens: list[Token]) -> None:
        self._tokens = tokens
        self._pos = 0
        self._namespace = ""
        self._imports: dict[str, str] = {}

    # ------------------------------------------------------------------
    # Navigation helpers
    # ------------------------------------------------------------------

    def _current(self) -> Token:
        return self._tokens[min(self._pos, len(self._tokens) - 1)]

    def _advance(self) -> Token:
        tok = self._current()
        if tok.type is not TokenType.EOF:
            self._pos += 1
        return tok

    def _check(self, *types: TokenType) -> bool:
        return self._current().type in types

    def _match(self, *types: TokenType) -> Token | None:
        if self._check(*types):
            return self._advance()
        return None

    def _expect(self, token_type: TokenType, what: str) -> Token:
        if self._check(token_type):
            return self._advance()
        raise self._error(f"expected {what}")

    def _error(self, message: str) -> AliasMapSyntaxError:
        tok = self._current()
        found = "end of file" if tok.type is TokenType.EOF else repr(tok.value)
        return AliasMapSyntaxError(f"{message}, found {found}", tok.line, tok.col)

    # ------------------------------------------------------------------
    # Statements
    # ------------------------------------------------------------------

    def parse(self) -> Any:
        """Return the value of the top-level ``return`` statement.

        Raises
        ------
        AliasMapSyntaxError
            If the file has no ``return`` statement or uses syntax
            outside the supported subset.
        """
        self._expect(TokenType.OPEN_TAG, "'<?php'")
        while not self._check(TokenType.RETURN):
            if self._match(TokenType.DECLARE):
                self._parse_declare()
            elif self._match(TokenType.NAMESPACE):
                self._namespace = self._expect(TokenType.NAME, "namespace name").value.lstrip("\\")
                self._expect(TokenType.SEMICOLON, "';'")
            elif self._match(TokenType.USE):
                self._parse_use()
            elif self._match(TokenType.SEMICOLON):
                continue
            else:
                raise self._error("expected 'return' statement")
        self._advance()
        value = self._parse_expression()
        if not self._match(TokenType.SEMICOLON):
            # The close tag implies a semicolon.
            self._expect(TokenType.CLOSE_TAG, "';'")
        return value

    def _parse_declare(self) -> None:
        self._expect(TokenType.LPAREN, "'('")
        while not self._match(TokenType.RPAREN):
            if self._check(TokenType.EOF):
                raise self._error("expected ')'")
            self._advance()
        self._expect(TokenType.SEMICOLON, "';'")

    def _parse_use(self) -> None:
        while True:
            name = self._expect(TokenType.NAME, "imported name").value.lstrip("\\")
            alias = name.rsplit("\\", 1)[-1]
            if self._match(TokenType.AS):
                alias = self._expect(TokenType.NAME, "import alias").value
            self._imports[alias.lower()] = name
            if not self._match(TokenType.COMMA):
                break
        self._expect(TokenType.SEMICOLON, "';'")

    # ------------------------------------------------------------------
    # Expressions
    # ------------------------------------------------------------------

    def _parse_expression(self) -> Any:
        tok = self._current()
        if self._match(TokenType.ARRAY):
            self._expect(TokenType.LPAREN, "'('")
            return self._parse_array_items(TokenType.RPAREN)
        if self._match(TokenType.LBRACKET):
            return self._parse_array_items(TokenType.RBRACKET)
        if self._match(TokenType.STRING):
            return tok.value
        if self._match(TokenType.TRUE):
            return True
        if self._match(TokenType.FALSE):
            return False
        if self._match(TokenType.NULL):
            return None
        if self._match(TokenType.MINUS):
            number = self._current()
            if not self._match(TokenType.INTEGER, TokenType.FLOAT):
                raise self._error("expected number after '-'")
            return _parse_number(number.value, negative=True)
        if self._match(TokenType.INTEGER, TokenType.FLOAT):
            return _parse_number(tok.value, negative=False)
        if self._match(TokenType.NAME):
            self._expect(TokenType.DOUBLE_COLON, "'::class' after class name")
            self._expect(TokenType.CLASS, "'class' after '::'")
            return self._resolve_class_name(tok.value)
        raise self._error("expected a value")

    def _parse_array_items(self, closing: TokenType) -> dict[int | str, Any]:
        items: dict[int | str, Any] = {}
        next_index = 0
        while not self._match(closing):
            first = self._parse_expression()
            if self._match(TokenType.DOUBLE_ARROW):
                try:
                    key = _normalize_key(first)
                except TypeError as exc:
                    raise self._error(str(exc)) from exc
                value = self._parse_expression()
            else:
                key, value = next_index, first
            items[key] = value
            if isinstance(key, int) and key >= next_index:
                next_index = key + 1
            if not self._match(TokenType.COMMA):
                self._expect(closing, "',' or end of array")
                break
        return items

    def _resolve_class_name(self, name: str) -> str:
        if name.startswith("\\"):
            return name[1:]
        if name.lower().startswith("namespace\\"):
            relative = name[len("namespace\\"):]
            return f"{self._namespace}\\{relative}" if self._namespace else relative
        head, _, rest = name.partition("\\")
        imported = self._imports.get(head.lower())
        if imported is not None:
            return f"{imported}\\{rest}" if rest else imported
        return f"{self._namespace}\\{name}" if self._namespace else name


def parse_return_value(source: str) -> Any:
    """Return the value a PHP data file's ``return`` statement evaluates to.

    Example
    -------
    ::

        parse_return_value("<?php return ['Tx_Old_Name' => 'New_Name'];")
        # {'Tx_Old_Name': 'New_Name'}
    """
    return Parser(tokenize(source)).parse()
