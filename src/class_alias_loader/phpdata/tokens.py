"""Token definitions for the PHP data-file subset understood by ``phpdata``."""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto


class TokenType(Enum):
    """All token types of the PHP data-file subset."""

    # -----------------------------------------------------------------
    # Tags
    # -----------------------------------------------------------------
    OPEN_TAG = auto()
    CLOSE_TAG = auto()

    # -----------------------------------------------------------------
    # Keywords (case-insensitive in PHP)
    # -----------------------------------------------------------------
    RETURN = auto()
    ARRAY = auto()
    CLASS = auto()
    TRUE = auto()
    FALSE = auto()
    NULL = auto()
    DECLARE = auto()
    NAMESPACE = auto()
    USE = auto()
    AS = auto()

    # -----------------------------------------------------------------
    # Literals and names
    # -----------------------------------------------------------------
    NAME = auto()
    STRING = auto()
    INTEGER = auto()
    FLOAT = auto()

    # -----------------------------------------------------------------
    # Punctuation
    # -----------------------------------------------------------------
    LBRACKET = auto()
    RBRACKET = auto()
    LPAREN = auto()
    RPAREN = auto()
    DOUBLE_ARROW = auto()
    DOUBLE_COLON = auto()
    COMMA = auto()
    SEMICOLON = auto()
    ASSIGN = auto()
    MINUS = auto()

    EOF = auto()


KEYWORDS: dict[str, TokenType] = {
    "return": TokenType.RETURN,
    "array": TokenType.ARRAY,
    "class": TokenType.CLASS,
    "true": TokenType.TRUE,
    "false": TokenType.FALSE,
    "null": TokenType.NULL,
    "declare": TokenType.DECLARE,
    "namespace": TokenType.NAMESPACE,
    "use": TokenType.USE,
    "as": TokenType.AS,
}


@dataclass(frozen=True)
class Token:
    """A single scanned token with its 1-based source position."""

    type: TokenType
    value: str
    line: int
    col: int

    def __repr__(self) -> str:
        return f"Token({self.type.name}, {self.value!r}, {self.line}:{self.col})"
