"""Read and write the PHP data files used by Composer's autoloader.

Exports the lexer, the ``return``-value parser and the
``var_export``-style exporter.
"""
from __future__ import annotations

from class_alias_loader.phpdata.exporter import export, quote
from class_alias_loader.phpdata.lexer import Lexer, tokenize
from class_alias_loader.phpdata.parser import Parser, parse_return_value

__all__ = [
    "Lexer",
    "Parser",
    "tokenize",
    "parse_return_value",
    "export",
    "quote",
]
