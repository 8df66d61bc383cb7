"""Error types for class-alias-loader.

Every fatal condition raised by the pipeline derives from
``ClassAliasLoaderError`` so the CLI can report it uniformly and exit
non-zero.  Soft conditions (a configured alias-map file that does not
exist) are reported through the ``Reporter`` and never raised.
"""
from __future__ import annotations

from pathlib import Path


class ClassAliasLoaderError(Exception):
    """Base class for all fatal class-alias-loader errors."""


class ConfigurationError(ClassAliasLoaderError):
    """Raised when a package declares a malformed alias-loader configuration.

    Parameters
    ----------
    message:
        Human-readable description of the problem.
    path:
        The alias-map file involved, when the error stems from one.
    """

    def __init__(self, message: str, path: Path | None = None) -> None:
        self.path = path
        if path is not None:
            message = f"{message} (in {path})"
        super().__init__(message)


class ManifestError(ClassAliasLoaderError):
    """Raised when ``composer.json`` or ``installed.json`` cannot be read."""

    def __init__(self, path: Path, reason: str) -> None:
        super().__init__(f"Cannot read {path}: {reason}")
        self.path = path
        self.reason = reason


class AliasMapSyntaxError(ClassAliasLoaderError):
    """Raised when a PHP alias-map file cannot be parsed.

    Parameters
    ----------
    message:
        Human-readable description of the problem.
    line:
        1-based line number where the error occurred.
    col:
        1-based column number where the error occurred.
    """

    def __init__(self, message: str, line: int, col: int) -> None:
        super().__init__(f"Syntax error at {line}:{col}: {message}")
        self.syntax_message = message
        self.line = line
        self.col = col


class EntryPointRewriteError(ClassAliasLoaderError):
    """Raised when a generated Composer file does not have the expected shape."""

    def __init__(self, path: Path, reason: str) -> None:
        super().__init__(f"Cannot rewrite {path}: {reason}")
        self.path = path
        self.reason = reason
