"""Splice the alias loader into Composer's ``vendor/autoload.php``.

Composer's entry point ends with::

    return ComposerAutoloaderInit<suffix>::getLoader();

That statement is replaced by a ``require_once`` of a generated
initializer (``vendor/composer/autoload_alias_loader_real.php``) and a
``return`` that passes Composer's loader through it::

    return ClassAliasLoaderInit<suffix>::initializeClassAliasLoader(ComposerAutoloaderInit<suffix>::getLoader());

The initializer wraps Composer's loader at most once per PHP process
(a static guard on the generated class) and publishes the alias loader
through ``ClassAliasMap::setClassAliasLoader`` so other code can reach
it later.

All knowledge of Composer's output format lives in
``EntryPointRewriter`` so the patterns can be swapped when Composer
changes what it generates.
"""
from __future__ import annotations

import logging
import re
import uuid
from dataclasses import dataclass, field
from pathlib import Path

from class_alias_loader.errors import EntryPointRewriteError
from class_alias_loader.fsutil import atomic_write, read_text

logger = logging.getLogger(__name__)

GENERATOR_NAME = "typo3/class-alias-loader"
INITIALIZER_FILE = "autoload_alias_loader_real.php"
INITIALIZER_CLASS_PREFIX = "ClassAliasLoaderInit"
ENTRY_POINT_MARKER = f"// autoload.php @generated by {GENERATOR_NAME}"

_INITIALIZER_TEMPLATE = """\
<?php

// {file} @generated by {generator}

class {class_name} {{

    private static $loader;

    public static function initializeClassAliasLoader($composerClassLoader) {{
        if (null !== self::$loader) {{
            return self::$loader;
        }}
        self::$loader = $composerClassLoader;

        $classAliasMap = require __DIR__ . '/autoload_classaliasmap.php';
        $classAliasLoader = new TYPO3\\ClassAliasLoader\\ClassAliasLoader($composerClassLoader);
        $classAliasLoader->setAliasMap($classAliasMap);
        $classAliasLoader->setCaseSensitiveClassLoading({case_sensitive});
        $classAliasLoader->register({prepend});

        TYPO3\\ClassAliasLoader\\ClassAliasMap::setClassAliasLoader($classAliasLoader);

        return self::$loader;
    }}
}}
"""

_ENTRY_POINT_TAIL = """\


{marker}

require_once __DIR__ . '/composer/{file}';

return {class_name}::initializeClassAliasLoader({host_init});
"""


def _php_bool(value: bool) -> str:
    return "true" if value else "false"


def initializer_class_name(suffix: str) -> str:
    return f"{INITIALIZER_CLASS_PREFIX}{suffix}"


def render_initializer(suffix: str, case_sensitive: bool, prepend: bool) -> str:
    """Return the PHP source of ``autoload_alias_loader_real.php``."""
    return _INITIALIZER_TEMPLATE.format(
        file=INITIALIZER_FILE,
        generator=GENERATOR_NAME,
        class_name=initializer_class_name(suffix),
        case_sensitive=_php_bool(case_sensitive),
        prepend=_php_bool(prepend),
    )


@dataclass(frozen=True)
class EntryPointRewriter:
    """Pattern-based rewriting of Composer's ``autoload.php``.

    Parameters
    ----------
    host_return:
        Matches the statement returning Composer's own initializer.
    host_suffix:
        Captures the suffix of Composer's initializer class name.
    spliced_return:
        Matches a return statement written by ``splice``; group 1 is the
        wrapped Composer initializer expression.
    """

    host_return: re.Pattern[str] = field(default=re.compile(r"return ComposerAutoloaderInit[^;]*;"))
    host_suffix: re.Pattern[str] = field(default=re.compile(r"ComposerAutoloaderInit([^:\s]+)::"))
    spliced_return: re.Pattern[str] = field(
        default=re.compile(
            rf"return {INITIALIZER_CLASS_PREFIX}[^:\s]+::initializeClassAliasLoader\((ComposerAutoloaderInit[^;]*)\);"
        )
    )

    def find_suffix(self, content: str) -> str | None:
        match = self.host_suffix.search(content)
        return match.group(1) if match else None

    def is_spliced(self, content: str) -> bool:
        return ENTRY_POINT_MARKER in content

    def unsplice(self, content: str) -> str:
        """Restore the entry point as Composer wrote it.

        Content that was never spliced is returned unchanged.

        Raises
        ------
        ValueError
            If the generated block is present but its return statement
            is not.
        """
        if not self.is_spliced(content):
            return content
        head, _, tail = content.partition(ENTRY_POINT_MARKER)
        match = self.spliced_return.search(tail)
        if match is None:
            raise ValueError("generated alias loader block has no return statement")
        return f"{head.rstrip()}\n\nreturn {match.group(1)};\n"

    def check(self, content: str) -> None:
        """Raise ``ValueError`` if *content* cannot be spliced."""
        if self.host_return.search(self.unsplice(content)) is None:
            raise ValueError("expected 'return ComposerAutoloaderInit...;' statement not found")

    def splice(self, content: str, suffix: str) -> str:
        """Return *content* routed through the initializer named by *suffix*.

        Splicing already spliced content replaces the previous wrapper,
        so the result never wraps the loader twice.

        Raises
        ------
        ValueError
            If Composer's return statement cannot be found.
        """
        content = self.unsplice(content)
        match = self.host_return.search(content)
        if match is None:
            raise ValueError("expected 'return ComposerAutoloaderInit...;' statement not found")
        statement = match.group(0)
        host_init = statement[len("return "):-1]
        remaining = content[:match.start()] + content[match.end():]
        return remaining + _ENTRY_POINT_TAIL.format(
            marker=ENTRY_POINT_MARKER,
            file=INITIALIZER_FILE,
            class_name=initializer_class_name(suffix),
            host_init=host_init,
        )


class BootstrapSplicer:
    """Install the generated initializer into a Composer entry point.

    Parameters
    ----------
    entry_point:
        Path of ``vendor/autoload.php``.
    rewriter:
        The pattern set used to read and rewrite the entry point.
    """

    def __init__(self, entry_point: Path, rewriter: EntryPointRewriter | None = None) -> None:
        self.entry_point = entry_point
        self.rewriter = rewriter or EntryPointRewriter()

    @property
    def initializer_path(self) -> Path:
        return self.entry_point.parent / "composer" / INITIALIZER_FILE

    def _read(self) -> str:
        content = read_text(self.entry_point)
        if content is None:
            raise EntryPointRewriteError(self.entry_point, "file not found; run composer dump-autoload first")
        return content

    def check(self) -> None:
        """Fail early if the entry point cannot be spliced.

        Raises
        ------
        EntryPointRewriteError
            If the file is missing or has an unexpected format.
        """
        try:
            self.rewriter.check(self._read())
        except ValueError as exc:
            raise EntryPointRewriteError(self.entry_point, str(exc)) from exc

    def resolve_suffix(self, configured_suffix: str | None = None) -> str:
        """Return the suffix for the generated initializer class.

        Without a configured suffix, the suffix of Composer's own
        initializer in the current entry point is reused.  A random one
        is generated when neither is available.
        """
        suffix = None
        if not configured_suffix:
            try:
                content = read_text(self.entry_point)
            except OSError:
                content = None
            if content is not None:
                suffix = self.rewriter.find_suffix(content)
        if not suffix:
            suffix = configured_suffix or uuid.uuid4().hex
        logger.debug("Using autoloader suffix %s", suffix)
        return suffix

    def write_initializer(self, suffix: str, case_sensitive: bool, prepend: bool) -> Path:
        path = self.initializer_path
        atomic_write(path, render_initializer(suffix, case_sensitive, prepend))
        return path

    def splice(self, suffix: str) -> None:
        """Rewrite the entry point to return through the initializer.

        Raises
        ------
        EntryPointRewriteError
            If Composer's return statement is not found.  The file is
            left untouched in that case.
        """
        try:
            spliced = self.rewriter.splice(self._read(), suffix)
        except ValueError as exc:
            raise EntryPointRewriteError(self.entry_point, str(exc)) from exc
        atomic_write(self.entry_point, spliced)
        logger.debug("Spliced alias loader into %s", self.entry_point)


def splice_entry_point(entry_point: Path, suffix: str, case_sensitive: bool, prepend_loader: bool) -> None:
    """Write the initializer and splice it into *entry_point*.

    The entry point is validated before anything is written.
    """
    splicer = BootstrapSplicer(entry_point)
    splicer.check()
    splicer.write_initializer(suffix, case_sensitive, prepend_loader)
    splicer.splice(suffix)
