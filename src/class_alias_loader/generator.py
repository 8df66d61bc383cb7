"""Run the complete alias-loader pass over a Composer project.

``ClassAliasMapGenerator`` is meant to run right after Composer has
written its autoload files.  It merges the alias maps of all packages
and, unless the project does not use the alias loader at all, writes
the alias map, the initializer and (for case-insensitive loading) the
folded class map, then splices the initializer into
``vendor/autoload.php``.
"""
from __future__ import annotations

import logging
from pathlib import Path

from class_alias_loader.bootstrap import BootstrapSplicer
from class_alias_loader.casefold import CLASS_MAP_FILE, rewrite_class_map_case_insensitive
from class_alias_loader.config import AliasLoaderConfig, ConfigResolver
from class_alias_loader.decision import should_rewrite
from class_alias_loader.emitter import emit_alias_map
from class_alias_loader.errors import EntryPointRewriteError
from class_alias_loader.fsutil import ensure_dir
from class_alias_loader.merger import AliasMapMerger, MergeResult
from class_alias_loader.package import build_package_map, load_manifest
from class_alias_loader.reporter import BufferedReporter, Reporter
from class_alias_loader.settings import ComposerSettings

logger = logging.getLogger(__name__)


class ClassAliasMapGenerator:
    """Alias-loader pass for the Composer project at *base_path*.

    Parameters
    ----------
    base_path:
        Project root, the directory holding ``composer.json``.
    settings:
        Composer settings; read from ``composer.json`` when omitted.
    reporter:
        Receives user-facing messages; a ``BufferedReporter`` is used
        when omitted.
    optimize:
        Composer was run with ``--optimize-autoloader`` / ``-o``.
    """

    def __init__(
        self,
        base_path: Path,
        settings: ComposerSettings | None = None,
        reporter: Reporter | None = None,
        optimize: bool = False,
    ) -> None:
        self.base_path = Path(base_path).resolve()
        self._manifest = load_manifest(self.base_path)
        self.settings = settings or ComposerSettings.from_manifest(self._manifest)
        self.reporter = reporter or BufferedReporter()
        self.optimize = optimize
        self._resolver = ConfigResolver(self.reporter)

    @property
    def vendor_path(self) -> Path:
        return self.settings.vendor_path(self.base_path)

    @property
    def target_dir(self) -> Path:
        return self.vendor_path / "composer"

    @property
    def entry_point(self) -> Path:
        return self.vendor_path / "autoload.php"

    def collect(self) -> tuple[MergeResult, AliasLoaderConfig]:
        """Merge all alias maps and resolve the root package configuration.

        Nothing is written.
        """
        packages = build_package_map(self.base_path, self.vendor_path, self._manifest)
        result = AliasMapMerger(self._resolver, self.reporter).merge(packages, self.base_path)
        main_config = self._resolver.resolve(packages[0])
        return result, main_config

    def generate(self) -> bool:
        """Run the pass.

        Returns
        -------
        bool
            ``True`` if the autoloader was rewritten, ``False`` if the
            project does not need the alias loader.

        Raises
        ------
        ClassAliasLoaderError
            On malformed configuration or an unexpected entry-point
            format.  The entry point is validated before any file is
            written.
        """
        ensure_dir(self.vendor_path)
        ensure_dir(self.target_dir)

        result, main_config = self.collect()
        if not should_rewrite(main_config, result.found_any):
            logger.debug("No class alias maps found and case sensitive loading active; nothing to do")
            return False

        splicer = BootstrapSplicer(self.entry_point)
        splicer.check()
        case_sensitive = main_config.autoload_case_sensitivity
        class_map = self.target_dir / CLASS_MAP_FILE
        if not case_sensitive and not class_map.is_file():
            raise EntryPointRewriteError(class_map, "class map file not found; run composer dump-autoload first")

        self.reporter.write(
            f"Generating {'' if result.found_any else 'empty '}class alias map file"
        )
        emit_alias_map(result.alias_map, self.target_dir)

        suffix = splicer.resolve_suffix(self.settings.autoloader_suffix)
        splicer.write_initializer(suffix, case_sensitive, self.settings.prepend_autoloader)

        if not case_sensitive:
            rewrite_class_map_case_insensitive(
                self.target_dir, self.settings.optimized(self.optimize), self.reporter
            )

        self.reporter.write("Inserting class alias loader into main autoload.php file")
        splicer.splice(suffix)
        return True


def generate_alias_map(base_path: Path, reporter: Reporter | None = None, optimize: bool = False) -> bool:
    """Run the alias-loader pass for the project at *base_path*."""
    return ClassAliasMapGenerator(base_path, reporter=reporter, optimize=optimize).generate()
