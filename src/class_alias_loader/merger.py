"""Merge the class alias maps of all packages into one lookup structure.

Packages are visited in package-map order (root package first, then
the installed packages in registry order).  Alias names are folded to
lower case.  When two declarations use the same folded alias, the one
visited last wins without any warning; the canonical class that lost
keeps its reverse entry.
"""
from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from pathlib import Path, PurePosixPath

from class_alias_loader.config import ConfigResolver
from class_alias_loader.maploader import load_alias_map_file
from class_alias_loader.package import PackageDescriptor
from class_alias_loader.reporter import Reporter

logger = logging.getLogger(__name__)


@dataclass
class MergedAliasMap:
    """Bidirectional alias lookup tables.

    Parameters
    ----------
    alias_to_class:
        Folded alias name to canonical class name.
    class_to_aliases:
        Canonical class name to the set of folded aliases resolving to
        it, stored as ``{alias: alias}`` (the shape the PHP runtime
        loader reads).
    """

    alias_to_class: dict[str, str] = field(default_factory=dict)
    class_to_aliases: dict[str, dict[str, str]] = field(default_factory=dict)

    def add(self, alias: str, class_name: str) -> None:
        folded = alias.lower()
        self.alias_to_class[folded] = class_name
        self.class_to_aliases.setdefault(class_name, {})[folded] = folded

    def aliases_of(self, class_name: str) -> set[str]:
        return set(self.class_to_aliases.get(class_name, {}))

    def __len__(self) -> int:
        return len(self.alias_to_class)

    def to_export(self) -> dict[str, dict]:
        """Return the structure written to the generated map file."""
        return {
            "aliasToClassNameMapping": dict(self.alias_to_class),
            "classNameToAliasMapping": {
                class_name: dict(aliases) for class_name, aliases in self.class_to_aliases.items()
            },
        }


@dataclass(frozen=True)
class MergeResult:
    """Outcome of ``AliasMapMerger.merge``.

    ``found_any`` is True only if at least one loaded map file declared
    at least one alias.
    """

    alias_map: MergedAliasMap
    found_any: bool


def _normalize_map_path(map_file: str) -> PurePosixPath:
    return PurePosixPath(map_file.replace("\\", "/").lstrip("/"))


class AliasMapMerger:
    """Collect and merge the alias maps declared by a list of packages.

    Parameters
    ----------
    resolver:
        Resolves each package's alias-loader configuration.
    reporter:
        Receives a warning for every configured map file that is missing.
    """

    def __init__(self, resolver: ConfigResolver, reporter: Reporter) -> None:
        self._resolver = resolver
        self._reporter = reporter

    def merge(self, packages: Iterable[PackageDescriptor], base_path: Path) -> MergeResult:
        """Merge the alias maps of *packages*.

        Raises
        ------
        ConfigurationError
            If a package's ``class-alias-maps`` is not a list or one of
            its map files does not return a mapping.
        """
        alias_map = MergedAliasMap()
        found_any = False

        for package in packages:
            config = self._resolver.resolve(package)
            root = base_path if package.is_root else Path(package.install_path)
            for map_file in config.class_alias_maps:
                path = root / _normalize_map_path(map_file)
                if not path.is_file():
                    self._reporter.write_error(
                        f'The class alias map file "{map_file}" configured in package '
                        f'"{package.name}" was not found!'
                    )
                    continue
                declarations = load_alias_map_file(path)
                if declarations:
                    found_any = True
                for alias, class_name in declarations.items():
                    alias_map.add(alias, class_name)
                logger.debug("Merged %d alias(es) of %s from %s", len(declarations), package.name, path)

        return MergeResult(alias_map=alias_map, found_any=found_any)
