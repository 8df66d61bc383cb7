"""Per-package alias-loader configuration.

A package configures the alias loader in the ``extra`` block of its
``composer.json``::

    "extra": {
        "typo3/class-alias-loader": {
            "class-alias-maps": ["Migrations/Code/ClassAliasMap.php"],
            "always-add-alias-loader": true,
            "autoload-case-sensitivity": false
        }
    }

Two older layouts are still understood and reported as deprecated:
the same block under ``helhum/class-alias-loader`` (the name the
project was first published under), and the flat top-level keys
``class-alias-maps`` and ``autoload-case-sensitivity``.
"""
from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from class_alias_loader.errors import ConfigurationError
from class_alias_loader.package import PackageDescriptor
from class_alias_loader.reporter import Reporter

logger = logging.getLogger(__name__)

CONFIG_KEY = "typo3/class-alias-loader"
LEGACY_CONFIG_KEY = "helhum/class-alias-loader"

CLASS_ALIAS_MAPS = "class-alias-maps"
ALWAYS_ADD_ALIAS_LOADER = "always-add-alias-loader"
AUTOLOAD_CASE_SENSITIVITY = "autoload-case-sensitivity"

LEGACY_FLAT_KEYS = (CLASS_ALIAS_MAPS, AUTOLOAD_CASE_SENSITIVITY)


@dataclass(frozen=True)
class AliasLoaderConfig:
    """Normalized alias-loader configuration of one package.

    Parameters
    ----------
    class_alias_maps:
        Alias-map files, relative to the package install path.
    always_add_alias_loader:
        Rewrite the autoloader even if no package declares aliases.
    autoload_case_sensitivity:
        Load classes case-sensitively.  Only meaningful for the root
        package.
    """

    class_alias_maps: tuple[str, ...] = ()
    always_add_alias_loader: bool = False
    autoload_case_sensitivity: bool = True


def _as_bool(value: Any, default: bool) -> bool:
    # An unset or null value keeps the default (PHP isset).
    if value is None:
        return default
    # PHP cast semantics: "0" and "" are false, every other string is true.
    if isinstance(value, str):
        return value not in ("", "0")
    return bool(value)


class ConfigResolver:
    """Derive ``AliasLoaderConfig`` objects from package manifests.

    One resolver is used per pipeline run.  Results are cached by
    package name, so each package is resolved (and its deprecation
    notices reported) at most once per run.

    Parameters
    ----------
    reporter:
        Receives deprecation notices.
    """

    def __init__(self, reporter: Reporter) -> None:
        self._reporter = reporter
        self._cache: dict[str, AliasLoaderConfig] = {}

    def resolve(self, package: PackageDescriptor) -> AliasLoaderConfig:
        """Return the alias-loader configuration of *package*.

        Raises
        ------
        ConfigurationError
            If ``class-alias-maps`` is set to something other than a list.
        """
        if package.name in self._cache:
            return self._cache[package.name]

        section = self._canonical_section(package)
        config = AliasLoaderConfig(
            class_alias_maps=self._alias_map_files(section.get(CLASS_ALIAS_MAPS), package),
            always_add_alias_loader=_as_bool(section.get(ALWAYS_ADD_ALIAS_LOADER), False),
            autoload_case_sensitivity=_as_bool(section.get(AUTOLOAD_CASE_SENSITIVITY), True),
        )
        logger.debug("Resolved alias loader config of %s: %s", package.name, config)
        self._cache[package.name] = config
        return config

    def _canonical_section(self, package: PackageDescriptor) -> Mapping[str, Any]:
        extra = package.extra
        section = extra.get(CONFIG_KEY)
        if section is not None:
            return section if isinstance(section, Mapping) else {}

        legacy = extra.get(LEGACY_CONFIG_KEY)
        if legacy is not None:
            self._reporter.write(
                f'The package "{package.name}" uses "{LEGACY_CONFIG_KEY}" section to define class alias maps, '
                f'which is deprecated. Please use "{CONFIG_KEY}" instead!'
            )
            return legacy if isinstance(legacy, Mapping) else {}

        section = {}
        for key in LEGACY_FLAT_KEYS:
            if extra.get(key) is None:
                continue
            section[key] = extra[key]
            self._reporter.write(
                f'The package "{package.name}" uses "{key}" section on top level, which is deprecated. '
                f'Please move this config below the top level key "{CONFIG_KEY}" instead!'
            )
        return section

    @staticmethod
    def _alias_map_files(value: Any, package: PackageDescriptor) -> tuple[str, ...]:
        if not value:
            return ()
        if not isinstance(value, list):
            raise ConfigurationError(
                f'"{CLASS_ALIAS_MAPS}" must be an array (package "{package.name}")'
            )
        return tuple(str(item) for item in value)
