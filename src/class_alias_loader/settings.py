"""Project-level settings taken from the ``config`` section of ``composer.json``.

Only the handful of Composer settings that influence the generated
autoloader are read.  ``COMPOSER_VENDOR_DIR`` and
``COMPOSER_CLASSMAP_AUTHORITATIVE`` override the manifest the same way
Composer itself honours them.
"""
from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any

DEFAULT_VENDOR_DIR = "vendor"

_FALSY = frozenset({"", "0", "false"})


def _env_flag(name: str) -> bool | None:
    value = os.environ.get(name)
    if value is None:
        return None
    # Composer casts like PHP, and also reads "false" as false.
    return value not in _FALSY


@dataclass(frozen=True)
class ComposerSettings:
    """Autoloader-related Composer settings.

    Parameters
    ----------
    vendor_dir:
        Vendor directory, relative to the project base path or absolute.
    autoloader_suffix:
        Fixed suffix for generated class names; ``None`` lets Composer
        (and this tool) pick one.
    prepend_autoloader:
        Whether the alias loader is registered in front of other loaders.
    optimize_autoloader:
        Composer's ``optimize-autoloader`` flag.
    classmap_authoritative:
        Composer's ``classmap-authoritative`` flag.
    """

    vendor_dir: str = DEFAULT_VENDOR_DIR
    autoloader_suffix: str | None = None
    prepend_autoloader: bool = True
    optimize_autoloader: bool = False
    classmap_authoritative: bool = False

    @classmethod
    def from_manifest(cls, manifest: Mapping[str, Any]) -> "ComposerSettings":
        config = manifest.get("config") or {}
        if not isinstance(config, Mapping):
            config = {}

        vendor_dir = os.environ.get("COMPOSER_VENDOR_DIR") or config.get("vendor-dir") or DEFAULT_VENDOR_DIR
        authoritative = _env_flag("COMPOSER_CLASSMAP_AUTHORITATIVE")
        if authoritative is None:
            authoritative = bool(config.get("classmap-authoritative", False))

        suffix = config.get("autoloader-suffix")
        return cls(
            vendor_dir=str(vendor_dir),
            autoloader_suffix=str(suffix) if suffix else None,
            # Only an explicit ``false`` disables prepending.
            prepend_autoloader=config.get("prepend-autoloader") is not False,
            optimize_autoloader=bool(config.get("optimize-autoloader", False)),
            classmap_authoritative=authoritative,
        )

    def vendor_path(self, base_path: Path) -> Path:
        return (base_path / self.vendor_dir).resolve()

    def optimized(self, optimize_flag: bool = False) -> bool:
        """Return True if a fully pre-computed class map is in use."""
        return optimize_flag or self.optimize_autoloader or self.classmap_authoritative
