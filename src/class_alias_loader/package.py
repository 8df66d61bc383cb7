"""Package descriptors read from Composer's manifest and registry.

The root package comes from ``composer.json``; installed packages come
from ``vendor/composer/installed.json``.  Both Composer 1 (a bare list)
and Composer 2 (``{"packages": [...]}``) registry layouts are accepted.
"""
from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from class_alias_loader.errors import ManifestError

logger = logging.getLogger(__name__)

ROOT_PACKAGE_NAME = "__root__"
MANIFEST_FILE = "composer.json"
INSTALLED_FILE = "installed.json"


@dataclass(frozen=True)
class PackageDescriptor:
    """A package as seen by the alias-loader pipeline.

    Parameters
    ----------
    name:
        The package name, e.g. ``"typo3/cms-core"``.
    install_path:
        Absolute install path, or ``""`` for the root package, whose
        files live directly under the project base path.
    extra:
        The manifest's ``extra`` block.
    """

    name: str
    install_path: str = ""
    extra: Mapping[str, Any] = field(default_factory=dict)

    @property
    def is_root(self) -> bool:
        return not self.install_path


def _read_json(path: Path) -> Any:
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise ManifestError(path, f"invalid JSON ({exc})") from exc
    except OSError as exc:
        raise ManifestError(path, str(exc)) from exc


def _extra_of(data: Mapping[str, Any], path: Path) -> Mapping[str, Any]:
    extra = data.get("extra") or {}
    if not isinstance(extra, Mapping):
        raise ManifestError(path, f'"extra" of package {data.get("name")!r} must be an object')
    return extra


def load_manifest(base_path: Path) -> dict[str, Any]:
    """Return the decoded ``composer.json`` of the project, or ``{}``."""
    path = base_path / MANIFEST_FILE
    if not path.is_file():
        logger.debug("No %s found in %s", MANIFEST_FILE, base_path)
        return {}
    data = _read_json(path)
    if not isinstance(data, dict):
        raise ManifestError(path, "top-level value must be an object")
    return data


def load_root_package(base_path: Path, manifest: Mapping[str, Any] | None = None) -> PackageDescriptor:
    """Build the root ``PackageDescriptor`` from the project manifest."""
    if manifest is None:
        manifest = load_manifest(base_path)
    return PackageDescriptor(
        name=str(manifest.get("name") or ROOT_PACKAGE_NAME),
        install_path="",
        extra=_extra_of(manifest, base_path / MANIFEST_FILE),
    )


def load_installed_packages(vendor_dir: Path) -> list[PackageDescriptor]:
    """Read the installed-package registry in registry order.

    A package without an ``install-path`` entry (Composer 1) is assumed
    to live in ``<vendor>/<name>``.
    """
    composer_dir = vendor_dir / "composer"
    path = composer_dir / INSTALLED_FILE
    if not path.is_file():
        logger.debug("No installed package registry at %s", path)
        return []

    data = _read_json(path)
    if isinstance(data, Mapping):
        entries = data.get("packages", [])
    else:
        entries = data
    if not isinstance(entries, list):
        raise ManifestError(path, "expected a list of packages")

    packages: list[PackageDescriptor] = []
    for entry in entries:
        if not isinstance(entry, Mapping) or not entry.get("name"):
            raise ManifestError(path, f"malformed package entry {entry!r}")
        name = str(entry["name"])
        if entry.get("install-path"):
            install_path = (composer_dir / str(entry["install-path"])).resolve()
        else:
            install_path = (vendor_dir / name).resolve()
        packages.append(
            PackageDescriptor(name=name, install_path=str(install_path), extra=_extra_of(entry, path))
        )
    return packages


def build_package_map(
    base_path: Path,
    vendor_dir: Path,
    manifest: Mapping[str, Any] | None = None,
) -> list[PackageDescriptor]:
    """Return the root package followed by all installed packages."""
    root = load_root_package(base_path, manifest)
    return [root, *load_installed_packages(vendor_dir)]
