"""Shared test fixtures for class-alias-loader.

Fixtures defined here are available to all tests in the suite without
needing an explicit import.  ``composer_project`` lays out a minimal
Composer project (manifest, installed registry and dumped autoload
files) in a temporary directory.
"""
from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest

SUFFIX = "XYZ"

AUTOLOAD_PHP = f"""\
<?php

// autoload.php @generated by Composer

require_once __DIR__ . '/composer/autoload_real.php';

return ComposerAutoloaderInit{SUFFIX}::getLoader();
"""

CLASSMAP_PHP = """\
<?php

// autoload_classmap.php @generated by Composer

$vendorDir = dirname(__DIR__);
$baseDir = dirname($vendorDir);

return array(
    'Composer\\\\InstalledVersions' => $vendorDir . '/composer/InstalledVersions.php',
    'My\\\\Class' => $baseDir . '/src/My/Class.php',
);
"""


def php_alias_map(declarations: dict[str, str]) -> str:
    """Return a PHP alias-map file declaring *declarations*."""
    lines = ["<?php", "return ["]
    for alias, class_name in declarations.items():
        lines.append(f"    '{alias}' => \\{class_name}::class,")
    lines.append("];")
    return "\n".join(lines) + "\n"


class ComposerProject:
    """A Composer project on disk, as left behind by ``composer dump-autoload``."""

    def __init__(self, root: Path) -> None:
        self.root = root
        self.vendor = root / "vendor"
        self.composer_dir = self.vendor / "composer"
        self.composer_dir.mkdir(parents=True)
        self.entry_point = self.vendor / "autoload.php"
        self.class_map = self.composer_dir / "autoload_classmap.php"
        self.alias_map = self.composer_dir / "autoload_classaliasmap.php"
        self.initializer = self.composer_dir / "autoload_alias_loader_real.php"
        self._installed: list[dict[str, Any]] = []
        self.entry_point.write_text(AUTOLOAD_PHP, encoding="utf-8")
        self.class_map.write_text(CLASSMAP_PHP, encoding="utf-8")
        self.set_root()

    def set_root(self, extra: dict[str, Any] | None = None, config: dict[str, Any] | None = None) -> None:
        manifest: dict[str, Any] = {"name": "acme/site"}
        if extra is not None:
            manifest["extra"] = extra
        if config is not None:
            manifest["config"] = config
        (self.root / "composer.json").write_text(json.dumps(manifest), encoding="utf-8")

    def add_package(self, name: str, extra: dict[str, Any] | None = None, files: dict[str, str] | None = None) -> Path:
        """Install package *name* with the given ``extra`` block and files."""
        install_dir = self.vendor / name
        install_dir.mkdir(parents=True, exist_ok=True)
        for relative, content in (files or {}).items():
            target = install_dir / relative
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(content, encoding="utf-8")
        self._installed.append({"name": name, "install-path": f"../{name}", "extra": extra or {}})
        (self.composer_dir / "installed.json").write_text(
            json.dumps({"packages": self._installed}), encoding="utf-8"
        )
        return install_dir

    def add_root_file(self, relative: str, content: str) -> Path:
        target = self.root / relative
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(content, encoding="utf-8")
        return target

    def snapshot(self) -> dict[str, bytes]:
        return {path.name: path.read_bytes() for path in (self.entry_point, self.class_map)}


@pytest.fixture()
def composer_project(tmp_path: Path) -> ComposerProject:
    """Return an empty Composer project with dumped autoload files."""
    return ComposerProject(tmp_path)


@pytest.fixture()
def expected_version() -> str:
    """Return the current expected version string."""
    return "0.1.0"


@pytest.fixture()
def alias_map_source():
    """Return the ``php_alias_map`` helper."""
    return php_alias_map
