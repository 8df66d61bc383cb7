"""Write the merged alias map as ``vendor/composer/autoload_classaliasmap.php``."""
from __future__ import annotations

import logging
from pathlib import Path

from class_alias_loader.fsutil import atomic_write
from class_alias_loader.merger import MergedAliasMap
from class_alias_loader.phpdata import export

logger = logging.getLogger(__name__)

ALIAS_MAP_FILE = "autoload_classaliasmap.php"


def render_alias_map(alias_map: MergedAliasMap) -> str:
    """Return the PHP source of the generated alias map file."""
    return "<?php\nreturn " + export(alias_map.to_export()) + ";"


def emit_alias_map(alias_map: MergedAliasMap, target_dir: Path) -> Path:
    """Write *alias_map* into *target_dir* and return the written path."""
    path = target_dir / ALIAS_MAP_FILE
    atomic_write(path, render_alias_map(alias_map))
    logger.debug("Wrote %d alias(es) to %s", len(alias_map), path)
    return path
