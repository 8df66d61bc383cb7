"""Lower-case the keys of Composer's generated class map.

Composer writes ``vendor/composer/autoload_classmap.php`` with one entry
per line::

    return array(
        'Vendor\\Some\\ClassName' => $vendorDir . '/vendor/...',

Only the quoted key at the start of each entry line is folded; the
path on the right-hand side is left as is.  Folding is idempotent.
"""
from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Final

from class_alias_loader.errors import EntryPointRewriteError
from class_alias_loader.fsutil import atomic_write, read_text
from class_alias_loader.reporter import Reporter

logger = logging.getLogger(__name__)

CLASS_MAP_FILE = "autoload_classmap.php"

CLASS_MAP_KEY: Final[re.Pattern[str]] = re.compile(r"^[ \t]+'[^']*' => ", re.MULTILINE)


def fold_class_map_keys(content: str) -> str:
    """Return *content* with every class map key lower-cased."""
    return CLASS_MAP_KEY.sub(lambda match: match.group(0).lower(), content)


def rewrite_class_map_case_insensitive(target_dir: Path, optimized: bool, reporter: Reporter) -> Path:
    """Fold the keys of the class map in *target_dir* in place.

    Parameters
    ----------
    target_dir:
        The ``vendor/composer`` directory.
    optimized:
        Whether Composer generated an optimized/authoritative class map.
        Case-insensitive loading is only reliable when every class is
        listed in the class map, so a warning is reported otherwise.
    reporter:
        Receives progress and warning messages.

    Raises
    ------
    EntryPointRewriteError
        If the class map file does not exist.
    """
    reporter.write("Re-writing class map to support case insensitive class loading")
    if not optimized:
        reporter.write_error(
            "Case insensitive class loading only works reliably if you use the "
            "optimize class loading feature of composer"
        )

    path = target_dir / CLASS_MAP_FILE
    content = read_text(path)
    if content is None:
        raise EntryPointRewriteError(path, "class map file not found; run composer dump-autoload first")

    folded = fold_class_map_keys(content)
    if folded != content:
        atomic_write(path, folded)
    logger.debug("Folded class map keys in %s", path)
    return path
