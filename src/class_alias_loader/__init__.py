"""class-alias-loader: class alias maps and case-insensitive loading for Composer autoloaders.

Public API
----------
The stable public surface is everything exported from this module.
Anything inside submodules not re-exported here is considered private
and may change without notice.

Example
-------
::

    import class_alias_loader

    # After `composer install` has written vendor/autoload.php
    rewritten = class_alias_loader.generate("/path/to/project")

    # Inspect the merged alias map without writing anything
    alias_map = class_alias_loader.collect("/path/to/project")
    alias_map.alias_to_class["tx_extbase_object_objectmanager"]

    class_alias_loader.__version__
    '0.1.0'
"""
from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

__version__: str = "0.1.0"

if TYPE_CHECKING:
    from class_alias_loader.merger import MergedAliasMap
    from class_alias_loader.reporter import Reporter


def generate(
    base_path: str | Path,
    optimize: bool = False,
    reporter: "Reporter | None" = None,
) -> bool:
    """Run the alias-loader pass for the Composer project at *base_path*.

    Parameters
    ----------
    base_path:
        Directory holding the project's ``composer.json``.
    optimize:
        Composer generated an optimized class map.
    reporter:
        Receives progress and warning messages.

    Returns
    -------
    bool
        ``True`` if ``vendor/autoload.php`` was rewritten.

    Raises
    ------
    class_alias_loader.errors.ClassAliasLoaderError
        On malformed configuration or an unexpected entry-point format.
    """
    from class_alias_loader.generator import generate_alias_map

    return generate_alias_map(Path(base_path), reporter=reporter, optimize=optimize)


def collect(base_path: str | Path, reporter: "Reporter | None" = None) -> "MergedAliasMap":
    """Return the merged alias map of the project at *base_path*.

    Nothing is written.
    """
    from class_alias_loader.generator import ClassAliasMapGenerator

    result, _ = ClassAliasMapGenerator(Path(base_path), reporter=reporter).collect()
    return result.alias_map


__all__ = [
    "__version__",
    "generate",
    "collect",
]
