from __future__ import annotations

from class_alias_loader.config import AliasLoaderConfig


def should_rewrite(main_config: AliasLoaderConfig, found_any: bool) -> bool:
    """Return True if the autoloader has to be augmented.

    Nothing is rewritten when no package declares aliases, class loading
    stays case-sensitive (Composer's own behaviour) and the root package
    does not force the alias loader on.
    """
    return (
        main_config.always_add_alias_loader
        or found_any
        or not main_config.autoload_case_sensitivity
    )
