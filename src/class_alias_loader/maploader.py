"""Load a single class alias map file.

``.php`` files are parsed with ``phpdata`` (never executed); ``.json``
and ``.yaml``/``.yml`` files are read with ``json`` and PyYAML.  Any
other extension is treated as PHP.
"""
from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml

from class_alias_loader.errors import AliasMapSyntaxError, ConfigurationError
from class_alias_loader.phpdata import parse_return_value

logger = logging.getLogger(__name__)

NOT_A_MAPPING = '"Class alias maps" must return an array'


def _decode(path: Path, text: str) -> Any:
    suffix = path.suffix.lower()
    if suffix == ".json":
        try:
            return json.loads(text)
        except json.JSONDecodeError as exc:
            raise ConfigurationError(f"Invalid JSON class alias map: {exc}", path) from exc
    if suffix in (".yml", ".yaml"):
        try:
            return yaml.safe_load(text)
        except yaml.YAMLError as exc:
            raise ConfigurationError(f"Invalid YAML class alias map: {exc}", path) from exc
    try:
        return parse_return_value(text)
    except AliasMapSyntaxError as exc:
        raise ConfigurationError(f"Invalid PHP class alias map: {exc}", path) from exc


def _as_php_string(value: Any, path: Path) -> str:
    # PHP string casting: null and false become "", true becomes "1".
    if value is None or value is False:
        return ""
    if value is True:
        return "1"
    if isinstance(value, (str, int, float)):
        return str(value)
    raise ConfigurationError(f"Class name must be a string, got {type(value).__name__}", path)


def load_alias_map_file(path: Path) -> dict[str, str]:
    """Return the ``alias => class`` declarations of the file at *path*.

    Raises
    ------
    ConfigurationError
        If the file cannot be decoded, its top-level value is not
        a mapping, or a class name is itself an array.
    """
    data = _decode(path, path.read_text(encoding="utf-8"))
    if data is None and path.suffix.lower() in (".yml", ".yaml"):
        # An empty YAML document is an empty map.
        data = {}
    if not isinstance(data, Mapping):
        raise ConfigurationError(NOT_A_MAPPING, path)
    logger.debug("Loaded %d alias declaration(s) from %s", len(data), path)
    return {
        _as_php_string(alias, path): _as_php_string(class_name, path)
        for alias, class_name in data.items()
    }
