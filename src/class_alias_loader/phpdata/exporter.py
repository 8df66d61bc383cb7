"""Render Python data as PHP source, matching PHP's ``var_export`` layout.

The generated alias map must be loadable with a plain ``require``; the
output of ``export`` is a PHP expression that evaluates to the same
structure::

    array (
      'aliasToClassNameMapping' =>
      array (
        'tx_old_name' => 'New\\Name',
      ),
    )

Output is deterministic: entries appear in insertion order.
"""
from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any


def quote(value: str) -> str:
    """Return *value* as a single-quoted PHP string literal."""
    escaped = value.replace("\\", "\\\\").replace("'", "\\'")
    return f"'{escaped}'"


def _scalar(value: Any) -> str:
    if value is None:
        return "NULL"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        text = repr(value)
        return text if ("." in text or "e" in text or "n" in text) else f"{text}.0"
    if isinstance(value, str):
        return quote(value)
    raise TypeError(f"Cannot export value of type {type(value).__name__} to PHP")


def _key(key: Any) -> str:
    if isinstance(key, bool) or not isinstance(key, (int, str)):
        raise TypeError(f"Illegal PHP array key {key!r}")
    return str(key) if isinstance(key, int) else quote(key)


def _export(value: Any, indent: str) -> str:
    if isinstance(value, Mapping):
        items = value.items()
    elif isinstance(value, Sequence) and not isinstance(value, str):
        items = enumerate(value)
    else:
        return _scalar(value)

    lines = ["array ("]
    for key, item in items:
        if isinstance(item, (Mapping, Sequence)) and not isinstance(item, str):
            lines.append(f"{indent}  {_key(key)} => ")
            lines.append(f"{indent}  {_export(item, indent + '  ')},")
        else:
            lines.append(f"{indent}  {_key(key)} => {_scalar(item)},")
    lines.append(f"{indent})")
    return "\n".join(lines)


def export(value: Any) -> str:
    """Return PHP source for *value*.

    Mappings and non-string sequences become PHP arrays; ``str``,
    ``int``, ``float``, ``bool`` and ``None`` become scalars.

    Raises
    ------
    TypeError
        For values with no PHP equivalent.
    """
    return _export(value, "")
