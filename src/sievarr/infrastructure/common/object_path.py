"""Dotted-path access into nested dict/list payloads (JSON responses)."""

from __future__ import annotations

import re
from collections.abc import Mapping, MutableMapping, Sequence
from typing import Any

_PATH_TOKEN_RE = re.compile(r"[^.\[\]]+")


def split_path(path: str) -> list[str]:
    """``"data.items[0].name"`` → ``["data", "items", "0", "name"]``."""
    return _PATH_TOKEN_RE.findall(path)


def get_path(obj: Any, path: str, default: Any = None) -> Any:
    """Resolve *path* against *obj*, returning *default* when any step is missing.

    A mapping key equal to the full *path* wins over path splitting, so
    keys that contain dots stay addressable.
    """
    if isinstance(obj, Mapping) and path in obj:
        return obj[path]

    current = obj
    for key in split_path(path):
        if isinstance(current, Mapping):
            if key not in current:
                return default
            current = current[key]
        elif isinstance(current, Sequence) and not isinstance(current, (str, bytes)):
            try:
                current = current[int(key)]
            except (ValueError, IndexError):
                return default
        else:
            return default
    return current


def set_path(obj: MutableMapping[str, Any], path: str, value: Any) -> None:
    """Assign *value* at *path*, creating intermediate dicts as needed."""
    keys = split_path(path)
    if not keys:
        raise ValueError("Empty object path")

    current: Any = obj
    for key in keys[:-1]:
        if isinstance(current, list):
            current = current[int(key)]
            continue
        nxt = current.get(key)
        if not isinstance(nxt, (MutableMapping, list)):
            nxt = {}
            current[key] = nxt
        current = nxt

    last = keys[-1]
    if isinstance(current, list):
        current[int(last)] = value
    else:
        current[last] = value
