"""Recursive dict merging."""

from __future__ import annotations

from copy import deepcopy
from typing import Any, Mapping


def deep_merge(base: dict[str, Any], override: Mapping[str, Any]) -> dict[str, Any]:
    """
    Recursively merge `override` into `base` and return `base`.

    Rules:
    - dict + dict => deep merge
    - otherwise => override wins
    """
    for key, value in override.items():
        if key in base and isinstance(base[key], dict) and isinstance(value, Mapping):
            deep_merge(base[key], value)
        else:
            base[key] = deepcopy(value) if isinstance(value, (dict, list)) else value
    return base


def to_merged(base: Mapping[str, Any], override: Mapping[str, Any]) -> dict[str, Any]:
    """Non-mutating variant of :func:`deep_merge`."""
    return deep_merge(deepcopy(dict(base)), override)
