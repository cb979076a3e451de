"""Root handles for extraction.

Every extractor works on either a parsed HTML tree (``TreeRoot``) or an
arbitrary decoded JSON value (``ObjectRoot``).  Callers wrap raw values
once with :func:`as_root`; extraction branches on the variant instead of
inspecting the payload.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Union

from bs4 import Tag


@dataclass(frozen=True)
class TreeRoot:
    node: Tag


@dataclass(frozen=True)
class ObjectRoot:
    value: Any


Root = Union[TreeRoot, ObjectRoot]


def as_root(value: Any) -> Root:
    """Wrap *value* in the matching root variant (roots pass through)."""
    if isinstance(value, (TreeRoot, ObjectRoot)):
        return value
    if isinstance(value, Tag):
        return TreeRoot(value)
    return ObjectRoot(value)
