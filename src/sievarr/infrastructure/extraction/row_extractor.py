"""Row extraction: locate the repeated structures that hold one record each."""

from __future__ import annotations

import copy
from collections.abc import Sequence
from typing import Any

from bs4 import BeautifulSoup, Tag

from sievarr.domain.sites.exceptions import NoTorrentsError, SiteParseError
from sievarr.infrastructure.common.object_path import get_path
from sievarr.infrastructure.sites.schema import SELF_SELECTOR, RowsQuery

from .roots import ObjectRoot, Root, TreeRoot, as_root


def merge_rows(nodes: Sequence[Tag], size: int) -> list[Tag]:
    """Group *nodes* into consecutive chunks of *size* under synthetic ``<div>``s.

    Nodes are copied, so the source document is left untouched.  The last
    chunk may be shorter.
    """
    factory = BeautifulSoup("", "html.parser")
    merged: list[Tag] = []
    for start in range(0, len(nodes), size):
        wrapper = factory.new_tag("div")
        for node in nodes[start : start + size]:
            wrapper.append(copy.copy(node))
        merged.append(wrapper)
    return merged


def _tree_rows(node: Tag, rows_query: RowsQuery) -> list[Any]:
    rows: list[Any] = list(node.select(rows_query.selector))
    if rows_query.filter is not None:
        return list(rows_query.filter(rows))
    if rows and rows_query.merge > 1:
        return merge_rows(rows, rows_query.merge)
    return rows


def _object_rows(value: Any, rows_query: RowsQuery) -> list[Any]:
    if rows_query.selector == SELF_SELECTOR:
        items = value
    else:
        items = get_path(value, rows_query.selector)

    if items is None:
        items = []
    elif not isinstance(items, (list, tuple)):
        raise SiteParseError(
            f"Rows selector {rows_query.selector!r} resolved to "
            f"{type(items).__name__}, expected a list"
        )

    if rows_query.filter is not None:
        return list(rows_query.filter(list(items)))
    return list(items)


def extract_rows(root: Root | Any, rows_query: RowsQuery) -> list[Root]:
    """Resolve *rows_query* against *root* and wrap every row as a root.

    Raises:
        NoTorrentsError: the selector matched nothing.
        SiteParseError: a JSON path resolved to something other than a list.
    """
    root = as_root(root)
    if isinstance(root, TreeRoot):
        rows: list[Root] = [as_root(r) for r in _tree_rows(root.node, rows_query)]
    else:
        rows = [ObjectRoot(r) for r in _object_rows(root.value, rows_query)]

    if not rows:
        raise NoTorrentsError(f"No rows matched {rows_query.selector!r}")
    return rows
