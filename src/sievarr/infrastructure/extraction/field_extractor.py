"""Field extraction: one ``ElementQuery`` against one root."""

from __future__ import annotations

import re
from collections.abc import Iterable, Mapping
from typing import Any

from sievarr.infrastructure.common.html_selectors import (
    inner_text,
    matches,
    query_one,
    read_attr,
    read_dataset,
)
from sievarr.infrastructure.common.object_path import get_path
from sievarr.infrastructure.sites.schema import SELF_SELECTOR, ElementQuery

from .filters import run_query_filters
from .roots import ObjectRoot, Root, TreeRoot, as_root

_INT_RE = re.compile(r"-?\d+")


def _is_empty(value: Any) -> bool:
    return value is None or value == ""


def _resolve_tree(root: TreeRoot, selector: str, query: ElementQuery) -> Any:
    node = root.node if selector == SELF_SELECTOR else query_one(root.node, selector)
    if node is None:
        return None

    if query.element_process:
        return run_query_filters(node, query.element_process)
    if query.case:
        for match, value in query.case.items():
            if matches(node, match):
                return value
        return None
    if query.data:
        return read_dataset(node, query.data)
    if query.attr:
        return read_attr(node, query.attr)
    return inner_text(node)


def _resolve_object(root: ObjectRoot, selector: str, query: ElementQuery) -> Any:
    value = root.value if selector == SELF_SELECTOR else get_path(root.value, selector)
    if value is None:
        return None
    if query.element_process:
        return run_query_filters(value, query.element_process)
    return value


def get_field_data(root: Root | Any, query: ElementQuery) -> Any:
    """Extract one value as described by *query*.

    Selectors are tried in order; the first that yields a non-empty
    (trimmed) value wins, otherwise the literal ``text`` fallback is used.
    The filter chain keyed by the matching selector in ``switch_filters``
    replaces the generic ``filters``.  Plain integer strings come back as
    ``int``.  Missing data never raises.
    """
    root = as_root(root)
    value: Any = "" if query.text is None else str(query.text)
    used_selector: str | None = None

    for selector in query.selectors:
        if isinstance(root, TreeRoot):
            candidate = _resolve_tree(root, selector, query)
        else:
            candidate = _resolve_object(root, selector, query)

        if isinstance(candidate, str):
            candidate = candidate.strip()
        if not _is_empty(candidate):
            value = candidate
            used_selector = selector
            break

    if (
        used_selector is not None
        and query.switch_filters
        and used_selector in query.switch_filters
    ):
        value = run_query_filters(value, query.switch_filters[used_selector])
    elif query.filters:
        value = run_query_filters(value, query.filters)

    if isinstance(value, str):
        value = value.strip()
        if _INT_RE.fullmatch(value):
            value = int(value)

    return value


def get_fields_data(
    root: Root | Any, fields: Iterable[str], selectors: Mapping[str, Any]
) -> dict[str, Any]:
    """Extract several fields at once; names without an ``ElementQuery`` are skipped."""
    root = as_root(root)
    out: dict[str, Any] = {}
    for name in fields:
        query = selectors.get(name)
        if isinstance(query, ElementQuery):
            out[name] = get_field_data(root, query)
    return out
