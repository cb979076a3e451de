"""Value filter registry.

Named, parameterized transforms that a field query can chain after
extraction.  Site definitions reference them as ``{name, args}``; Python
definitions may pass callables directly.  Unknown names are a no-op so a
definition written for a richer registry still loads.
"""

from __future__ import annotations

import re
from collections.abc import Callable
from typing import Any
from urllib.parse import parse_qs, urlsplit

import structlog

from sievarr.infrastructure.common.converters import parse_number
from sievarr.infrastructure.common.parsers import (
    parse_size_to_bytes,
    parse_time_with_zone,
    parse_ttl,
)

log = structlog.get_logger(__name__)

FilterFunc = Callable[[Any, list[Any]], Any]

_IMDB_RE = re.compile(r"(tt\d{5,})")


def _arg(args: list[Any], index: int, default: Any = None) -> Any:
    return args[index] if len(args) > index else default


def _trim(value: Any, args: list[Any]) -> Any:
    return value.strip(_arg(args, 0)) if isinstance(value, str) else value


def _ltrim(value: Any, args: list[Any]) -> Any:
    return value.lstrip(_arg(args, 0)) if isinstance(value, str) else value


def _rtrim(value: Any, args: list[Any]) -> Any:
    return value.rstrip(_arg(args, 0)) if isinstance(value, str) else value


def _lower(value: Any, args: list[Any]) -> Any:
    return value.lower() if isinstance(value, str) else value


def _upper(value: Any, args: list[Any]) -> Any:
    return value.upper() if isinstance(value, str) else value


def _append(value: Any, args: list[Any]) -> Any:
    return f"{value}{_arg(args, 0, '')}"


def _prepend(value: Any, args: list[Any]) -> Any:
    return f"{_arg(args, 0, '')}{value}"


def _replace(value: Any, args: list[Any]) -> Any:
    if not isinstance(value, str) or not args:
        return value
    return value.replace(str(args[0]), str(_arg(args, 1, "")))


def _split(value: Any, args: list[Any]) -> Any:
    """``split(sep, index)``: the *index*-th part, or ``""`` if out of range."""
    if not isinstance(value, str):
        return value
    parts = value.split(_arg(args, 0, " "))
    try:
        return parts[int(_arg(args, 1, 0))]
    except IndexError:
        return ""


def _regex(value: Any, args: list[Any]) -> Any:
    """``regex(pattern, group=1|0)``: matched group, or ``""`` when nothing matches."""
    if value is None or not args:
        return value
    match = re.search(str(args[0]), str(value))
    if not match:
        return ""
    group = _arg(args, 1, 1 if match.groups() else 0)
    return match.group(group)


def _querystring(value: Any, args: list[Any]) -> Any:
    """``querystring(key)``: first value of *key* in the URL's query string."""
    if not isinstance(value, str) or not args:
        return value
    values = parse_qs(urlsplit(value).query).get(str(args[0]))
    return values[0] if values else ""


def _parse_number(value: Any, args: list[Any]) -> Any:
    number = parse_number(value)
    return 0 if number is None else number


def _parse_size(value: Any, args: list[Any]) -> Any:
    if isinstance(value, (int, float)):
        return value
    return parse_size_to_bytes(str(value or ""))


def _parse_time(value: Any, args: list[Any]) -> Any:
    parsed = parse_time_with_zone(value, _arg(args, 0, "+0000"))
    return value if parsed is None else parsed


def _parse_ttl(value: Any, args: list[Any]) -> Any:
    parsed = parse_ttl(value)
    return value if parsed is None else parsed


def _ext_imdb_id(value: Any, args: list[Any]) -> Any:
    match = _IMDB_RE.search(str(value or ""))
    return match.group(1) if match else ""


DEFINED_FILTERS: dict[str, FilterFunc] = {
    "trim": _trim,
    "ltrim": _ltrim,
    "rtrim": _rtrim,
    "toLowerCase": _lower,
    "toUpperCase": _upper,
    "append": _append,
    "prepend": _prepend,
    "replace": _replace,
    "split": _split,
    "regex": _regex,
    "querystring": _querystring,
    "parseNumber": _parse_number,
    "parseSize": _parse_size,
    "parseTime": _parse_time,
    "parseTTL": _parse_ttl,
    "extImdbId": _ext_imdb_id,
}


def apply_filter(name: str, args: list[Any] | None, value: Any) -> Any:
    """Apply the registered filter *name*; unknown names return *value* unchanged."""
    func = DEFINED_FILTERS.get(name)
    if func is None:
        log.debug("unknown_filter_skipped", filter=name)
        return value
    return func(value, list(args or []))


def run_query_filters(value: Any, filters: Any) -> Any:
    """Run a filter chain strictly left to right.

    *filters* is a single filter or an iterable of them; each is a callable
    taking the value, a registry name, or an object with ``name``/``args``
    (``FilterSpec`` or a mapping).
    """
    if filters is None:
        return value
    if callable(filters) or isinstance(filters, (str, dict)) or hasattr(filters, "name"):
        filters = [filters]

    for flt in filters:
        if flt is None:
            continue
        if callable(flt):
            value = flt(value)
        elif isinstance(flt, str):
            value = apply_filter(flt, [], value)
        elif isinstance(flt, dict):
            value = apply_filter(flt.get("name", ""), flt.get("args"), value)
        else:
            value = apply_filter(flt.name, flt.args, value)
    return value
