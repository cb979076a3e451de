"""Common infrastructure utilities."""

from __future__ import annotations

from .converters import parse_number, try_to_number
from .merging import deep_merge, to_merged
from .object_path import get_path, set_path
from .parsers import parse_size_to_bytes, parse_time_with_zone, parse_ttl
from .urls import url_join

__all__ = [
    "deep_merge",
    "get_path",
    "parse_number",
    "parse_size_to_bytes",
    "parse_time_with_zone",
    "parse_ttl",
    "set_path",
    "to_merged",
    "try_to_number",
    "url_join",
]
