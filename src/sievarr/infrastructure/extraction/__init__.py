"""Declarative extraction of torrent records from HTML trees and JSON values."""

from __future__ import annotations

from .field_extractor import get_field_data, get_fields_data
from .filters import DEFINED_FILTERS, apply_filter, run_query_filters
from .record_assembler import (
    DEFAULT_TORRENT_FIELDS,
    RecordAssembler,
    collect_field_parsers,
    detect_tags,
    fix_link,
    row_field_parser,
)
from .roots import ObjectRoot, Root, TreeRoot, as_root
from .row_extractor import extract_rows, merge_rows

__all__ = [
    "DEFAULT_TORRENT_FIELDS",
    "DEFINED_FILTERS",
    "ObjectRoot",
    "RecordAssembler",
    "Root",
    "TreeRoot",
    "apply_filter",
    "as_root",
    "collect_field_parsers",
    "detect_tags",
    "extract_rows",
    "fix_link",
    "get_field_data",
    "get_fields_data",
    "merge_rows",
    "row_field_parser",
    "run_query_filters",
]
