"""Torrent search records and the search result envelope."""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from datetime import datetime
from enum import Enum
from typing import Any


class SearchResultParseStatus(str, Enum):
    """Closed set of outcomes for a single search call."""

    PASS_SEARCH = "passSearch"  # search not permitted / keyword type disabled
    NEED_LOGIN = "needLogin"
    NO_RESULTS = "noResults"
    PARSE_ERROR = "parseError"
    SUCCESS = "success"
    UNKNOWN_ERROR = "unknownError"


@dataclass(frozen=True)
class TorrentTag:
    name: str


@dataclass
class Torrent:
    """One search record.

    Built field by field while a row is assembled.  After assembly ``id``
    is always set, ``url``/``link`` are absolute, counters are numbers and
    ``time`` is a UTC ``datetime``.
    """

    site: str | None = None
    id: str | int | None = None
    title: str | None = None
    sub_title: str | None = None
    url: str | None = None
    link: str | None = None
    time: datetime | None = None
    size: int | float | None = None
    author: str | None = None
    seeders: int | float | str | None = None
    leechers: int | float | str | None = None
    completed: int | float | str | None = None
    comments: int | float | str | None = None
    category: int | float | str | None = None
    tags: list[TorrentTag] | None = None
    progress: Any = None
    status: int | float | str | None = None

    # Values of declared selectors that are not record fields
    extra: dict[str, Any] = field(default_factory=dict)

    def has(self, field_name: str) -> bool:
        """Whether *field_name* already carries a value."""
        if field_name in _FIELD_NAMES:
            return getattr(self, field_name) is not None
        return self.extra.get(field_name) is not None

    def set(self, field_name: str, value: Any) -> None:
        if field_name in _FIELD_NAMES:
            setattr(self, field_name, value)
        else:
            self.extra[field_name] = value


@dataclass(frozen=True)
class SearchResult:
    """Envelope returned by every search call."""

    data: list[Torrent] = field(default_factory=list)
    status: SearchResultParseStatus = SearchResultParseStatus.UNKNOWN_ERROR


@dataclass(frozen=True)
class SearchInput:
    """Context handed to request transformers and row field parsers."""

    keywords: str | None
    search_entry: Any
    request_config: dict[str, Any]


_FIELD_NAMES = frozenset(f.name for f in fields(Torrent)) - {"extra"}
