"""Record assembly: turn one row into a normalized ``Torrent``.

Field resolution per row:
1. candidate fields = declared selectors (minus ``rows``) ∪ default fields
2. fields already present on the seed torrent are skipped
3. a registered row field parser (see :func:`row_field_parser`) gets the
   whole torrent and returns it, so one parser may fill several fields
4. otherwise the declared ``ElementQuery`` is extracted into that field

Afterwards every torrent is normalized (site, id, absolute links, sizes,
counters, time) and handed to the owner's ``fix_parsed`` hook.
"""

from __future__ import annotations

import dataclasses
import re
from collections.abc import Callable, Iterable, Mapping
from typing import Any, Optional
from urllib.parse import urlsplit

from sievarr.domain.entities import SearchInput, Torrent, TorrentTag
from sievarr.infrastructure.common.converters import try_to_number
from sievarr.infrastructure.common.html_selectors import query_one
from sievarr.infrastructure.common.object_path import get_path
from sievarr.infrastructure.common.parsers import (
    parse_size_to_bytes,
    parse_time_with_zone,
)
from sievarr.infrastructure.common.urls import is_absolute_http, url_join
from sievarr.infrastructure.sites.schema import SearchEntry, TagQuery

from .field_extractor import get_field_data
from .roots import Root, TreeRoot, as_root

DEFAULT_TORRENT_FIELDS: tuple[str, ...] = (
    "id",
    "title",
    "sub_title",
    "url",
    "link",
    "time",
    "size",
    "author",
    "seeders",
    "leechers",
    "completed",
    "comments",
    "category",
    "tags",
    "progress",
    "status",
)

NUMERIC_FIELDS: tuple[str, ...] = (
    "seeders",
    "leechers",
    "completed",
    "comments",
    "category",
    "status",
)

ROW_FIELD_ATTR = "__row_field__"

FieldParser = Callable[[Torrent, Root, SearchInput], Torrent]
FixParsedHook = Callable[[Torrent, Root, SearchInput], Torrent]

_LEADING_DOT_RE = re.compile(r"^\.")


def row_field_parser(field_name: str) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
    """Mark a method as the parser for *field_name*.

    The method is called as ``method(torrent, row, search_input)`` and
    must return the (updated) torrent.  It replaces declarative
    extraction for that field.
    """

    def decorator(func: Callable[..., Any]) -> Callable[..., Any]:
        setattr(func, ROW_FIELD_ATTR, field_name)
        return func

    return decorator


def collect_field_parsers(owner: object) -> dict[str, FieldParser]:
    """Bound row field parsers of *owner*, keyed by field name.

    Subclass overrides of a decorated method keep the registration.
    """
    parsers: dict[str, FieldParser] = {}
    for klass in reversed(type(owner).__mro__):
        for attr_name, attr in vars(klass).items():
            field_name = getattr(attr, ROW_FIELD_ATTR, None)
            if field_name:
                parsers[field_name] = getattr(owner, attr_name)
    return parsers


def fix_link(uri: Any, base_url: str) -> Any:
    """Make *uri* absolute against *base_url*.

    - empty values and ``magnet:`` links pass through
    - protocol-relative ``//host/path`` takes the scheme of *base_url*
    - ``http(s)://`` links pass through
    - anything else is joined onto *base_url* after stripping one leading ``.``
    """
    if uri is None or uri == "":
        return uri
    uri = str(uri)

    if uri.startswith("magnet:"):
        return uri
    if uri.startswith("//"):
        scheme = urlsplit(base_url).scheme or "https"
        return f"{scheme}:{uri}"
    if is_absolute_http(uri):
        return uri
    return url_join(base_url, _LEADING_DOT_RE.sub("", uri))


def detect_tags(row: Root | Any, tag_queries: Iterable[TagQuery]) -> list[TorrentTag]:
    """Tags whose selector is present in *row*, in declaration order."""
    row = as_root(row)
    tags: list[TorrentTag] = []
    for tag in tag_queries:
        if isinstance(row, TreeRoot):
            present = query_one(row.node, tag.selector) is not None
        else:
            present = bool(get_path(row.value, tag.selector))
        if present:
            tags.append(TorrentTag(name=tag.name))
    return tags


def candidate_fields(search_entry: SearchEntry) -> list[str]:
    """Declared selector fields followed by the remaining default fields."""
    out = list(search_entry.declared_fields())
    out.extend(name for name in DEFAULT_TORRENT_FIELDS if name not in out)
    return out


class RecordAssembler:
    """Assemble rows of one search response into torrents."""

    def __init__(
        self,
        *,
        site_id: str,
        base_url: str,
        timezone_offset: str = "+0000",
        field_parsers: Optional[Mapping[str, FieldParser]] = None,
        fix_parsed: Optional[FixParsedHook] = None,
    ) -> None:
        self.site_id = site_id
        self.base_url = base_url
        self.timezone_offset = timezone_offset
        self._field_parsers = dict(field_parsers or {})
        self._fix_parsed = fix_parsed

    def assemble(
        self,
        torrent: Torrent | None,
        row: Root | Any,
        search_input: SearchInput,
    ) -> Torrent:
        row = as_root(row)
        torrent = dataclasses.replace(torrent) if torrent is not None else Torrent()
        search_entry: SearchEntry = search_input.search_entry

        for name in candidate_fields(search_entry):
            if torrent.has(name):
                continue

            parser = self._field_parsers.get(name)
            if parser is not None:
                torrent = parser(torrent, row, search_input)
                continue

            query = search_entry.field_query(name)
            if query is not None:
                torrent.set(name, get_field_data(row, query))

        torrent = self.normalize(torrent)

        if self._fix_parsed is not None:
            torrent = self._fix_parsed(torrent, row, search_input)
        return torrent

    def normalize(self, torrent: Torrent) -> Torrent:
        """Apply the record-wide normalization steps, in order."""
        if torrent.site is None:
            torrent.site = self.site_id
        if torrent.id is None:
            torrent.id = try_to_number(torrent.url or torrent.link)

        torrent.url = fix_link(torrent.url, self.base_url)
        torrent.link = fix_link(torrent.link, self.base_url)

        if isinstance(torrent.size, str):
            torrent.size = parse_size_to_bytes(torrent.size)
        torrent.size = try_to_number(torrent.size)

        for name in NUMERIC_FIELDS:
            setattr(torrent, name, try_to_number(getattr(torrent, name)))

        torrent.time = parse_time_with_zone(torrent.time, self.timezone_offset)
        return torrent
