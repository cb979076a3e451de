"""Port for a searchable torrent site."""

from __future__ import annotations

from typing import Any, Protocol

from sievarr.domain.entities import SearchResult, Torrent


class SitePort(Protocol):
    """Async interface every configured site satisfies."""

    @property
    def id(self) -> str: ...

    async def search(
        self, keywords: str | None = None, search_entry: Any = None
    ) -> SearchResult: ...

    async def get_torrent_download_link(self, torrent: Torrent) -> str | None: ...

    async def get_torrent_page_link(self, torrent: Torrent) -> str | None: ...
