from .torrent import (
    SearchInput,
    SearchResult,
    SearchResultParseStatus,
    Torrent,
    TorrentTag,
)

__all__ = [
    "SearchInput",
    "SearchResult",
    "SearchResultParseStatus",
    "Torrent",
    "TorrentTag",
]
