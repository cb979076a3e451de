"""Declarative torrent site engine.

``BittorrentSite`` drives one site definition end to end:

1. build the request config for a keyword (advanced keyword prefixes,
   keyword path, request transformers)
2. fetch it through :class:`SiteRequestGateway`
3. extract rows and assemble one ``Torrent`` per row
4. map failures onto a ``SearchResultParseStatus``

Sites with quirks subclass it and override ``logged_check``,
``fix_parsed_torrent`` or single fields via ``@row_field_parser``.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

import httpx
import structlog

from sievarr.domain.entities import (
    SearchInput,
    SearchResult,
    SearchResultParseStatus,
    Torrent,
)
from sievarr.domain.sites.exceptions import (
    NeedLoginError,
    NoTorrentsError,
    SiteConfigurationError,
)
from sievarr.infrastructure.common.merging import to_merged
from sievarr.infrastructure.common.object_path import set_path
from sievarr.infrastructure.config.schema import AppConfig
from sievarr.infrastructure.extraction.field_extractor import get_field_data
from sievarr.infrastructure.extraction.record_assembler import (
    RecordAssembler,
    collect_field_parsers,
    detect_tags,
    fix_link,
    row_field_parser,
)
from sievarr.infrastructure.extraction.roots import Root
from sievarr.infrastructure.extraction.row_extractor import extract_rows
from sievarr.infrastructure.http.client import build_http_client

from .gateway import SiteRequestGateway, SiteResponse
from .schema import (
    DEFAULT_KEYWORD_PATH,
    AdvanceKeywordConfig,
    SearchEntry,
    SiteMetadata,
    SiteUserConfig,
    merge_models,
)

BASE_REQUEST_CONFIG: dict[str, Any] = {
    "url": "/",
    "response_type": "document",
    "params": {},
    "data": {},
}


class BittorrentSite:
    """Search engine for one declaratively configured torrent site."""

    def __init__(
        self,
        metadata: SiteMetadata | Mapping[str, Any],
        user_config: SiteUserConfig | Mapping[str, Any] | None = None,
        *,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        if not isinstance(metadata, SiteMetadata):
            metadata = SiteMetadata.model_validate(metadata)
        if user_config is None:
            user_config = SiteUserConfig()
        elif not isinstance(user_config, SiteUserConfig):
            user_config = SiteUserConfig.model_validate(user_config)

        self.user_config = user_config
        self.metadata = (
            merge_models(metadata, user_config.merge) if user_config.merge else metadata
        )
        if not self.metadata.urls and not self.user_config.url:
            raise SiteConfigurationError(
                f"Site {self.metadata.id!r} declares no urls and none is configured"
            )

        self._client = http_client
        self._owns_client = http_client is None
        self._field_parsers = collect_field_parsers(self)
        self._log = structlog.get_logger(__name__).bind(site=self.metadata.id)

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    @property
    def id(self) -> str:
        return self.metadata.id

    @property
    def url(self) -> str:
        return self.user_config.url or self.metadata.urls[0]

    @property
    def is_online(self) -> bool:
        return not self.user_config.is_offline

    @property
    def allow_search(self) -> bool:
        return (
            self.is_online
            and self.metadata.search is not None
            and self.user_config.allow_search is not False
        )

    # ------------------------------------------------------------------
    # Client lifecycle
    # ------------------------------------------------------------------

    def _ensure_client(self) -> httpx.AsyncClient:
        """Create an owned httpx client if none was injected."""
        if self._client is None:
            self._client = build_http_client(AppConfig())
            self._owns_client = True
        return self._client

    async def cleanup(self) -> None:
        """Close the httpx client if this site created it."""
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> BittorrentSite:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.cleanup()

    # ------------------------------------------------------------------
    # Requests
    # ------------------------------------------------------------------

    def logged_check(self, response: SiteResponse) -> bool:
        """Whether *response* was served to a logged-in session.

        Public sites are always "logged in"; private sites override this.
        """
        return True

    async def request(
        self, config: Mapping[str, Any], check_login: bool = True
    ) -> SiteResponse:
        gateway = SiteRequestGateway(
            self._ensure_client(),
            base_url=self.url,
            login_check=self.logged_check,
        )
        return await gateway.request(config, check_login=check_login)

    # ------------------------------------------------------------------
    # Search
    # ------------------------------------------------------------------

    def _effective_entry(
        self, search_entry: SearchEntry | Mapping[str, Any] | None
    ) -> SearchEntry:
        default = self.metadata.search or SearchEntry()
        if search_entry is None:
            return default
        if not isinstance(search_entry, SearchEntry):
            search_entry = SearchEntry.model_validate(search_entry)

        opted_out = search_entry.merge is False and bool(search_entry.model_fields_set)
        if opted_out:
            return search_entry
        return merge_models(default, search_entry)

    async def search(
        self,
        keywords: str | None = None,
        search_entry: SearchEntry | Mapping[str, Any] | None = None,
    ) -> SearchResult:
        """Search the site for *keywords*.

        Never raises except ``SiteConfigurationError`` for a definition
        that cannot be searched at all.
        """
        if not self.allow_search:
            self._log.debug("search_skipped", reason="not_allowed")
            return SearchResult(status=SearchResultParseStatus.PASS_SEARCH)

        entry = self._effective_entry(search_entry)
        request_config = to_merged(BASE_REQUEST_CONFIG, entry.request_config)

        advance: AdvanceKeywordConfig | None = None
        if keywords and entry.advance_keyword_params:
            for token, config in entry.advance_keyword_params.items():
                prefix = f"{token}|"
                if not keywords.startswith(prefix):
                    continue
                if config is False or (
                    isinstance(config, AdvanceKeywordConfig) and not config.enabled
                ):
                    self._log.debug("search_skipped", reason="keyword_disabled", token=token)
                    return SearchResult(status=SearchResultParseStatus.PASS_SEARCH)
                keywords = keywords[len(prefix) :]
                advance = config if isinstance(config, AdvanceKeywordConfig) else None
                break

        if keywords:
            set_path(request_config, entry.keyword_path or DEFAULT_KEYWORD_PATH, keywords)

        if advance is not None:
            if advance.request_config:
                request_config = to_merged(request_config, advance.request_config)
            if advance.request_config_transformer is not None:
                request_config = advance.request_config_transformer(
                    SearchInput(keywords, entry, request_config)
                )

        if entry.request_config_transformer is not None:
            request_config = entry.request_config_transformer(
                SearchInput(keywords, entry, request_config)
            )

        if entry.rows is None:
            raise SiteConfigurationError(
                f"Site {self.id!r} search entry declares no rows selector"
            )

        search_input = SearchInput(keywords, entry, request_config)
        try:
            response = await self.request(request_config)
            torrents = self.transform_search_page(response.data, search_input)
        except NeedLoginError:
            self._log.info("search_need_login")
            return SearchResult(status=SearchResultParseStatus.NEED_LOGIN)
        except NoTorrentsError:
            self._log.info("search_no_results", keywords=keywords)
            return SearchResult(status=SearchResultParseStatus.NO_RESULTS)
        except Exception as exc:  # noqa: BLE001
            self._log.warning(
                "search_parse_error",
                keywords=keywords,
                error=str(exc),
                error_type=type(exc).__name__,
            )
            return SearchResult(status=SearchResultParseStatus.PARSE_ERROR)

        self._log.info("search_success", keywords=keywords, count=len(torrents))
        return SearchResult(data=torrents, status=SearchResultParseStatus.SUCCESS)

    def transform_search_page(
        self, doc: Any, search_input: SearchInput
    ) -> list[Torrent]:
        """Turn a fetched document or JSON value into torrents."""
        rows_query = search_input.search_entry.rows
        if rows_query is None:
            raise SiteConfigurationError(
                f"Site {self.id!r} search entry declares no rows selector"
            )

        rows = extract_rows(doc, rows_query)
        assembler = self._assembler(search_input.request_config)
        return [
            self.parse_whole_torrent_from_row(
                Torrent(), row, search_input, assembler=assembler
            )
            for row in rows
        ]

    def _assembler(self, request_config: Mapping[str, Any]) -> RecordAssembler:
        return RecordAssembler(
            site_id=self.id,
            base_url=request_config.get("base_url") or self.url,
            timezone_offset=self.metadata.timezone_offset,
            field_parsers=self._field_parsers,
            fix_parsed=self.fix_parsed_torrent,
        )

    def parse_whole_torrent_from_row(
        self,
        torrent: Torrent,
        row: Root | Any,
        search_input: SearchInput,
        *,
        assembler: RecordAssembler | None = None,
    ) -> Torrent:
        if assembler is None:
            assembler = self._assembler(search_input.request_config)
        return assembler.assemble(torrent, row, search_input)

    @row_field_parser("tags")
    def parse_torrent_tags_from_row(
        self, torrent: Torrent, row: Root, search_input: SearchInput
    ) -> Torrent:
        tag_queries = search_input.search_entry.tags
        if tag_queries:
            torrent.tags = detect_tags(row, tag_queries)
        return torrent

    def fix_parsed_torrent(
        self, torrent: Torrent, row: Root, search_input: SearchInput
    ) -> Torrent:
        """Last per-record hook; subclasses adjust site quirks here."""
        return torrent

    # ------------------------------------------------------------------
    # Links
    # ------------------------------------------------------------------

    async def get_torrent_page_link(self, torrent: Torrent) -> str | None:
        return torrent.url

    async def get_torrent_download_link(self, torrent: Torrent) -> str | None:
        """Download link of *torrent*, read from its detail page if missing."""
        detail = self.metadata.detail
        link_query = detail.selectors.get("link") if detail is not None else None
        if torrent.link or link_query is None:
            return torrent.link

        config = to_merged(
            {"response_type": "document", "url": torrent.url}, detail.request_config
        )
        response = await self.request(config)
        link = get_field_data(response.data, link_query)
        self._log.debug("download_link_resolved", url=torrent.url, link=link)
        return fix_link(link, config.get("base_url") or self.url)
