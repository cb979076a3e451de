"""Fan one keyword out over several sites."""

from __future__ import annotations

import asyncio
from collections.abc import Iterable

import structlog

from sievarr.domain.entities import SearchResult, SearchResultParseStatus
from sievarr.domain.ports import SitePort

log = structlog.get_logger(__name__)


class MultiSiteSearchUseCase:
    """Search several sites concurrently.

    Results are returned per site id, unranked and without deduplication.
    A site whose search raises (a broken definition) is reported as
    ``unknownError`` instead of failing the whole fan-out.
    """

    def __init__(self, sites: Iterable[SitePort]) -> None:
        self.sites: list[SitePort] = list(sites)

    async def execute(self, keywords: str | None) -> dict[str, SearchResult]:
        if not self.sites:
            return {}

        outcomes = await asyncio.gather(
            *(site.search(keywords) for site in self.sites),
            return_exceptions=True,
        )

        results: dict[str, SearchResult] = {}
        for site, outcome in zip(self.sites, outcomes):
            if isinstance(outcome, BaseException):
                if not isinstance(outcome, Exception):
                    raise outcome
                log.error(
                    "site_search_failed",
                    site=site.id,
                    error_type=type(outcome).__name__,
                    error_message=str(outcome),
                )
                results[site.id] = SearchResult(
                    status=SearchResultParseStatus.UNKNOWN_ERROR
                )
                continue
            results[site.id] = outcome

        log.info(
            "multi_site_search_completed",
            keywords=keywords,
            sites=len(self.sites),
            records=sum(len(r.data) for r in results.values()),
        )
        return results
