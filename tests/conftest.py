"""Shared test fixtures for the Sievarr test suite."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import pytest

from sievarr.domain.entities import SearchInput
from sievarr.infrastructure.common.html_selectors import parse_html
from sievarr.infrastructure.sites.schema import SearchEntry

# ---------------------------------------------------------------------------
# HTML fixtures
# ---------------------------------------------------------------------------

HTML_DIR = Path(__file__).parent / "fixtures" / "html"

SEARCH_HTML = (HTML_DIR / "search_page.html").read_text(encoding="utf-8")

SITE_DEFINITION: dict[str, Any] = {
    "id": "demo",
    "name": "Demo Tracker",
    "urls": ["https://demo.example/"],
    "timezoneOffset": "+0000",
    "search": {
        "requestConfig": {"url": "/search"},
        "advanceKeywordParams": {
            "imdb": {"requestConfig": {"params": {"search_area": 4}}},
            "douban": False,
        },
        "selectors": {
            "rows": {"selector": "table.torrents tr.row"},
            "id": {
                "selector": "td.name a",
                "attr": "href",
                "filters": [{"name": "regex", "args": [r"/t/(\d+)"]}],
            },
            "title": {"selector": "td.name a"},
            "url": {"selector": "td.name a", "attr": "href"},
            "link": {"selector": "td.dl a", "attr": "href"},
            "size": {"selector": "td.size"},
            "seeders": {"selector": "td.seeders"},
            "leechers": {"selector": "td.leechers"},
            "time": {"selector": "td.time"},
            "tags": [{"name": "Free", "selector": ".tag-free"}],
        },
    },
    "detail": {
        "selectors": {"link": {"selector": "a.download", "attr": "href"}},
    },
}


@pytest.fixture()
def site_definition() -> dict[str, Any]:
    """Raw (camelCase) site definition as a catalogue would ship it."""
    return SITE_DEFINITION


@pytest.fixture()
def search_soup():
    return parse_html(SEARCH_HTML)


@pytest.fixture()
def first_row(search_soup):
    """The first ``tr.row`` of the search page."""
    return search_soup.select_one("tr.row")


@pytest.fixture()
def search_entry() -> SearchEntry:
    return SearchEntry.model_validate(SITE_DEFINITION["search"])


@pytest.fixture()
def search_input(search_entry: SearchEntry) -> SearchInput:
    return SearchInput(
        keywords="ubuntu",
        search_entry=search_entry,
        request_config={"url": "/search", "params": {"keywords": "ubuntu"}},
    )
