"""Tests for row extraction."""

from __future__ import annotations

import pytest

from sievarr.domain.sites.exceptions import NoTorrentsError, SiteParseError
from sievarr.infrastructure.common.html_selectors import parse_html
from sievarr.infrastructure.extraction.roots import ObjectRoot, TreeRoot
from sievarr.infrastructure.extraction.row_extractor import extract_rows, merge_rows
from sievarr.infrastructure.sites.schema import RowsQuery

_LIST_HTML = "<ul>" + "".join(f"<li>{i}</li>" for i in range(1, 7)) + "</ul>"


class TestTreeRows:
    def test_rows_in_document_order(self, search_soup) -> None:
        rows = extract_rows(search_soup, RowsQuery(selector="tr.row"))
        assert len(rows) == 2
        assert all(isinstance(r, TreeRoot) for r in rows)
        assert rows[0].node["data-torrent-id"] == "1"

    def test_merge_groups_consecutive_nodes(self) -> None:
        soup = parse_html(_LIST_HTML)
        rows = extract_rows(soup, RowsQuery(selector="li", merge=2))

        assert len(rows) == 3
        for row in rows:
            assert row.node.name == "div"
        assert [[li.get_text() for li in r.node.find_all("li")] for r in rows] == [
            ["1", "2"],
            ["3", "4"],
            ["5", "6"],
        ]

    def test_merge_leaves_document_untouched(self) -> None:
        soup = parse_html(_LIST_HTML)
        extract_rows(soup, RowsQuery(selector="li", merge=2))
        items = soup.select("li")
        assert len(items) == 6
        assert all(li.parent.name == "ul" for li in items)

    def test_merge_keeps_short_tail(self) -> None:
        soup = parse_html(_LIST_HTML)
        assert [len(w.find_all("li")) for w in merge_rows(soup.select("li"), 4)] == [4, 2]

    def test_filter_replaces_merge(self) -> None:
        soup = parse_html(_LIST_HTML)
        rows = extract_rows(
            soup, RowsQuery(selector="li", merge=2, filter=lambda items: items[::2])
        )
        assert [r.node.get_text() for r in rows] == ["1", "3", "5"]

    def test_no_rows_raises(self) -> None:
        with pytest.raises(NoTorrentsError):
            extract_rows(parse_html("<p>empty</p>"), RowsQuery(selector="tr.row"))


class TestObjectRows:
    def test_path(self) -> None:
        rows = extract_rows({"data": {"items": [{"id": 1}, {"id": 2}]}}, RowsQuery(selector="data.items"))
        assert rows == [ObjectRoot({"id": 1}), ObjectRoot({"id": 2})]

    def test_self(self) -> None:
        rows = extract_rows(ObjectRoot([{"id": 1}]), RowsQuery(selector=":self"))
        assert rows == [ObjectRoot({"id": 1})]

    def test_filter(self) -> None:
        query = RowsQuery(selector="items", filter=lambda items: [i for i in items if i["ok"]])
        rows = extract_rows({"items": [{"ok": True}, {"ok": False}]}, query)
        assert rows == [ObjectRoot({"ok": True})]

    def test_missing_path_raises_no_torrents(self) -> None:
        with pytest.raises(NoTorrentsError):
            extract_rows({"data": {}}, RowsQuery(selector="data.items"))

    def test_non_list_raises_parse_error(self) -> None:
        with pytest.raises(SiteParseError):
            extract_rows({"data": {"items": "oops"}}, RowsQuery(selector="data.items"))
