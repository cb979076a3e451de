"""Tests for single-field extraction against HTML and JSON roots."""

from __future__ import annotations

from sievarr.infrastructure.common.html_selectors import parse_html
from sievarr.infrastructure.extraction.field_extractor import (
    get_field_data,
    get_fields_data,
)
from sievarr.infrastructure.extraction.roots import ObjectRoot, TreeRoot
from sievarr.infrastructure.sites.schema import ElementQuery


def _q(**kwargs) -> ElementQuery:
    return ElementQuery.model_validate(kwargs)


class TestTreeRoot:
    def test_inner_text(self, first_row) -> None:
        assert get_field_data(first_row, _q(selector="td.name a")) == "Ubuntu 24.04"

    def test_line_breaks_separate_words(self) -> None:
        soup = parse_html(
            "<table><tr><td class='n'>Ubuntu<br>24.04</td></tr></table>"
        )
        assert get_field_data(soup, _q(selector="td.n")) == "Ubuntu 24.04"

    def test_attr(self, first_row) -> None:
        assert get_field_data(first_row, _q(selector="td.name a", attr="href")) == "/t/1"

    def test_dataset_on_self(self, first_row) -> None:
        query = _q(selector=":self", data="torrentId")
        assert get_field_data(TreeRoot(first_row), query) == 1

    def test_integer_strings_become_int(self, first_row) -> None:
        assert get_field_data(first_row, _q(selector="td.seeders")) == 12

    def test_selector_list_falls_through(self, first_row) -> None:
        query = _q(selector=["td.missing", "td.flags span"])
        assert get_field_data(first_row, query) == "Free"

    def test_first_non_empty_selector_wins(self, search_soup) -> None:
        row = search_soup.select("tr.row")[1]
        query = _q(selector=["td.flags", "td.size", "td.seeders"])
        assert get_field_data(row, query) == "700 MB"

    def test_case_mapping(self, first_row) -> None:
        query = _q(
            selector="td.flags span",
            case={".tag-half": "half", ".tag-free": "free"},
        )
        assert get_field_data(first_row, query) == "free"

    def test_case_without_match_falls_back_to_literal(self, first_row) -> None:
        query = _q(selector="td.flags span", case={".tag-half": "half"}, text="none")
        assert get_field_data(first_row, query) == "none"

    def test_element_process_receives_node(self, first_row) -> None:
        query = _q(selector="td.name a", element_process=lambda node: node["title"])
        assert get_field_data(first_row, query) == "Ubuntu 24.04 Desktop"

    def test_switch_filters_replace_generic_filters(self, first_row) -> None:
        query = _q(
            selector=["td.missing", "td.size"],
            filters=[{"name": "append", "args": ["?"]}],
            switch_filters={"td.size": [{"name": "parseSize"}]},
        )
        assert get_field_data(first_row, query) == int(1.5 * 1024**3)

    def test_generic_filters_when_no_switch_matches(self, first_row) -> None:
        query = _q(
            selector="td.name a",
            filters=["toUpperCase"],
            switch_filters={"td.size": ["parseSize"]},
        )
        assert get_field_data(first_row, query) == "UBUNTU 24.04"

    def test_missing_selector_returns_empty_string(self, first_row) -> None:
        assert get_field_data(first_row, _q(selector="td.nope")) == ""


class TestLiteral:
    def test_literal_only(self) -> None:
        assert get_field_data({}, _q(text="  N/A  ")) == "N/A"

    def test_literal_number(self) -> None:
        assert get_field_data({}, _q(text=42)) == 42

    def test_filters_run_without_selector(self) -> None:
        assert get_field_data({}, _q(text="abc", filters=["toUpperCase"])) == "ABC"


class TestObjectRoot:
    PAYLOAD = {
        "id": 10,
        "name": " Arch Linux ",
        "stats": {"seeders": "7", "leechers": ""},
        "files": [{"path": "arch.iso"}],
    }

    def test_path(self) -> None:
        assert get_field_data(ObjectRoot(self.PAYLOAD), _q(selector="name")) == "Arch Linux"

    def test_nested_path_to_int(self) -> None:
        assert get_field_data(self.PAYLOAD, _q(selector="stats.seeders")) == 7

    def test_list_index(self) -> None:
        assert get_field_data(self.PAYLOAD, _q(selector="files[0].path")) == "arch.iso"

    def test_empty_value_falls_through(self) -> None:
        query = _q(selector=["stats.leechers", "stats.seeders"])
        assert get_field_data(self.PAYLOAD, query) == 7

    def test_non_string_values_kept(self) -> None:
        assert get_field_data(self.PAYLOAD, _q(selector="id")) == 10

    def test_self_with_element_process(self) -> None:
        query = _q(selector=":self", element_process=lambda v: v["files"][0]["path"])
        assert get_field_data(self.PAYLOAD, query) == "arch.iso"


def test_get_fields_data(first_row, search_entry) -> None:
    data = get_fields_data(first_row, ["title", "seeders", "rows", "nope"], search_entry.selectors)
    assert data == {"title": "Ubuntu 24.04", "seeders": 12}
