"""Tests for the sievarr command line entrypoint."""

from __future__ import annotations

import json
from datetime import datetime, timezone
from io import StringIO
from pathlib import Path

import pytest
import respx

from sievarr.domain.entities import SearchResult, SearchResultParseStatus, Torrent, TorrentTag
from sievarr.interfaces.cli import cli

_SITE_YAML = """
id: {site_id}
urls:
  - https://{site_id}.example/
search:
  requestConfig:
    url: /search
  selectors:
    rows: tr.row
    title: td.name a
    url:
      selector: td.name a
      attr: href
    seeders: td.seeders
"""

_PAGE = """
<table>
  <tr class="row"><td class="name"><a href="/t/1">Ubuntu</a></td><td class="seeders">4</td></tr>
</table>
"""


@pytest.fixture(autouse=True)
def _quiet_logging(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(cli, "configure_logging", lambda config: None)


@pytest.fixture()
def site_dir(tmp_path: Path) -> Path:
    directory = tmp_path / "sites"
    directory.mkdir()
    for site_id in ("alpha", "beta"):
        (directory / f"{site_id}.yml").write_text(
            _SITE_YAML.format(site_id=site_id), encoding="utf-8"
        )
    return directory


class TestResultsToJson:
    def test_status_and_records(self) -> None:
        result = SearchResult(
            data=[
                Torrent(
                    id=1,
                    title="Ubuntu",
                    time=datetime(2024, 1, 2, tzinfo=timezone.utc),
                    tags=[TorrentTag("Free")],
                )
            ],
            status=SearchResultParseStatus.SUCCESS,
        )
        payload = json.loads(cli.results_to_json({"demo": result}))

        record = payload["demo"]["data"][0]
        assert payload["demo"]["status"] == "success"
        assert record["title"] == "Ubuntu"
        assert record["time"] == "2024-01-02T00:00:00+00:00"
        assert record["tags"] == [{"name": "Free"}]

    def test_empty_result(self) -> None:
        payload = json.loads(
            cli.results_to_json({"x": SearchResult(status=SearchResultParseStatus.PASS_SEARCH)})
        )
        assert payload == {"x": {"status": "passSearch", "data": []}}


class TestStart:
    @respx.mock
    def test_searches_every_site(self, site_dir: Path) -> None:
        alpha = respx.get("https://alpha.example/search").respond(200, html=_PAGE)
        beta = respx.get("https://beta.example/search").respond(200, html="<p>none</p>")
        out = StringIO()

        code = cli.start(["ubuntu", "--site-dir", str(site_dir)], out=out)

        assert code == 0
        payload = json.loads(out.getvalue())
        assert payload["alpha"]["status"] == "success"
        assert payload["alpha"]["data"][0]["url"] == "https://alpha.example/t/1"
        assert payload["alpha"]["data"][0]["seeders"] == 4
        assert payload["beta"] == {"status": "noResults", "data": []}
        assert alpha.calls.last.request.url.params["keywords"] == "ubuntu"
        assert beta.called

    @respx.mock
    def test_site_filter(self, site_dir: Path) -> None:
        respx.get("https://alpha.example/search").respond(200, html=_PAGE)
        out = StringIO()

        code = cli.start(["ubuntu", "--site-dir", str(site_dir), "--site", "alpha"], out=out)

        assert code == 0
        assert list(json.loads(out.getvalue())) == ["alpha"]

    def test_unknown_site_exits_2(self, site_dir: Path) -> None:
        out = StringIO()
        code = cli.start(["ubuntu", "--site-dir", str(site_dir), "--site", "gamma"], out=out)
        assert code == 2
        assert out.getvalue() == ""

    def test_missing_site_dir_exits_2(self, tmp_path: Path) -> None:
        code = cli.start(["ubuntu", "--site-dir", str(tmp_path / "none")], out=StringIO())
        assert code == 2

    def test_keywords_required(self) -> None:
        with pytest.raises(SystemExit):
            cli.start([], out=StringIO())

    @respx.mock
    def test_site_overrides_from_config(self, site_dir: Path, tmp_path: Path) -> None:
        mirror = respx.get("https://mirror.example/search").respond(200, html=_PAGE)
        config = tmp_path / "config.yaml"
        config.write_text(
            "sites:\n"
            f"  site_dir: {site_dir}\n"
            "  overrides:\n"
            "    alpha:\n"
            "      url: https://mirror.example/\n"
            "    beta:\n"
            "      isOffline: true\n",
            encoding="utf-8",
        )
        out = StringIO()

        code = cli.start(["ubuntu", "--config", str(config)], out=out)

        assert code == 0
        payload = json.loads(out.getvalue())
        assert mirror.called
        assert payload["alpha"]["data"][0]["url"] == "https://mirror.example/t/1"
        assert payload["beta"] == {"status": "passSearch", "data": []}
