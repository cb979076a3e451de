from __future__ import annotations

import argparse
import asyncio
import dataclasses
import json
import sys
from collections.abc import Iterable
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Any, TextIO

import structlog

from sievarr.application.use_cases import MultiSiteSearchUseCase
from sievarr.domain.entities import SearchResult
from sievarr.domain.sites.exceptions import SiteConfigurationError, SiteDefinitionError
from sievarr.infrastructure.config import AppConfig, load_config
from sievarr.infrastructure.http.client import build_http_client
from sievarr.infrastructure.logging.setup import configure_logging
from sievarr.infrastructure.sites.bittorrent_site import BittorrentSite
from sievarr.infrastructure.sites.loader import discover_site_definitions

log = structlog.get_logger(__name__)


def _parse_args(argv: Iterable[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="sievarr", description="Search configured torrent sites."
    )

    parser.add_argument("keywords", help="Search keywords, e.g. 'ubuntu' or 'imdb|tt0111161'.")
    parser.add_argument(
        "--site",
        dest="sites",
        action="append",
        default=None,
        help="Only search this site id (repeatable).",
    )

    # Config wiring flags (no business logic)
    parser.add_argument(
        "--config",
        default=None,
        help="Path to YAML config file.",
    )
    parser.add_argument(
        "--dotenv",
        default=None,
        help="Path to .env file.",
    )
    parser.add_argument(
        "--site-dir",
        default=None,
        help="Override site definitions directory.",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Override log level.",
    )
    parser.add_argument(
        "--log-format",
        default=None,
        choices=["json", "console"],
        help="Override log format.",
    )

    return parser.parse_args(argv)


def _json_default(value: Any) -> Any:
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, Enum):
        return value.value
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def results_to_json(results: dict[str, SearchResult]) -> str:
    """Render search envelopes keyed by site id as JSON."""
    payload = {
        site_id: {
            "status": result.status.value,
            "data": [dataclasses.asdict(t) for t in result.data],
        }
        for site_id, result in results.items()
    }
    return json.dumps(payload, default=_json_default, ensure_ascii=False, indent=2)


async def run_search(
    config: AppConfig,
    keywords: str,
    site_ids: list[str] | None = None,
) -> dict[str, SearchResult]:
    definitions = discover_site_definitions(config.sites.site_dir)
    stray = sorted(set(config.sites.overrides) - set(definitions))
    if stray:
        log.warning("site_overrides_unused", sites=stray)

    if site_ids:
        unknown = sorted(set(site_ids) - set(definitions))
        if unknown:
            raise SiteDefinitionError(f"Unknown site id(s): {', '.join(unknown)}")
        definitions = {k: v for k, v in definitions.items() if k in site_ids}

    client = build_http_client(config)
    try:
        sites = [
            BittorrentSite(
                metadata, config.user_config_for(site_id), http_client=client
            )
            for site_id, metadata in definitions.items()
        ]
        return await MultiSiteSearchUseCase(sites).execute(keywords)
    finally:
        await client.aclose()


def _cli_overrides(args: argparse.Namespace) -> dict[str, Any]:
    """Translate wiring flags into a sectioned config layer."""
    overrides: dict[str, Any] = {}
    if args.site_dir:
        overrides.setdefault("sites", {})["site_dir"] = args.site_dir
    if args.log_level:
        overrides.setdefault("logging", {})["level"] = args.log_level
    if args.log_format:
        overrides.setdefault("logging", {})["format"] = args.log_format
    return overrides


def start(argv: Iterable[str] | None = None, out: TextIO | None = None) -> int:
    """
    Process entrypoint.

    Loads config exactly once, searches every selected site and prints the
    results as JSON on stdout.
    """

    if argv is None:
        argv = sys.argv[1:]
    out = out or sys.stdout

    args = _parse_args(argv)

    config = load_config(
        config_path=Path(args.config) if args.config else None,
        dotenv_path=Path(args.dotenv) if args.dotenv else None,
        cli_overrides=_cli_overrides(args),
    )

    configure_logging(config)

    try:
        results = asyncio.run(run_search(config, args.keywords, args.sites))
    except (SiteDefinitionError, SiteConfigurationError) as e:
        log.error("site_definitions_invalid", error_message=str(e))
        return 2

    out.write(results_to_json(results) + "\n")
    return 0


if __name__ == "__main__":
    raise SystemExit(start())
