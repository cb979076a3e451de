"""Factory for the engine's shared httpx client."""

from __future__ import annotations

import httpx
import structlog

from sievarr.infrastructure.config.schema import AppConfig

log = structlog.get_logger(__name__)


def build_http_client(config: AppConfig) -> httpx.AsyncClient:
    """Create the ``httpx.AsyncClient`` injected into every site instance.

    The caller owns the client and must ``aclose()`` it.
    """
    client = httpx.AsyncClient(
        timeout=httpx.Timeout(config.http.timeout_seconds),
        headers={"User-Agent": config.http.user_agent},
        follow_redirects=config.http.follow_redirects,
    )
    log.info("http_client_initialized", timeout=config.http.timeout_seconds)
    return client
