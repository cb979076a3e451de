"""Shared fixtures for integration tests.

These tests use real infrastructure components (YAML loader, config
loader, BittorrentSite) with mocked HTTP via respx.
"""

from __future__ import annotations

import httpx
import pytest


@pytest.fixture()
async def http_client():
    """Real httpx.AsyncClient for use with respx mocking."""
    client = httpx.AsyncClient()
    yield client
    await client.aclose()
