"""HTTP request gateway for site definitions.

Turns a request config dict (``url``, ``base_url``, ``method``, ``params``,
``data``, ``json``, ``headers``, ``response_type``) into one httpx call
and returns the decoded payload.  The ``httpx.AsyncClient`` is injected;
the gateway never owns or closes it.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Any

import httpx
import structlog

from sievarr.domain.sites.exceptions import (
    NeedLoginError,
    SiteParseError,
    SiteTransportError,
)
from sievarr.infrastructure.common.cf_email import CF_EMAIL_MARKER, unmask_cf_emails
from sievarr.infrastructure.common.html_selectors import parse_html
from sievarr.infrastructure.common.urls import is_absolute_http, url_join

log = structlog.get_logger(__name__)

RESPONSE_TYPES = ("document", "json", "text")


@dataclass
class SiteResponse:
    """Decoded response handed to extraction and login checks."""

    status_code: int
    reason: str
    data: Any
    headers: Mapping[str, str] = field(default_factory=dict)
    url: str = ""


LoginCheck = Callable[[SiteResponse], bool]


def _target_url(config: Mapping[str, Any]) -> str:
    url = str(config.get("url") or "/")
    if is_absolute_http(url):
        return url
    return url_join(str(config.get("base_url") or ""), url)


class SiteRequestGateway:
    """Execute request configs against one site."""

    def __init__(
        self,
        client: httpx.AsyncClient,
        *,
        base_url: str,
        login_check: LoginCheck | None = None,
    ) -> None:
        self._client = client
        self.base_url = base_url
        self._login_check = login_check

    def _with_defaults(self, config: Mapping[str, Any]) -> dict[str, Any]:
        out = dict(config)
        if not out.get("base_url"):
            out["base_url"] = self.base_url
        if not out.get("url"):
            out["url"] = "/"
        return out

    async def _send(self, config: Mapping[str, Any]) -> httpx.Response:
        method = str(config.get("method") or "GET").upper()
        url = _target_url(config)

        kwargs: dict[str, Any] = {}
        if config.get("params"):
            kwargs["params"] = config["params"]
        if config.get("headers"):
            kwargs["headers"] = config["headers"]
        if config.get("json") is not None:
            kwargs["json"] = config["json"]
        data = config.get("data")
        if data:
            if isinstance(data, (str, bytes)):
                kwargs["content"] = data
            else:
                kwargs["data"] = data

        log.debug("site_request", method=method, url=url)
        try:
            resp = await self._client.request(method, url, **kwargs)
            resp.raise_for_status()
        except httpx.HTTPStatusError as exc:
            status = exc.response.status_code
            if status >= 400:
                log.warning("site_http_error", url=url, status=status)
                raise SiteTransportError(
                    f"Network Error: {status} {exc.response.reason_phrase}",
                    status_code=status,
                ) from exc
            # Informational and redirect statuses pass through
            return exc.response
        except httpx.RequestError as exc:
            log.warning("site_request_failed", url=url, error=str(exc))
            raise SiteTransportError(f"Network Error: {exc}") from exc
        return resp

    @staticmethod
    def _decode(resp: httpx.Response, response_type: str) -> Any:
        if response_type == "json":
            try:
                return resp.json()
            except ValueError as exc:
                raise SiteParseError(f"Invalid JSON from {resp.url}") from exc
        if response_type == "text":
            return resp.text

        text = resp.text
        soup = parse_html(text)
        if CF_EMAIL_MARKER in text:
            replaced = unmask_cf_emails(soup)
            log.debug("cf_emails_unmasked", url=str(resp.url), count=replaced)
        return soup

    async def request(
        self,
        config: Mapping[str, Any],
        check_login: bool = True,
    ) -> SiteResponse:
        """Send *config* and return the decoded response.

        Raises:
            SiteTransportError: HTTP status >= 400 or no response at all.
            SiteParseError: a JSON response could not be decoded and the
                login check (if any) passed.
            NeedLoginError: *check_login* is set and the login check fails.
        """
        config = self._with_defaults(config)
        response_type = str(config.get("response_type") or "document")
        if response_type not in RESPONSE_TYPES:
            response_type = "document"

        resp = await self._send(config)
        decode_error: SiteParseError | None = None
        try:
            data = self._decode(resp, response_type)
        except SiteParseError as exc:
            # The login check still sees the body, e.g. an HTML login form
            data = resp.text
            decode_error = exc

        response = SiteResponse(
            status_code=resp.status_code,
            reason=resp.reason_phrase,
            data=data,
            headers=dict(resp.headers),
            url=str(resp.url),
        )

        if (
            check_login
            and self._login_check is not None
            and not self._login_check(response)
        ):
            log.info("site_login_required", url=response.url)
            raise NeedLoginError(f"Not logged in at {response.url}")
        if decode_error is not None:
            raise decode_error
        return response
