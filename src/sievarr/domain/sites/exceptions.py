"""Site engine exceptions."""

from __future__ import annotations


class SiteError(Exception):
    """Base class for all site engine errors."""


class SiteConfigurationError(SiteError):
    """Raised when a site definition cannot drive a search (e.g. no rows selector)."""


class SiteDefinitionError(SiteError):
    """Raised when a YAML site definition fails to load or validate."""


class NeedLoginError(SiteError):
    """Raised when the site reports that the session is not logged in."""


class NoTorrentsError(SiteError):
    """Raised when the page loaded but the rows selector matched nothing."""


class SiteTransportError(SiteError):
    """Raised on HTTP status >= 400 or when no response was received."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class SiteParseError(SiteError):
    """Raised when a response cannot be turned into rows."""
