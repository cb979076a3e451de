from .exceptions import (
    NeedLoginError,
    NoTorrentsError,
    SiteConfigurationError,
    SiteDefinitionError,
    SiteError,
    SiteParseError,
    SiteTransportError,
)

__all__ = [
    "NeedLoginError",
    "NoTorrentsError",
    "SiteConfigurationError",
    "SiteDefinitionError",
    "SiteError",
    "SiteParseError",
    "SiteTransportError",
]
