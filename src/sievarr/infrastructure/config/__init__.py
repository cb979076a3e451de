from __future__ import annotations

from .load import load_config
from .schema import AppConfig, EnvOverrides, HttpSettings, LoggingSettings, SitesSettings

__all__ = [
    "AppConfig",
    "EnvOverrides",
    "HttpSettings",
    "LoggingSettings",
    "SitesSettings",
    "load_config",
]
