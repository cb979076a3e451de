"""Pydantic configuration models.

The model mirrors the YAML file section by section::

    app_name: sievarr
    environment: dev
    sites:
      site_dir: ./sites
      overrides:
        demo: {url: "https://mirror.example/", allowSearch: false}
    http: {timeout_seconds: 15.0, follow_redirects: true, user_agent: ...}
    logging: {level: INFO, format: console}
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from sievarr.infrastructure.sites.schema import SiteUserConfig

Environment = Literal["dev", "test", "prod"]
LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR"]
LogFormat = Literal["json", "console"]


def _expand_path(value: Any) -> Any:
    # No filesystem access here; the site loader reports missing directories.
    if isinstance(value, (str, Path)):
        return Path(value).expanduser()
    return value


class _Section(BaseModel):
    model_config = ConfigDict(extra="forbid")


class SitesSettings(_Section):
    site_dir: Path = Path("./sites")
    # Per-site user configuration keyed by site id
    overrides: dict[str, SiteUserConfig] = Field(default_factory=dict)

    @field_validator("site_dir", mode="before")
    @classmethod
    def _validate_site_dir(cls, v: Any) -> Any:
        return _expand_path(v)


class HttpSettings(_Section):
    timeout_seconds: float = Field(default=15.0, gt=0)
    follow_redirects: bool = True
    user_agent: str = "Sievarr/0.1.0"


class LoggingSettings(_Section):
    level: LogLevel = "INFO"
    # None: derived from the environment
    format: Optional[LogFormat] = None


class AppConfig(BaseModel):
    """Validated, final application configuration."""

    app_name: str = "sievarr"
    environment: Environment = "dev"
    sites: SitesSettings = Field(default_factory=SitesSettings)
    http: HttpSettings = Field(default_factory=HttpSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)

    @model_validator(mode="after")
    def _derive_log_format(self) -> "AppConfig":
        if self.logging.format is None:
            self.logging.format = "json" if self.environment == "prod" else "console"
        return self

    def user_config_for(self, site_id: str) -> SiteUserConfig | None:
        return self.sites.overrides.get(site_id)


class _SitesEnv(BaseModel):
    site_dir: Optional[Path] = None


class _HttpEnv(BaseModel):
    timeout_seconds: Optional[float] = None
    follow_redirects: Optional[bool] = None
    user_agent: Optional[str] = None


class _LoggingEnv(BaseModel):
    level: Optional[LogLevel] = None
    format: Optional[LogFormat] = None


class EnvOverrides(BaseSettings):
    """
    ``SIEVARR_*`` environment variables; ``__`` separates section and key.

    - SIEVARR_ENVIRONMENT=prod
    - SIEVARR_SITES__SITE_DIR=/srv/sites
    - SIEVARR_HTTP__TIMEOUT_SECONDS=30
    - SIEVARR_LOGGING__LEVEL=DEBUG
    """

    model_config = SettingsConfigDict(
        env_prefix="SIEVARR_",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
    )

    app_name: Optional[str] = None
    environment: Optional[Environment] = None
    sites: _SitesEnv = Field(default_factory=_SitesEnv)
    http: _HttpEnv = Field(default_factory=_HttpEnv)
    logging: _LoggingEnv = Field(default_factory=_LoggingEnv)

    def to_update_dict(self) -> dict[str, Any]:
        """Only the values that were actually set, in the sectioned shape."""
        return self.model_dump(exclude_none=True)
