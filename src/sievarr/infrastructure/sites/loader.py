from __future__ import annotations

from pathlib import Path

import structlog
import yaml
from pydantic import ValidationError

from sievarr.domain.sites.exceptions import SiteDefinitionError

from .schema import SiteMetadata

log = structlog.get_logger(__name__)

SITE_FILE_SUFFIXES = (".yml", ".yaml")


def load_site_definition(path: Path) -> SiteMetadata:
    """Load and validate a YAML site definition."""
    try:
        raw = path.read_text(encoding="utf-8")
        data = yaml.safe_load(raw)
        if data is None:
            raise SiteDefinitionError("YAML file is empty")
        if not isinstance(data, dict):
            raise SiteDefinitionError("YAML root must be a mapping/object")

        metadata = SiteMetadata.model_validate(data)
        if not metadata.id:
            raise SiteDefinitionError("Site definition must have a non-empty 'id'")
        return metadata
    except (OSError, UnicodeDecodeError) as e:
        log.error(
            "site_load_failed",
            site_file=str(path),
            error_type=type(e).__name__,
            error_message=str(e),
        )
        raise SiteDefinitionError(str(e)) from e
    except ValidationError as e:
        log.error(
            "site_validation_failed",
            site_file=str(path),
            error_type="ValidationError",
            error_details=e.errors(),
        )
        raise SiteDefinitionError(str(e)) from e
    except yaml.YAMLError as e:
        log.error(
            "site_validation_failed",
            site_file=str(path),
            error_type=type(e).__name__,
            error_message=str(e),
        )
        raise SiteDefinitionError(str(e)) from e


def discover_site_definitions(directory: Path) -> dict[str, SiteMetadata]:
    """Load every ``*.yml``/``*.yaml`` definition in *directory*, keyed by id."""
    if not directory.is_dir():
        raise SiteDefinitionError(f"Site directory does not exist: {directory}")

    sites: dict[str, SiteMetadata] = {}
    for path in sorted(directory.iterdir()):
        if path.suffix not in SITE_FILE_SUFFIXES or not path.is_file():
            continue
        metadata = load_site_definition(path)
        if metadata.id in sites:
            raise SiteDefinitionError(
                f"Duplicate site id {metadata.id!r} in {path.name}"
            )
        sites[metadata.id] = metadata

    log.info("sites_discovered", directory=str(directory), count=len(sites))
    return sites
