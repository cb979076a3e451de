"""Layered configuration loading.

Precedence, lowest first: model defaults, YAML file, environment (including
an optional ``.env`` file), CLI overrides.  Every layer uses the sectioned
shape of :class:`AppConfig`.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Mapping

import yaml
from dotenv import load_dotenv

from sievarr.infrastructure.common.merging import deep_merge

from .schema import AppConfig, EnvOverrides


def _read_yaml_config(config_path: Path) -> dict[str, Any]:
    if not config_path.is_file():
        raise FileNotFoundError(config_path)
    parsed = yaml.safe_load(config_path.read_text(encoding="utf-8"))
    if parsed is None:
        return {}
    if not isinstance(parsed, dict):
        raise ValueError(
            f"{config_path}: config root must be a mapping, got {type(parsed).__name__}"
        )
    return parsed


def load_config(
    *,
    config_path: Path | None = None,
    dotenv_path: Path | None = None,
    cli_overrides: Mapping[str, Any] | None = None,
) -> AppConfig:
    """Merge all configuration layers and validate the result.

    Never creates files or directories.

    Raises:
        FileNotFoundError: *config_path* or *dotenv_path* does not exist.
        ValueError: the YAML root is not a mapping, or validation fails.
    """
    if dotenv_path is not None:
        if not dotenv_path.is_file():
            raise FileNotFoundError(dotenv_path)
        # Variables already set in the process win over the file
        load_dotenv(dotenv_path, override=False)

    layers: list[Mapping[str, Any]] = []
    if config_path is not None:
        layers.append(_read_yaml_config(config_path))
    layers.append(EnvOverrides().to_update_dict())
    if cli_overrides:
        layers.append(cli_overrides)

    merged: dict[str, Any] = {}
    for layer in layers:
        deep_merge(merged, layer)
    return AppConfig.model_validate(merged)
