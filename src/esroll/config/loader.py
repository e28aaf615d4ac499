# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/esroll/config/loader.py

import logging
import os
import yaml
from pathlib import Path
from typing import Optional

from .models import RollingRestartConfig

log = logging.getLogger("esroll")


class ConfigError(RuntimeError):
    pass


def _deep_merge(base: dict, override: dict) -> dict:
    """
    Recursively merge *override* into *base* (mutates base).
    Only overwrites when the override value is non-empty.
    """
    for key, value in override.items():
        if (
            key in base
            and isinstance(base[key], dict)
            and isinstance(value, dict)
        ):
            _deep_merge(base[key], value)
        else:
            if value not in (None, ""):
                base[key] = value
    return base


def _find_overrides_file() -> Path | None:
    env = os.environ.get("ESROLL_OVERRIDES_FILE")
    if not env:
        return None
    p = Path(env)
    if p.is_file():
        return p
    log.warning("ESROLL_OVERRIDES_FILE=%s does not exist, skipping", env)
    return None


def _load_yaml(path: Path) -> dict:
    """Load a YAML file, expanding ${ENV_VAR} references."""
    raw = path.read_text()
    expanded = os.path.expandvars(raw)
    data = yaml.safe_load(expanded) or {}
    if not isinstance(data, dict):
        raise ConfigError(f"{path}: expected a mapping at the top level")
    return data


def load_config(path: str | Path, overrides: Optional[dict] = None) -> RollingRestartConfig:
    """
    Load and validate a rolling restart config.

    Merge order (later wins, empty values never overwrite):
      1. the YAML file at *path*
      2. the file named by ``ESROLL_OVERRIDES_FILE``, if set
      3. *overrides* (CLI flags)

    ``${ENV_VAR}`` placeholders are resolved with ``os.path.expandvars``.
    """
    path = Path(path)
    if not path.is_file():
        raise ConfigError(f"config file not found: {path}")
    data = _load_yaml(path)

    overrides_path = _find_overrides_file()
    if overrides_path:
        log.debug("Merging overrides from %s", overrides_path)
        _deep_merge(data, _load_yaml(overrides_path))

    if overrides:
        _deep_merge(data, overrides)

    return RollingRestartConfig.model_validate(data)
