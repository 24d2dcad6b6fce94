# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/mesonode/config/loader.py
from __future__ import annotations

import logging
import os
from pathlib import Path

import yaml
from pydantic import ValidationError

from mesonode.errors import ConfigError
from .models import ProvisionSettings

log = logging.getLogger("mesonode")

DEFAULT_CONFIG_PATH = Path("/etc/mesonode/mesonode.yaml")


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


def _find_config_file(explicit: str | Path | None) -> Path | None:
    """
    Locate the settings file using this priority:

    1. explicit path (--config)
    2. MESONODE_CONFIG environment variable
    3. /etc/mesonode/mesonode.yaml
    """
    if explicit:
        p = Path(explicit)
        if not p.is_file():
            raise ConfigError(f"config file {p} does not exist")
        return p

    env = os.environ.get("MESONODE_CONFIG")
    if env:
        p = Path(env)
        if p.is_file():
            return p
        log.warning("MESONODE_CONFIG=%s does not exist, using defaults", env)
        return None

    if DEFAULT_CONFIG_PATH.is_file():
        return DEFAULT_CONFIG_PATH
    return None


def _load_yaml(path: Path) -> dict:
    """Load a YAML file, expanding ${ENV_VAR} references."""
    raw = path.read_text()
    expanded = os.path.expandvars(raw)
    try:
        data = yaml.safe_load(expanded) or {}
    except yaml.YAMLError as exc:
        raise ConfigError(f"{path}: invalid YAML: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError(f"{path}: top level must be a mapping")
    return data


def load_settings(path: str | Path | None = None) -> ProvisionSettings:
    """
    Load provisioning settings.

    The file only needs the keys it changes; everything else keeps the
    built-in defaults (including the per-family path tables).
    """
    config_path = _find_config_file(path)
    data = ProvisionSettings().model_dump(mode="json")

    if config_path:
        log.debug("Loading settings from %s", config_path)
        _deep_merge(data, _load_yaml(config_path))
    else:
        log.debug("No settings file found, using built-in defaults")

    try:
        return ProvisionSettings.model_validate(data)
    except ValidationError as exc:
        raise ConfigError(f"invalid settings: {exc}") from exc
