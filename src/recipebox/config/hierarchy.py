"""Configuration hierarchy — merges sources in priority order.

Precedence (later overrides earlier):
  1. Package defaults
  2. Global config   (~/.recipebox/config.yaml)
  3. Project config   (recipebox.yaml, nearest one from cwd upward)
  4. Environment variables (RECIPEBOX_<KEY>)
  5. Runtime arguments that are not None
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any

import yaml

from recipebox.config.defaults import get_defaults

logger = logging.getLogger(__name__)

_GLOBAL_CONFIG_PATH = Path.home() / ".recipebox" / "config.yaml"
_PROJECT_CONFIG_NAME = "recipebox.yaml"
_ENV_PREFIX = "RECIPEBOX_"

_TRUTHY = {"1", "true", "yes", "on"}


def load_config_hierarchy(**runtime_overrides: Any) -> dict[str, Any]:
    """Load and merge configuration from all sources into one flat dict."""
    config = get_defaults()

    for path in (_GLOBAL_CONFIG_PATH, _find_project_config()):
        if path is not None:
            config.update(_load_yaml_config(path) or {})

    config.update(_load_env_vars())
    config.update({k: v for k, v in runtime_overrides.items() if v is not None})
    return config


def _load_yaml_config(path: Path) -> dict[str, Any] | None:
    if not path.is_file():
        return None
    try:
        with open(path) as f:
            data = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        logger.warning("Failed to load config %s: %s", path, e)
        return None
    if not isinstance(data, dict):
        logger.warning("Config file %s is not a mapping, ignoring", path)
        return None
    return data


def _find_project_config() -> Path | None:
    cwd = Path.cwd()
    for parent in [cwd, *cwd.parents]:
        candidate = parent / _PROJECT_CONFIG_NAME
        if candidate.is_file():
            return candidate
    return None


def _load_env_vars() -> dict[str, Any]:
    """RECIPEBOX_<KEY> for every key that has a package default."""
    result: dict[str, Any] = {}
    for key in get_defaults():
        value = os.environ.get(_ENV_PREFIX + key.upper())
        if value is not None:
            result[key] = _coerce_env_value(key, value)
    return result


def _coerce_env_value(key: str, value: str) -> Any:
    """Convert an env string to the type of the key's default value.

    Unparseable numbers are passed through as strings so Settings
    validation reports them.
    """
    default = get_defaults().get(key)
    if isinstance(default, bool):
        return value.strip().lower() in _TRUTHY
    if isinstance(default, (int, float)):
        try:
            return type(default)(value)
        except ValueError:
            logger.warning("Cannot convert %s%s=%r to %s", _ENV_PREFIX, key.upper(), value,
                           type(default).__name__)
    return value
