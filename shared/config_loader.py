"""Loads the central YAML config file used by the syncer and the API."""

import os

import yaml

from shared.errors import ConfigError


def load_yaml(path: str | None = None) -> dict:
    """Load YAML config from *path* and return it as a dict.

    The path defaults to ``config.yml`` and can be overridden via the
    ``CONFIG_PATH`` environment variable. A missing file yields an empty dict
    so every component can fall back to its defaults.
    """
    if path is None:
        path = os.environ.get("CONFIG_PATH", "config.yml")
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except FileNotFoundError:
        return {}
    except yaml.YAMLError as exc:
        raise ConfigError(f"invalid YAML in {path}: {exc}") from exc

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"{path} must contain a mapping at the top level")
    return data


def section(data: dict, name: str) -> dict:
    """Return the *name* section of a loaded config, or an empty dict."""
    value = data.get(name) or {}
    if not isinstance(value, dict):
        raise ConfigError(f"config section '{name}' must be a mapping")
    return value
