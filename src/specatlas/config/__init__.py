"""
specatlas.config - Configuration loading and defaults

Configuration comes from three layers, later ones winning:

1. DEFAULT_CONFIG
2. The nearest ``.specatlas.toml`` (or an explicit --config path)
3. ``SPECATLAS_<SECTION>_<KEY>`` environment variables
"""

from __future__ import annotations

import copy
import json
import logging
import os
from pathlib import Path
from typing import Any

import tomlkit
from tomlkit.exceptions import TOMLKitError

from specatlas.config.defaults import DEFAULT_CONFIG
from specatlas.errors import ConfigError

logger = logging.getLogger(__name__)

CONFIG_FILENAME = ".specatlas.toml"
ENV_PREFIX = "SPECATLAS_"

__all__ = [
    "CONFIG_FILENAME",
    "DEFAULT_CONFIG",
    "find_config_file",
    "get_config",
    "get_spec_directory",
    "load_config",
    "merge_configs",
    "parse_toml",
]


def find_config_file(start: Path) -> Path | None:
    """Find .specatlas.toml in `start` or any parent directory.

    Args:
        start: Directory to begin the search from

    Returns:
        Path to the config file, or None if none exists
    """
    current = Path(start).resolve()
    for directory in (current, *current.parents):
        candidate = directory / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
    return None


def parse_toml(content: str) -> dict[str, Any]:
    """Parse TOML text into plain Python dicts.

    Raises:
        ConfigError: If the text is not valid TOML.
    """
    try:
        return tomlkit.parse(content).unwrap()
    except TOMLKitError as e:
        raise ConfigError(f"Invalid TOML: {e}") from e


def load_config(config_path: Path) -> dict[str, Any]:
    """Load a config file and merge it over the defaults.

    Args:
        config_path: Path to the TOML file

    Returns:
        The merged configuration, with environment overrides applied

    Raises:
        ConfigError: If the file cannot be read or parsed.
    """
    try:
        content = Path(config_path).read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Cannot read config file {config_path}: {e}") from e

    try:
        user_config = parse_toml(content)
    except ConfigError as e:
        raise ConfigError(f"{config_path}: {e}") from e

    logger.debug("Loaded configuration from %s", config_path)
    merged = merge_configs(DEFAULT_CONFIG, user_config)
    return _apply_env_overrides(merged)


def merge_configs(defaults: dict[str, Any], overrides: dict[str, Any]) -> dict[str, Any]:
    """Deep-merge `overrides` into a copy of `defaults`.

    Nested tables are merged key by key; any other value replaces the default.
    """
    result = copy.deepcopy(defaults)
    for key, value in overrides.items():
        if isinstance(value, dict) and isinstance(result.get(key), dict):
            result[key] = merge_configs(result[key], value)
        else:
            result[key] = copy.deepcopy(value)
    return result


def get_config(
    config_path: Path | None = None,
    start: Path | None = None,
) -> dict[str, Any]:
    """Resolve the effective configuration.

    Args:
        config_path: Explicit config file (e.g. from --config)
        start: Directory to search upward from when no path is given

    Returns:
        Configuration dictionary

    Raises:
        ConfigError: If an explicit config file does not exist or is malformed.
    """
    if config_path is not None:
        if not Path(config_path).is_file():
            raise ConfigError(f"Config file not found: {config_path}")
        return load_config(config_path)

    found = find_config_file(start or Path.cwd())
    if found is not None:
        return load_config(found)
    return _apply_env_overrides(copy.deepcopy(DEFAULT_CONFIG))


def get_spec_directory(
    override: Path | None,
    config: dict[str, Any],
    base: Path | None = None,
) -> Path:
    """Resolve the spec directory.

    An explicit override (from --spec-dir) wins; otherwise
    ``directories.specs`` is taken relative to `base`.
    """
    if override is not None:
        return Path(override)
    specs = config.get("directories", {}).get("specs", DEFAULT_CONFIG["directories"]["specs"])
    return (base or Path.cwd()) / specs


def _apply_env_overrides(config: dict[str, Any]) -> dict[str, Any]:
    """Apply SPECATLAS_<SECTION>_<KEY> environment variables.

    SPECATLAS_SEARCH_LIMIT=50 sets config["search"]["limit"] = 50. The
    section is the first underscore-separated word; the rest is the key.
    """
    for name, raw in os.environ.items():
        if not name.startswith(ENV_PREFIX):
            continue
        section, sep, key = name[len(ENV_PREFIX) :].lower().partition("_")
        if not sep or not section or not key:
            continue
        table = config.setdefault(section, {})
        if not isinstance(table, dict):
            continue
        table[key] = _try_parse_env_value(raw)
        logger.debug("Config %s.%s overridden from %s", section, key, name)
    return config


def _try_parse_env_value(value: str) -> Any:
    """Parse an environment variable value into a typed Python value.

    JSON arrays and objects, booleans, integers and floats are converted;
    anything else (including malformed JSON) is returned as the raw string.
    """
    stripped = value.strip()
    if stripped.startswith(("[", "{")):
        try:
            return json.loads(stripped)
        except json.JSONDecodeError:
            return value

    lowered = stripped.lower()
    if lowered == "true":
        return True
    if lowered == "false":
        return False

    try:
        return int(stripped)
    except ValueError:
        pass
    try:
        return float(stripped)
    except ValueError:
        return value
