"""
cardtrace.config - Configuration loading and defaults

Configuration lives in ``.cardtrace.toml``, found by walking up from the
working directory. Values from the file are merged over DEFAULT_CONFIG,
then ``CARDTRACE_<SECTION>_<KEY>`` environment variables are applied.
"""

from __future__ import annotations

import copy
import json
import logging
import os
from pathlib import Path
from typing import Any

import tomlkit
from tomlkit.exceptions import ParseError
from tomlkit.toml_document import TOMLDocument

from cardtrace.config.defaults import CONFIG_FILE_NAME, DEFAULT_CONFIG

logger = logging.getLogger(__name__)

ENV_PREFIX = "CARDTRACE_"


class ConfigError(ValueError):
    """Raised when a configuration file cannot be parsed."""


def parse_toml_document(content: str) -> TOMLDocument:
    """Parse TOML preserving comments and layout, for round-trip editing.

    Raises:
        ConfigError: If the content is not valid TOML.
    """
    try:
        return tomlkit.parse(content)
    except ParseError as e:
        raise ConfigError(f"Invalid TOML: {e}") from e


def parse_toml(content: str) -> dict[str, Any]:
    """Parse TOML into plain Python dicts and lists."""
    return parse_toml_document(content).unwrap()


def find_config_file(start: Path) -> Path | None:
    """Find ``.cardtrace.toml`` in ``start`` or any parent directory.

    Args:
        start: Directory to start searching from.

    Returns:
        Path to the config file, or None if not found.
    """
    current = start.resolve()
    while True:
        candidate = current / CONFIG_FILE_NAME
        if candidate.is_file():
            return candidate
        if current == current.parent:
            return None
        current = current.parent


def merge_configs(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Deep-merge ``override`` into a copy of ``base``."""
    result = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(result.get(key), dict):
            result[key] = merge_configs(result[key], value)
        else:
            result[key] = copy.deepcopy(value)
    return result


def _try_parse_env_value(value: str) -> Any:
    """Interpret an environment value as bool, int, JSON array/object, or string."""
    lowered = value.lower()
    if lowered == "true":
        return True
    if lowered == "false":
        return False
    try:
        return int(value)
    except ValueError:
        pass
    if value.startswith(("[", "{")):
        try:
            return json.loads(value)
        except json.JSONDecodeError:
            return value
    return value


def _apply_env_overrides(config: dict[str, Any]) -> dict[str, Any]:
    """Apply ``CARDTRACE_<SECTION>_<KEY>`` variables to known sections.

    The section is matched against the config's existing top-level keys,
    so multi-word keys such as ``CARDTRACE_CONVERSION_MAX_TITLE_LENGTH``
    map to ``conversion.max_title_length``.
    """
    for env_key, raw in os.environ.items():
        if not env_key.startswith(ENV_PREFIX):
            continue
        rest = env_key[len(ENV_PREFIX):].lower()
        for section in config:
            prefix = f"{section}_"
            if rest.startswith(prefix) and isinstance(config[section], dict):
                key = rest[len(prefix):]
                config[section][key] = _try_parse_env_value(raw)
                logger.debug("Config override from %s: %s.%s", env_key, section, key)
                break
    return config


def load_config(config_path: Path | None) -> dict[str, Any]:
    """Load configuration, merged over defaults, with env overrides.

    Args:
        config_path: TOML file to load, or None for defaults only.

    Raises:
        ConfigError: If the file is not valid TOML.
        OSError: If the file cannot be read.
    """
    config = copy.deepcopy(DEFAULT_CONFIG)
    if config_path is not None:
        logger.debug("Loading config from %s", config_path)
        config = merge_configs(config, parse_toml(config_path.read_text(encoding="utf-8")))
    return _apply_env_overrides(config)


def get_config(config_path: Path | None = None, start: Path | None = None) -> dict[str, Any]:
    """Load the explicit config file, or the nearest one above ``start``."""
    if config_path is None:
        config_path = find_config_file(start or Path.cwd())
    return load_config(config_path)


__all__ = [
    "CONFIG_FILE_NAME",
    "ConfigError",
    "DEFAULT_CONFIG",
    "find_config_file",
    "get_config",
    "load_config",
    "merge_configs",
    "parse_toml",
    "parse_toml_document",
]
