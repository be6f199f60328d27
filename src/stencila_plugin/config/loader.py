"""Configuration loading from TOML files and environment variables.

Precedence, lowest first: TOML file, environment variables, explicit
overrides (command line arguments).
"""

import os
import tomllib
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from stencila_plugin.config.models import ConfigError, PluginConfig

# (section, key, env var); section None means top level
ENV_MAPPINGS: list[tuple[str | None, str, str]] = [
    (None, "transport", "STENCILA_TRANSPORT"),
    (None, "log_level", "STENCILA_PLUGIN_LOG_LEVEL"),
    ("http", "host", "STENCILA_HOST"),
    ("http", "port", "STENCILA_PORT"),
    ("http", "token", "STENCILA_TOKEN"),
    ("http", "origin_policy", "STENCILA_ORIGIN_POLICY"),
]


def _section(config: dict[str, Any], name: str | None) -> dict[str, Any]:
    if name is None:
        return config
    section = config.get(name)
    if not isinstance(section, dict):
        section = {}
        config[name] = section
    return section


def _resolve_env(config: dict[str, Any]) -> dict[str, Any]:
    """Apply environment variables over file values."""
    for section_name, key, env_var in ENV_MAPPINGS:
        value = os.environ.get(env_var)
        if value:
            _section(config, section_name)[key] = value
    return config


def _apply_overrides(
    config: dict[str, Any], overrides: dict[str, Any]
) -> dict[str, Any]:
    for section_name, key, _env_var in ENV_MAPPINGS:
        value = overrides.get(key)
        if value is not None:
            _section(config, section_name)[key] = value
    return config


def load_config(path: Path | None = None, **overrides: Any) -> PluginConfig:
    """Load plugin configuration.

    Args:
        path: Optional TOML file. Unlike the environment, a file is never
            searched for implicitly.
        overrides: Explicit values (transport, port, token, host,
            origin_policy, log_level); None values are ignored.

    Returns:
        Validated PluginConfig instance.

    Raises:
        FileNotFoundError: If ``path`` does not exist.
        ConfigError: If the file or the resulting values are invalid.
    """
    raw_config: dict[str, Any] = {}

    if path is not None:
        config_path = Path(path).expanduser()
        if not config_path.exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")
        try:
            with config_path.open("rb") as f:
                raw_config = tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            raise ConfigError(f"Invalid config file {config_path}: {e}") from e

    raw_config = _resolve_env(raw_config)
    raw_config = _apply_overrides(raw_config, overrides)

    try:
        return PluginConfig.model_validate(raw_config)
    except ValidationError as e:
        raise ConfigError(str(e)) from e
