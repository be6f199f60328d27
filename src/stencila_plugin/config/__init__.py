"""Configuration module."""

from stencila_plugin.config.loader import load_config
from stencila_plugin.config.models import (
    ConfigError,
    HttpConfig,
    OriginPolicy,
    PluginConfig,
    Transport,
)

__all__ = [
    "ConfigError",
    "HttpConfig",
    "OriginPolicy",
    "PluginConfig",
    "Transport",
    "load_config",
]
