"""Runtime selection: start the transport named by the configuration."""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING

from stencila_plugin.config import ConfigError
from stencila_plugin.server import ServerRunner
from stencila_plugin.transports import StdioTransport, create_app

if TYPE_CHECKING:
    from stencila_plugin.config import PluginConfig
    from stencila_plugin.plugin import Plugin

logger = logging.getLogger(__name__)


async def serve_stdio(plugin: Plugin) -> None:
    """Serve over standard I/O until input ends."""
    try:
        await StdioTransport(plugin.dispatcher).serve()
    finally:
        await plugin.shutdown()


async def serve_http(plugin: Plugin, config: PluginConfig) -> None:
    """Serve over HTTP until a shutdown signal arrives."""
    token = config.http.token
    if token is None:
        raise ConfigError("A bearer token is required for the http transport")

    app = create_app(
        plugin.dispatcher,
        token=token.get_secret_value(),
        origin_policy=config.http.origin_policy,
    )
    runner = ServerRunner(
        app,
        host=config.http.host,
        port=config.http.port,
        on_shutdown=plugin.shutdown,
    )
    await runner.run()


def run(plugin: Plugin, config: PluginConfig) -> None:
    """Run a plugin over the configured transport.

    Raises:
        ConfigError: If the transport is unknown or incompletely configured.
    """
    logger.info(
        "plugin_starting",
        extra={
            "transport": config.transport,
            "methods": plugin.dispatcher.methods,
        },
    )

    if config.transport == "stdio":
        asyncio.run(serve_stdio(plugin))
    elif config.transport == "http":
        asyncio.run(serve_http(plugin, config))
    else:
        raise ConfigError(f"Unknown protocol: {config.transport}")
