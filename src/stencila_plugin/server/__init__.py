"""HTTP serving for plugins."""

from stencila_plugin.server.runner import ServerRunner

__all__ = [
    "ServerRunner",
]
