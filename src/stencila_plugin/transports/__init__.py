"""Transports carrying request and response envelopes.

- StdioTransport: one envelope per line over standard I/O
- create_app: FastAPI application for the authenticated HTTP endpoint
"""

from stencila_plugin.transports.http import create_app
from stencila_plugin.transports.stdio import RequestHandler, StdioTransport

__all__ = [
    "RequestHandler",
    "StdioTransport",
    "create_app",
]
