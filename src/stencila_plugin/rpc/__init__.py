"""Request/response protocol shared by both transports.

Public API:
- Dispatcher: resolves wire method names to capabilities
- METHODS: the wire name table

Protocol:
- RPCRequest, RPCResponse, RPCError: envelope types
- decode_request, encode_success, encode_failure: codec
"""

from stencila_plugin.rpc.dispatcher import METHODS, Dispatcher, MethodSpec
from stencila_plugin.rpc.protocol import (
    DecodeError,
    ErrorCode,
    RPCError,
    RPCRequest,
    RPCResponse,
    decode_request,
    encode_failure,
    encode_success,
)

__all__ = [
    # Dispatch
    "Dispatcher",
    "METHODS",
    "MethodSpec",
    # Protocol
    "DecodeError",
    "ErrorCode",
    "RPCError",
    "RPCRequest",
    "RPCResponse",
    "decode_request",
    "encode_failure",
    "encode_success",
]
