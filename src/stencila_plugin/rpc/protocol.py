"""JSON-RPC style envelope codec.

Requests are ``{"id", "method", "params"}`` objects. Responses carry exactly
one of ``result`` or ``error`` and are serialized compactly, one object per
line (stdio) or per body (HTTP).
"""

import json
from dataclasses import dataclass, field
from typing import Any

from pydantic_core import to_jsonable_python

RequestId = int | float | str | None


# JSON-RPC 2.0 error codes
class ErrorCode:
    PARSE_ERROR = -32700
    INVALID_REQUEST = -32600
    METHOD_NOT_FOUND = -32601
    INVALID_PARAMS = -32602
    INTERNAL_ERROR = -32603


class DecodeError(ValueError):
    """Raised when raw input is not a well-formed request envelope."""


@dataclass
class RPCRequest:
    """Request envelope."""

    method: str
    params: dict[str, Any] = field(default_factory=dict)
    id: RequestId = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "method": self.method,
            "params": self.params,
        }

    def to_json(self) -> str:
        return _dumps(self.to_dict())

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "RPCRequest":
        return cls(
            method=data.get("method", ""),
            params=data.get("params") or {},
            id=data.get("id"),
        )


@dataclass
class RPCError:
    """Error member of a failure envelope."""

    code: int
    message: str

    def to_dict(self) -> dict[str, Any]:
        return {"code": self.code, "message": self.message}


@dataclass
class RPCResponse:
    """Response envelope."""

    id: RequestId
    result: Any = None
    error: RPCError | None = None

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = {"id": self.id}
        if self.error is not None:
            d["error"] = self.error.to_dict()
        else:
            # Always present, even when there is nothing to return
            d["result"] = self.result
        return d

    def to_json(self) -> str:
        return _dumps(self.to_dict())

    @classmethod
    def success(cls, id: RequestId, result: Any) -> "RPCResponse":
        return cls(id=id, result=result)

    @classmethod
    def error_response(cls, id: RequestId, code: int, message: str) -> "RPCResponse":
        return cls(id=id, error=RPCError(code=code, message=message))

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "RPCResponse":
        error = None
        if "error" in data:
            err = data["error"]
            error = RPCError(
                code=err.get("code", ErrorCode.INTERNAL_ERROR),
                message=err.get("message", "Unknown error"),
            )
        return cls(
            id=data.get("id"),
            result=data.get("result"),
            error=error,
        )


def _dumps(payload: dict[str, Any]) -> str:
    return json.dumps(payload, separators=(",", ":"), default=to_jsonable_python)


def decode_request(raw: str | bytes) -> RPCRequest:
    """Decode a raw request envelope.

    Args:
        raw: One line (stdio) or one body (HTTP) of text.

    Returns:
        The decoded request.

    Raises:
        DecodeError: If the input is not JSON, not an object, or has no
            method name. There is no partial parse.
    """
    try:
        payload = json.loads(raw)
    except (ValueError, RecursionError) as e:
        # ValueError covers JSONDecodeError, UnicodeDecodeError and the
        # int digit limit; RecursionError comes from deep nesting
        raise DecodeError(str(e)) from e

    if not isinstance(payload, dict):
        raise DecodeError("Request must be a JSON object")

    method = payload.get("method")
    if not isinstance(method, str) or not method:
        raise DecodeError("Request is missing a method name")

    params = payload.get("params")
    if params is None:
        params = {}
    elif not isinstance(params, dict):
        raise DecodeError("Request params must be a JSON object")

    request_id = payload.get("id")
    if isinstance(request_id, bool) or not isinstance(
        request_id, int | float | str | None
    ):
        raise DecodeError("Request id must be a number or a string")

    return RPCRequest(method=method, params=params, id=request_id)


def encode_success(id: RequestId, result: Any) -> str:
    """Encode a success envelope. ``None`` results are sent as ``null``."""
    return RPCResponse.success(id, result).to_json()


def encode_failure(id: RequestId, code: int, message: str) -> str:
    """Encode a failure envelope."""
    return RPCResponse.error_response(id, code, message).to_json()
