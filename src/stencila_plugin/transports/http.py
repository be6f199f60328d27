"""HTTP transport.

Accepts one JSON request per POST body and answers with one JSON response.
Every request passes these checks in order, and the first failure ends it:

1. Origin: peer address against the configured origin policy (403)
2. Authentication: ``Authorization: Bearer <token>`` (401)
3. Method and content type: ``POST`` with ``application/json`` (405)

Only then is the body read and handed to the dispatcher. The path is not
significant.
"""

from __future__ import annotations

import hmac
import json
import logging
from typing import TYPE_CHECKING

from fastapi import FastAPI, Request, Response

from stencila_plugin.rpc.protocol import ErrorCode

if TYPE_CHECKING:
    from stencila_plugin.config import OriginPolicy
    from stencila_plugin.transports.stdio import RequestHandler

logger = logging.getLogger(__name__)

LOOPBACK_ADDRESSES = frozenset({"127.0.0.1", "::1"})

ALL_METHODS = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]

INTERNAL_ERROR_BODY = json.dumps(
    {
        "jsonrpc": "2.0",
        "error": {"code": ErrorCode.INTERNAL_ERROR, "message": "Internal error"},
        "id": None,
    }
)


def origin_allowed(address: str | None, policy: OriginPolicy) -> bool:
    """Check a peer address against the origin policy.

    ``reject-loopback`` refuses loopback peers and accepts all others.
    ``loopback-only`` accepts loopback peers only.
    """
    is_loopback = address in LOOPBACK_ADDRESSES
    if policy == "loopback-only":
        return is_loopback
    return not is_loopback


def bearer_token(authorization: str | None) -> str | None:
    """Extract the token from an ``Authorization: Bearer <token>`` header."""
    if not authorization:
        return None
    parts = authorization.split(" ")
    if len(parts) < 2 or parts[0] != "Bearer" or not parts[1]:
        return None
    return parts[1]


def token_matches(received: str | None, expected: str) -> bool:
    """Compare tokens byte for byte, in constant time."""
    if received is None:
        return False
    return hmac.compare_digest(received.encode(), expected.encode())


def is_json(content_type: str | None) -> bool:
    if not content_type:
        return False
    media_type = content_type.split(";", 1)[0].strip().lower()
    return media_type == "application/json"


def create_app(
    dispatcher: RequestHandler,
    token: str,
    origin_policy: OriginPolicy = "reject-loopback",
) -> FastAPI:
    """Create the FastAPI application serving one dispatcher.

    Args:
        dispatcher: Handles each request body.
        token: Bearer token every request must present.
        origin_policy: Which peer addresses are accepted.

    Returns:
        The configured application.
    """
    if not token:
        raise ValueError("A bearer token is required")

    if origin_policy == "reject-loopback":
        logger.warning(
            "http_origin_rejects_loopback",
            extra={"policy": origin_policy},
        )

    app = FastAPI(
        title="Stencila plugin",
        description="Plugin RPC endpoint",
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )
    app.state.dispatcher = dispatcher
    app.state.origin_policy = origin_policy

    @app.api_route("/{path:path}", methods=ALL_METHODS)
    async def handle(request: Request) -> Response:
        address = request.client.host if request.client else None
        if not origin_allowed(address, origin_policy):
            logger.info("http_origin_denied", extra={"address": address})
            return Response("Access denied", status_code=403, media_type="text/plain")

        received = bearer_token(request.headers.get("authorization"))
        if not token_matches(received, token):
            logger.info("http_auth_failed", extra={"address": address})
            return Response(
                "Invalid or missing token", status_code=401, media_type="text/plain"
            )

        if request.method != "POST" or not is_json(
            request.headers.get("content-type")
        ):
            return Response(status_code=405)

        try:
            chunks: list[bytes] = []
            async for chunk in request.stream():
                chunks.append(chunk)
            response_json = await dispatcher.handle(b"".join(chunks))
        except Exception:
            # Dispatcher failures are already envelopes; this is everything else
            logger.exception("http_request_failed")
            return Response(
                INTERNAL_ERROR_BODY, status_code=500, media_type="application/json"
            )

        return Response(response_json, status_code=200, media_type="application/json")

    return app
