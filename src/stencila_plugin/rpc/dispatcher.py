"""Request dispatcher.

Turns one raw request into one raw response. Wire method names are resolved
through an explicit table (never by attribute lookup), parameters are
validated against a per-method schema and then passed positionally to the
capability in a fixed order.
"""

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel, ValidationError

from stencila_plugin.capabilities import Capability
from stencila_plugin.rpc.protocol import (
    DecodeError,
    ErrorCode,
    RPCRequest,
    decode_request,
    encode_failure,
    encode_success,
)

logger = logging.getLogger(__name__)


class NoParams(BaseModel):
    pass


class KernelParams(BaseModel):
    kernel: str


class InstanceParams(BaseModel):
    instance: str


class CodeParams(BaseModel):
    code: str
    instance: str


class VariableParams(BaseModel):
    name: str
    instance: str


class SetVariableParams(BaseModel):
    name: str
    value: Any
    instance: str


class AssistantParams(BaseModel):
    task: dict[str, Any]
    options: dict[str, Any] = {}
    assistant: str


@dataclass(frozen=True)
class MethodSpec:
    """How a wire method maps onto a capability."""

    capability: str
    params: type[BaseModel]
    args: tuple[str, ...] = ()


METHODS: dict[str, MethodSpec] = {
    "health": MethodSpec("health", NoParams),
    "kernelStart": MethodSpec("kernel_start", KernelParams, ("kernel",)),
    "kernelStop": MethodSpec("kernel_stop", InstanceParams, ("instance",)),
    "kernelInfo": MethodSpec("kernel_info", InstanceParams, ("instance",)),
    "kernelPackages": MethodSpec("kernel_packages", InstanceParams, ("instance",)),
    "kernelExecute": MethodSpec("kernel_execute", CodeParams, ("code", "instance")),
    "kernelEvaluate": MethodSpec("kernel_evaluate", CodeParams, ("code", "instance")),
    "kernelList": MethodSpec("kernel_list", InstanceParams, ("instance",)),
    "kernelGet": MethodSpec("kernel_get", VariableParams, ("name", "instance")),
    "kernelSet": MethodSpec(
        "kernel_set", SetVariableParams, ("name", "value", "instance")
    ),
    "kernelRemove": MethodSpec("kernel_remove", VariableParams, ("name", "instance")),
    "assistantSystemPrompt": MethodSpec(
        "assistant_system_prompt", AssistantParams, ("task", "options", "assistant")
    ),
    "assistantPerformTask": MethodSpec(
        "assistant_perform_task", AssistantParams, ("task", "options", "assistant")
    ),
}


def _summarize(error: ValidationError) -> str:
    parts = []
    for item in error.errors():
        location = ".".join(str(p) for p in item["loc"]) or "params"
        parts.append(f"{location}: {item['msg']}")
    return "; ".join(parts)


class Dispatcher:
    """Dispatch raw requests to a capability registry."""

    def __init__(self, registry: Mapping[str, Capability]):
        """Initialize dispatcher.

        Args:
            registry: Capability name to implementation.
        """
        self._registry = registry

    @property
    def methods(self) -> list[str]:
        """Get the wire names this dispatcher answers."""
        return list(METHODS)

    async def handle(self, raw: str | bytes) -> str:
        """Handle one raw request and return one raw response.

        Never raises: every failure is encoded as a failure envelope.
        """
        try:
            request = decode_request(raw)
        except DecodeError as e:
            logger.debug("rpc_parse_error", extra={"error": str(e)})
            return encode_failure(None, ErrorCode.PARSE_ERROR, f"Parse error: {e}")

        try:
            return await self._dispatch(request)
        except Exception as e:
            logger.exception("rpc_dispatch_error", extra={"method": request.method})
            return encode_failure(
                request.id, ErrorCode.INTERNAL_ERROR, str(e) or type(e).__name__
            )

    async def _dispatch(self, request: RPCRequest) -> str:
        spec = METHODS.get(request.method)
        capability = self._registry.get(spec.capability) if spec else None
        if spec is None or not callable(capability):
            return encode_failure(
                request.id,
                ErrorCode.METHOD_NOT_FOUND,
                f"Method `{request.method}` not found",
            )

        try:
            params = spec.params.model_validate(request.params)
        except ValidationError as e:
            return encode_failure(
                request.id,
                ErrorCode.INVALID_PARAMS,
                f"Invalid params: {_summarize(e)}",
            )

        args = [getattr(params, name) for name in spec.args]

        try:
            result = await capability(*args)
        except Exception as e:
            logger.exception("rpc_method_error", extra={"method": request.method})
            return encode_failure(
                request.id, ErrorCode.INTERNAL_ERROR, str(e) or type(e).__name__
            )

        try:
            return encode_success(request.id, result)
        except (TypeError, ValueError) as e:
            logger.exception("rpc_result_error", extra={"method": request.method})
            return encode_failure(
                request.id,
                ErrorCode.INTERNAL_ERROR,
                f"Result could not be serialized: {e}",
            )
