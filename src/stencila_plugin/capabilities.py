"""Capability registry.

A registry maps capability names to async callables. It is built by
overlaying a plugin's partial set of overrides onto a complete set of
defaults, so a plugin only supplies what it actually implements:

    registry = build_registry({"kernel_info": my_info})

Most defaults return well-formed empty answers. ``kernel_info`` and
``assistant_perform_task`` raise instead, because there is no generic
answer that would not be silently wrong.
"""

import logging
import time
from collections.abc import Awaitable, Callable, Iterator, Mapping
from typing import Any

from stencila_plugin.errors import CapabilityNotImplementedError

logger = logging.getLogger(__name__)

Capability = Callable[..., Awaitable[Any]]


async def health() -> dict[str, Any]:
    """Report that the plugin is alive."""
    return {
        "timestamp": int(time.time()),
        "status": "OK",
    }


async def kernel_start(kernel: str) -> dict[str, Any]:
    # Plugins without instance state use the kernel name as the instance
    return {"instance": kernel}


async def kernel_stop(instance: str) -> None:
    return None


async def kernel_info(instance: str) -> Any:
    raise CapabilityNotImplementedError(
        "kernel_info",
        "kernelInfo must be overridden by plugins that provide kernels",
    )


async def kernel_packages(instance: str) -> list[Any]:
    return []


async def kernel_execute(code: str, instance: str) -> dict[str, Any]:
    return {"outputs": [], "messages": []}


async def kernel_evaluate(code: str, instance: str) -> dict[str, Any]:
    return {"output": [], "messages": []}


async def kernel_list(instance: str) -> list[Any]:
    return []


async def kernel_get(name: str, instance: str) -> Any:
    # None doubles as "no such variable"
    return None


async def kernel_set(name: str, value: Any, instance: str) -> None:
    return None


async def kernel_remove(name: str, instance: str) -> None:
    return None


async def assistant_system_prompt(
    task: dict[str, Any], options: dict[str, Any], assistant: str
) -> str:
    return ""


async def assistant_perform_task(
    task: dict[str, Any], options: dict[str, Any], assistant: str
) -> Any:
    raise CapabilityNotImplementedError(
        "assistant_perform_task",
        "assistantPerformTask must be implemented by plugins that provide assistants",
    )


_DEFAULTS: dict[str, Capability] = {
    "health": health,
    "kernel_start": kernel_start,
    "kernel_stop": kernel_stop,
    "kernel_info": kernel_info,
    "kernel_packages": kernel_packages,
    "kernel_execute": kernel_execute,
    "kernel_evaluate": kernel_evaluate,
    "kernel_list": kernel_list,
    "kernel_get": kernel_get,
    "kernel_set": kernel_set,
    "kernel_remove": kernel_remove,
    "assistant_system_prompt": assistant_system_prompt,
    "assistant_perform_task": assistant_perform_task,
}

CAPABILITY_NAMES: tuple[str, ...] = tuple(_DEFAULTS)


def default_capabilities() -> dict[str, Capability]:
    """Get a fresh, complete mapping of default capabilities."""
    return dict(_DEFAULTS)


class CapabilityRegistry(Mapping[str, Capability]):
    """Read-only mapping of capability name to implementation."""

    def __init__(self, capabilities: Mapping[str, Capability]):
        self._capabilities = dict(capabilities)

    def __getitem__(self, name: str) -> Capability:
        return self._capabilities[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._capabilities)

    def __len__(self) -> int:
        return len(self._capabilities)

    @property
    def names(self) -> list[str]:
        """Get all capability names."""
        return list(self._capabilities)

    def is_default(self, name: str) -> bool:
        """Check whether a capability still uses its default behaviour."""
        return self._capabilities.get(name) is _DEFAULTS.get(name)


def build_registry(
    *overrides: Mapping[str, Capability] | None,
) -> CapabilityRegistry:
    """Build a registry by overlaying overrides onto the defaults.

    Later mappings win over earlier ones.

    Args:
        overrides: Partial mappings of capability name to implementation.

    Returns:
        Registry with an entry for every known capability.

    Raises:
        ValueError: If an override names an unknown capability.
        TypeError: If an override is not callable.
    """
    capabilities = default_capabilities()

    for layer in overrides:
        if not layer:
            continue
        for name, capability in layer.items():
            if name not in _DEFAULTS:
                raise ValueError(f"Unknown capability: {name}")
            if not callable(capability):
                raise TypeError(f"Capability {name} is not callable")
            capabilities[name] = capability

    registry = CapabilityRegistry(capabilities)
    logger.debug(
        "capability_registry_built",
        extra={
            "overridden": [n for n in registry.names if not registry.is_default(n)]
        },
    )
    return registry
