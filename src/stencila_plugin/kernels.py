"""Kernel base class and instance host.

A plugin that provides kernels registers ``Kernel`` subclasses by name.
The host creates one kernel object per ``kernelStart`` and routes every
later kernel operation to it by instance name until ``kernelStop``.
"""

from __future__ import annotations

import asyncio
import logging
from collections import defaultdict
from typing import TYPE_CHECKING, Any

from stencila_plugin.errors import (
    CapabilityNotImplementedError,
    UnknownInstanceError,
    UnknownKernelError,
)

if TYPE_CHECKING:
    from stencila_plugin.capabilities import Capability

logger = logging.getLogger(__name__)


class Kernel:
    """Base class for kernels.

    Override the methods the kernel supports. Defaults return empty
    answers, except ``info`` which every kernel must provide.
    """

    async def start(self) -> None:
        """Called once after the instance is created."""

    async def stop(self) -> None:
        """Called once before the instance is discarded."""

    async def info(self) -> Any:
        raise CapabilityNotImplementedError(
            "kernel_info",
            f"{type(self).__name__}.info must be overridden",
        )

    async def packages(self) -> list[Any]:
        return []

    async def execute(self, code: str) -> dict[str, Any]:
        return {"outputs": [], "messages": []}

    async def evaluate(self, code: str) -> dict[str, Any]:
        return {"output": [], "messages": []}

    async def list(self) -> list[Any]:
        return []

    async def get(self, name: str) -> Any:
        return None

    async def set(self, name: str, value: Any) -> None:
        return None

    async def remove(self, name: str) -> None:
        return None


class KernelHost:
    """Owns the running instances of a plugin's kernels."""

    def __init__(self, kernels: dict[str, type[Kernel]]):
        self._kernels = dict(kernels)
        self._instances: dict[str, Kernel] = {}
        self._counters: defaultdict[str, int] = defaultdict(int)
        self._lock = asyncio.Lock()

    @property
    def kernels(self) -> list[str]:
        """Get the registered kernel names."""
        return list(self._kernels)

    @property
    def instances(self) -> list[str]:
        """Get the names of running instances."""
        return list(self._instances)

    def _instance(self, instance: str) -> Kernel:
        try:
            return self._instances[instance]
        except KeyError:
            raise UnknownInstanceError(instance) from None

    async def start(self, kernel: str) -> dict[str, Any]:
        kernel_class = self._kernels.get(kernel)
        if kernel_class is None:
            raise UnknownKernelError(kernel)

        async with self._lock:
            self._counters[kernel] += 1
            name = f"{kernel}-{self._counters[kernel]}"
            obj = kernel_class()
            await obj.start()
            self._instances[name] = obj

        logger.info("kernel_started", extra={"kernel": kernel, "instance": name})
        return {"instance": name}

    async def stop(self, instance: str) -> None:
        async with self._lock:
            obj = self._instances.pop(instance, None)
        if obj is None:
            raise UnknownInstanceError(instance)
        await obj.stop()
        logger.info("kernel_stopped", extra={"instance": instance})

    async def stop_all(self) -> None:
        """Stop every running instance.

        A failure to stop one instance is logged and does not prevent the
        others from being stopped.
        """
        for instance in self.instances:
            try:
                await self.stop(instance)
            except Exception:
                logger.exception("kernel_stop_failed", extra={"instance": instance})

    async def info(self, instance: str) -> Any:
        return await self._instance(instance).info()

    async def packages(self, instance: str) -> list[Any]:
        return await self._instance(instance).packages()

    async def execute(self, code: str, instance: str) -> dict[str, Any]:
        return await self._instance(instance).execute(code)

    async def evaluate(self, code: str, instance: str) -> dict[str, Any]:
        return await self._instance(instance).evaluate(code)

    async def list(self, instance: str) -> list[Any]:
        return await self._instance(instance).list()

    async def get(self, name: str, instance: str) -> Any:
        return await self._instance(instance).get(name)

    async def set(self, name: str, value: Any, instance: str) -> None:
        await self._instance(instance).set(name, value)

    async def remove(self, name: str, instance: str) -> None:
        await self._instance(instance).remove(name)

    def capabilities(self) -> dict[str, Capability]:
        """Get the kernel capability overrides backed by this host."""
        return {
            "kernel_start": self.start,
            "kernel_stop": self.stop,
            "kernel_info": self.info,
            "kernel_packages": self.packages,
            "kernel_execute": self.execute,
            "kernel_evaluate": self.evaluate,
            "kernel_list": self.list,
            "kernel_get": self.get,
            "kernel_set": self.set,
            "kernel_remove": self.remove,
        }
