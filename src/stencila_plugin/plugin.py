"""Plugin composition.

A plugin is a capability registry plus the means to serve it. Subclasses
(or constructor arguments) supply kernels, assistants and individual
capability overrides; everything else falls back to the defaults.

    class MyPlugin(Plugin):
        kernels = {"my-kernel": MyKernel}

    if __name__ == "__main__":
        MyPlugin().main()
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, ClassVar

from stencila_plugin.assistants import Assistant, AssistantHost
from stencila_plugin.capabilities import (
    Capability,
    CapabilityRegistry,
    build_registry,
)
from stencila_plugin.kernels import Kernel, KernelHost
from stencila_plugin.rpc import Dispatcher

if TYPE_CHECKING:
    from stencila_plugin.config import PluginConfig


class Plugin:
    """Base class for plugins."""

    name: ClassVar[str] = "stencila-plugin"
    kernels: ClassVar[Mapping[str, type[Kernel]]] = {}
    assistants: ClassVar[Mapping[str, Assistant]] = {}

    def __init__(
        self,
        kernels: Mapping[str, type[Kernel]] | None = None,
        assistants: Mapping[str, Assistant] | None = None,
        overrides: Mapping[str, Capability] | None = None,
    ) -> None:
        """Initialize plugin.

        Args:
            kernels: Kernel classes by name (defaults to the class attribute).
            assistants: Assistants by id (defaults to the class attribute).
            overrides: Capabilities by name, applied last.
        """
        kernels = type(self).kernels if kernels is None else kernels
        assistants = type(self).assistants if assistants is None else assistants

        self._kernel_host = KernelHost(dict(kernels)) if kernels else None
        self._assistant_host = AssistantHost(dict(assistants)) if assistants else None

        self._registry = build_registry(
            self._kernel_host.capabilities() if self._kernel_host else None,
            self._assistant_host.capabilities() if self._assistant_host else None,
            self.overrides(),
            overrides,
        )
        self._dispatcher = Dispatcher(self._registry)

    def overrides(self) -> Mapping[str, Capability]:
        """Capability overrides provided by a subclass."""
        return {}

    @property
    def registry(self) -> CapabilityRegistry:
        """Get the composed capability registry."""
        return self._registry

    @property
    def dispatcher(self) -> Dispatcher:
        """Get the dispatcher serving the registry."""
        return self._dispatcher

    @property
    def kernel_host(self) -> KernelHost | None:
        """Get the kernel host, if the plugin provides kernels."""
        return self._kernel_host

    async def shutdown(self) -> None:
        """Release resources held by running kernel instances."""
        if self._kernel_host is not None:
            await self._kernel_host.stop_all()

    def run(self, config: PluginConfig) -> None:
        """Serve the plugin over the configured transport."""
        from stencila_plugin.runtime import run

        run(self, config)

    def main(self, args: list[str] | None = None) -> None:
        """Run the command line interface for this plugin."""
        from stencila_plugin.cli import create_cli

        create_cli(self)(args=args, prog_name=self.name)
