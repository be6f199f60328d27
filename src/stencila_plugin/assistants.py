"""Assistant base class and host."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from stencila_plugin.errors import CapabilityNotImplementedError, UnknownAssistantError

if TYPE_CHECKING:
    from stencila_plugin.capabilities import Capability


class Assistant:
    """Base class for assistants.

    ``perform_task`` must be implemented. ``system_prompt`` may return a
    template that the host renders against the task before performing it.
    """

    async def system_prompt(self, task: dict[str, Any], options: dict[str, Any]) -> str:
        return ""

    async def perform_task(self, task: dict[str, Any], options: dict[str, Any]) -> Any:
        raise CapabilityNotImplementedError(
            "assistant_perform_task",
            f"{type(self).__name__}.perform_task must be implemented",
        )


class AssistantHost:
    """Routes assistant operations to assistants by id."""

    def __init__(self, assistants: dict[str, Assistant]):
        self._assistants = dict(assistants)

    @property
    def assistants(self) -> list[str]:
        """Get the registered assistant ids."""
        return list(self._assistants)

    def _assistant(self, assistant: str) -> Assistant:
        try:
            return self._assistants[assistant]
        except KeyError:
            raise UnknownAssistantError(assistant) from None

    async def system_prompt(
        self, task: dict[str, Any], options: dict[str, Any], assistant: str
    ) -> str:
        return await self._assistant(assistant).system_prompt(task, options)

    async def perform_task(
        self, task: dict[str, Any], options: dict[str, Any], assistant: str
    ) -> Any:
        return await self._assistant(assistant).perform_task(task, options)

    def capabilities(self) -> dict[str, Capability]:
        """Get the assistant capability overrides backed by this host."""
        return {
            "assistant_system_prompt": self.system_prompt,
            "assistant_perform_task": self.perform_task,
        }
