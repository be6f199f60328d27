"""Exceptions raised by capabilities.

Anything raised from a capability is reported to the host as an internal
error response; these classes only make the cause easier to tell apart in
logs and tests.
"""


class PluginError(Exception):
    """Base class for plugin errors."""


class CapabilityNotImplementedError(PluginError, NotImplementedError):
    """A capability with no meaningful default was called without an override."""

    def __init__(self, capability: str, message: str):
        super().__init__(message)
        self.capability = capability


class UnknownKernelError(PluginError, LookupError):
    """No kernel is registered under the requested name."""

    def __init__(self, kernel: str):
        super().__init__(f"Unknown kernel: {kernel}")
        self.kernel = kernel


class UnknownInstanceError(PluginError, LookupError):
    """No running kernel instance has the requested name."""

    def __init__(self, instance: str):
        super().__init__(f"Unknown kernel instance: {instance}")
        self.instance = instance


class UnknownAssistantError(PluginError, LookupError):
    """No assistant is registered under the requested id."""

    def __init__(self, assistant: str):
        super().__init__(f"Unknown assistant: {assistant}")
        self.assistant = assistant
