"""Runtime for Stencila plugins written in Python.

A host drives a plugin's kernels and assistants by sending requests over
standard I/O or an authenticated HTTP endpoint.

Public API:
- Plugin: composes capabilities and serves them
- Kernel, Assistant: base classes for what a plugin provides
- build_registry: capability defaults overlaid with overrides
- Dispatcher: one raw request in, one raw response out
"""

from stencila_plugin.assistants import Assistant, AssistantHost
from stencila_plugin.capabilities import (
    CAPABILITY_NAMES,
    Capability,
    CapabilityRegistry,
    build_registry,
    default_capabilities,
)
from stencila_plugin.errors import (
    CapabilityNotImplementedError,
    PluginError,
    UnknownAssistantError,
    UnknownInstanceError,
    UnknownKernelError,
)
from stencila_plugin.kernels import Kernel, KernelHost
from stencila_plugin.plugin import Plugin
from stencila_plugin.rpc import Dispatcher, ErrorCode

__all__ = [
    # Plugin
    "Plugin",
    "Kernel",
    "KernelHost",
    "Assistant",
    "AssistantHost",
    # Capabilities
    "CAPABILITY_NAMES",
    "Capability",
    "CapabilityRegistry",
    "build_registry",
    "default_capabilities",
    # Dispatch
    "Dispatcher",
    "ErrorCode",
    # Errors
    "CapabilityNotImplementedError",
    "PluginError",
    "UnknownAssistantError",
    "UnknownInstanceError",
    "UnknownKernelError",
]
