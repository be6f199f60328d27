"""Echo plugin.

A kernel that echoes back the code it is given, and an assistant that
echoes back the task and the system prompt it received. Useful for checking
that a host can talk to a plugin at all.
"""

from __future__ import annotations

import json
from typing import Any

from stencila_plugin.assistants import Assistant
from stencila_plugin.kernels import Kernel
from stencila_plugin.plugin import Plugin

SYSTEM_PROMPT = """
You are an assistant that echos back the task given to you.

This system prompt is a template which is rendered against the
task itself. Here are some of the parts of the task rendered into
the system prompt:

Instruction:

{{ instruction | to_yaml }}

Instruction text:

{{ instruction_text }}

Instruction content formatted:

{{ content_formatted if content_formatted else "none" }}

Document context:

{{ context | to_yaml }}
"""


def _heading(text: str) -> dict[str, Any]:
    return {
        "type": "Heading",
        "level": 1,
        "content": [{"type": "Text", "value": text}],
    }


def _code_block(code: str, language: str) -> dict[str, Any]:
    return {"type": "CodeBlock", "code": code, "programmingLanguage": language}


class EchoKernel(Kernel):
    """Echoes code back as a string output."""

    def __init__(self) -> None:
        self._variables: dict[str, Any] = {}

    async def info(self) -> dict[str, Any]:
        return {"type": "SoftwareApplication", "name": "echo-python"}

    async def execute(self, code: str) -> dict[str, Any]:
        return {"outputs": [code], "messages": []}

    async def evaluate(self, code: str) -> dict[str, Any]:
        return {"output": code, "messages": []}

    async def list(self) -> list[dict[str, Any]]:
        return [
            {"type": "Variable", "name": name, "programmingLanguage": "echo"}
            for name in self._variables
        ]

    async def get(self, name: str) -> Any:
        return self._variables.get(name)

    async def set(self, name: str, value: Any) -> None:
        self._variables[name] = value

    async def remove(self, name: str) -> None:
        self._variables.pop(name, None)


class EchoAssistant(Assistant):
    """Echoes the task as a JSON code block and the system prompt as Markdown."""

    async def system_prompt(self, task: dict[str, Any], options: dict[str, Any]) -> str:
        return SYSTEM_PROMPT

    async def perform_task(
        self, task: dict[str, Any], options: dict[str, Any]
    ) -> dict[str, Any]:
        return {
            "nodes": [
                _heading("Task"),
                _code_block(json.dumps(task, indent=1), "json"),
                _heading("System prompt"),
                _code_block(task.get("system_prompt") or "", "markdown"),
            ]
        }


class EchoPlugin(Plugin):
    """Example plugin with one echo kernel and one echo assistant."""

    name = "stencila-echo-python"
    kernels = {"echo-python": EchoKernel}
    assistants = {"stencila/echo-python": EchoAssistant()}
