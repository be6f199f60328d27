"""Shared test fixtures and factories."""

import json
from typing import Any

import pytest

from stencila_plugin.capabilities import CapabilityRegistry, build_registry
from stencila_plugin.config.loader import ENV_MAPPINGS
from stencila_plugin.rpc import Dispatcher

# =============================================================================
# Environment
# =============================================================================


@pytest.fixture(autouse=True)
def _clear_plugin_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep STENCILA_* variables from the outer environment out of tests."""
    for _section, _key, env_var in ENV_MAPPINGS:
        monkeypatch.delenv(env_var, raising=False)


# =============================================================================
# Dispatch Fixtures
# =============================================================================


@pytest.fixture
def registry() -> CapabilityRegistry:
    """Registry with no overrides."""
    return build_registry()


@pytest.fixture
def dispatcher(registry: CapabilityRegistry) -> Dispatcher:
    """Dispatcher over the default registry."""
    return Dispatcher(registry)


def make_request(
    method: str,
    params: dict[str, Any] | None = None,
    id: int | str | None = 1,
) -> str:
    """Factory for raw request lines."""
    return json.dumps({"id": id, "method": method, "params": params or {}})


class SpyDispatcher:
    """Dispatcher stand-in that records what reaches it."""

    def __init__(self, response: str = '{"id":1,"result":null}') -> None:
        self.requests: list[str | bytes] = []
        self.response = response

    async def handle(self, raw: str | bytes) -> str:
        self.requests.append(raw)
        return self.response


@pytest.fixture
def spy_dispatcher() -> SpyDispatcher:
    return SpyDispatcher()


# =============================================================================
# CLI Test Helpers
# =============================================================================


@pytest.fixture
def cli_runner():
    """Create a Typer CLI test runner with colors disabled."""
    from typer.testing import CliRunner

    return CliRunner(env={"NO_COLOR": "1"})
