"""Tests for the command line entry point."""

from typing import Any

import pytest

from stencila_plugin.cli import create_cli
from stencila_plugin.config import ConfigError, PluginConfig


class _RecordingPlugin:
    def __init__(self) -> None:
        self.configs: list[PluginConfig] = []

    def run(self, config: PluginConfig) -> None:
        self.configs.append(config)


@pytest.fixture
def plugin() -> _RecordingPlugin:
    return _RecordingPlugin()


@pytest.fixture(autouse=True)
def _no_logging_setup(monkeypatch):
    monkeypatch.setattr("stencila_plugin.cli.configure_logging", lambda *a, **kw: None)


@pytest.fixture(autouse=True)
def redaction_calls(monkeypatch) -> list[list[str] | None]:
    calls: list[list[str] | None] = []
    monkeypatch.setattr(
        "stencila_plugin.cli.configure_redaction",
        lambda extra_patterns=None, **kw: calls.append(extra_patterns),
    )
    return calls


class TestRunCommand:
    """Tests for 'stencila-plugin PROTOCOL [PORT] [TOKEN]'."""

    def test_stdio(self, cli_runner, plugin):
        result = cli_runner.invoke(create_cli(plugin), ["stdio"])
        assert result.exit_code == 0, result.output
        assert plugin.configs[0].transport == "stdio"

    def test_http_positional_arguments(self, cli_runner, plugin):
        result = cli_runner.invoke(create_cli(plugin), ["http", "8123", "tok"])
        assert result.exit_code == 0, result.output
        config = plugin.configs[0]
        assert config.transport == "http"
        assert config.http.port == 8123
        assert config.http.token is not None
        assert config.http.token.get_secret_value() == "tok"

    def test_token_is_redacted_from_logs(self, cli_runner, plugin, redaction_calls):
        result = cli_runner.invoke(create_cli(plugin), ["http", "8123", "s3cret+tok"])
        assert result.exit_code == 0, result.output
        assert redaction_calls == [[r"s3cret\+tok"]]

    def test_stdio_adds_no_redaction(self, cli_runner, plugin, redaction_calls):
        result = cli_runner.invoke(create_cli(plugin), ["stdio"])
        assert result.exit_code == 0, result.output
        assert redaction_calls == []

    def test_options(self, cli_runner, plugin):
        result = cli_runner.invoke(
            create_cli(plugin),
            [
                "http",
                "8123",
                "tok",
                "--host",
                "127.0.0.1",
                "--origin-policy",
                "loopback-only",
                "--log-level",
                "debug",
            ],
        )
        assert result.exit_code == 0, result.output
        config = plugin.configs[0]
        assert config.http.host == "127.0.0.1"
        assert config.http.origin_policy == "loopback-only"
        assert config.log_level == "DEBUG"

    def test_environment_fallback(self, cli_runner, plugin, monkeypatch):
        monkeypatch.setenv("STENCILA_TRANSPORT", "http")
        monkeypatch.setenv("STENCILA_PORT", "9000")
        monkeypatch.setenv("STENCILA_TOKEN", "env-tok")

        result = cli_runner.invoke(create_cli(plugin), [])

        assert result.exit_code == 0, result.output
        assert plugin.configs[0].http.port == 9000

    def test_unknown_protocol(self, cli_runner, plugin):
        result = cli_runner.invoke(create_cli(plugin), ["carrier-pigeon"])
        assert result.exit_code == 1
        assert plugin.configs == []

    def test_http_without_token(self, cli_runner, plugin):
        result = cli_runner.invoke(create_cli(plugin), ["http", "8123"])
        assert result.exit_code == 1
        assert "token" in result.output.lower()

    def test_missing_config_file(self, cli_runner, plugin, tmp_path):
        result = cli_runner.invoke(
            create_cli(plugin), ["stdio", "--config", str(tmp_path / "missing.toml")]
        )
        assert result.exit_code == 1
        assert "not found" in result.output

    def test_runtime_config_error(self, cli_runner):
        class _Failing:
            def run(self, config: Any) -> None:
                raise ConfigError("Unknown protocol: x")

        result = cli_runner.invoke(create_cli(_Failing()), ["stdio"])  # type: ignore[arg-type]
        assert result.exit_code == 1
        assert "Unknown protocol" in result.output

    def test_defaults_to_echo_plugin(self, cli_runner, monkeypatch):
        ran: list[Any] = []
        monkeypatch.setattr(
            "stencila_plugin.echo.EchoPlugin.run",
            lambda self, config: ran.append(type(self).__name__),
        )

        result = cli_runner.invoke(create_cli(), ["stdio"])

        assert result.exit_code == 0, result.output
        assert ran == ["EchoPlugin"]
