"""Tests for configuration loading and models."""

from pathlib import Path

import pytest
from pydantic import SecretStr, ValidationError

from stencila_plugin.config import ConfigError, HttpConfig, PluginConfig, load_config


class TestHttpConfig:
    """Tests for HttpConfig model."""

    def test_defaults(self):
        config = HttpConfig()
        assert config.host == "0.0.0.0"
        assert config.port == 8000
        assert config.token is None
        assert config.origin_policy == "reject-loopback"

    @pytest.mark.parametrize("port", [0, -1, 65536])
    def test_port_range(self, port):
        with pytest.raises(ValidationError):
            HttpConfig(port=port)

    def test_invalid_origin_policy(self):
        with pytest.raises(ValidationError):
            HttpConfig(origin_policy="allow-all")  # type: ignore[arg-type]

    def test_token_is_secret(self):
        config = HttpConfig(token=SecretStr("hunter22"))
        assert "hunter22" not in repr(config)
        assert config.token is not None
        assert config.token.get_secret_value() == "hunter22"


class TestPluginConfig:
    """Tests for PluginConfig model."""

    def test_defaults(self):
        config = PluginConfig()
        assert config.transport == "stdio"
        assert config.log_level == "INFO"

    def test_transport_is_case_insensitive(self):
        assert PluginConfig(transport="STDIO").transport == "stdio"  # type: ignore[arg-type]

    def test_unknown_transport(self):
        with pytest.raises(ValidationError):
            PluginConfig(transport="carrier-pigeon")  # type: ignore[arg-type]

    def test_http_requires_token(self):
        with pytest.raises(ValidationError, match="bearer token is required"):
            PluginConfig(transport="http")

    def test_http_rejects_empty_token(self):
        with pytest.raises(ValidationError):
            PluginConfig(transport="http", http=HttpConfig(token=SecretStr("")))

    def test_stdio_needs_no_token(self):
        assert PluginConfig(transport="stdio").http.token is None


class TestLoadConfig:
    """Tests for load_config function."""

    def test_defaults_without_file_or_env(self):
        config = load_config()
        assert config.transport == "stdio"

    def test_from_env(self, monkeypatch):
        monkeypatch.setenv("STENCILA_TRANSPORT", "http")
        monkeypatch.setenv("STENCILA_PORT", "9876")
        monkeypatch.setenv("STENCILA_TOKEN", "env-token")

        config = load_config()

        assert config.transport == "http"
        assert config.http.port == 9876
        assert config.http.token is not None
        assert config.http.token.get_secret_value() == "env-token"

    def test_from_file(self, tmp_path: Path):
        config_file = tmp_path / "plugin.toml"
        config_file.write_text(
            """
transport = "http"
log_level = "debug"

[http]
port = 7000
token = "file-token"
origin_policy = "loopback-only"
"""
        )

        config = load_config(config_file)

        assert config.transport == "http"
        assert config.log_level == "DEBUG"
        assert config.http.port == 7000
        assert config.http.origin_policy == "loopback-only"

    def test_precedence(self, tmp_path: Path, monkeypatch):
        config_file = tmp_path / "plugin.toml"
        config_file.write_text('[http]\nport = 7000\ntoken = "file-token"\n')
        monkeypatch.setenv("STENCILA_PORT", "7001")

        from_env = load_config(config_file, transport="http")
        explicit = load_config(config_file, transport="http", port=7002)

        assert from_env.http.port == 7001
        assert explicit.http.port == 7002
        assert explicit.http.token is not None
        assert explicit.http.token.get_secret_value() == "file-token"

    def test_none_overrides_are_ignored(self, monkeypatch):
        monkeypatch.setenv("STENCILA_TRANSPORT", "stdio")
        config = load_config(transport=None, port=None)
        assert config.transport == "stdio"

    def test_missing_file(self, tmp_path: Path):
        with pytest.raises(FileNotFoundError):
            load_config(tmp_path / "missing.toml")

    def test_invalid_toml(self, tmp_path: Path):
        config_file = tmp_path / "bad.toml"
        config_file.write_text("not valid toml [[[")
        with pytest.raises(ConfigError):
            load_config(config_file)

    def test_invalid_values(self):
        with pytest.raises(ConfigError):
            load_config(transport="http", port=8000)

    def test_invalid_port_from_env(self, monkeypatch):
        monkeypatch.setenv("STENCILA_PORT", "not-a-port")
        with pytest.raises(ConfigError):
            load_config()
