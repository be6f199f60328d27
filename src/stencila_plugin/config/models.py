"""Configuration models using Pydantic."""

from typing import Literal

from pydantic import BaseModel, Field, SecretStr, field_validator, model_validator

Transport = Literal["stdio", "http"]

# "reject-loopback" refuses peers on 127.0.0.1/::1 and accepts everyone else.
# "loopback-only" is the inverse.
OriginPolicy = Literal["reject-loopback", "loopback-only"]


class ConfigError(Exception):
    """Configuration error."""

    pass


class HttpConfig(BaseModel):
    """Configuration for the HTTP transport."""

    host: str = "0.0.0.0"
    port: int = 8000
    token: SecretStr | None = None
    origin_policy: OriginPolicy = "reject-loopback"

    @field_validator("port")
    @classmethod
    def _check_port(cls, value: int) -> int:
        if not 0 < value < 65536:
            raise ValueError(f"Port out of range: {value}")
        return value


class PluginConfig(BaseModel):
    """Root configuration model."""

    transport: Transport = "stdio"
    http: HttpConfig = Field(default_factory=HttpConfig)
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"

    @field_validator("transport", mode="before")
    @classmethod
    def _lower_transport(cls, value: object) -> object:
        return value.strip().lower() if isinstance(value, str) else value

    @field_validator("log_level", mode="before")
    @classmethod
    def _upper_log_level(cls, value: object) -> object:
        return value.strip().upper() if isinstance(value, str) else value

    @model_validator(mode="after")
    def _require_token_for_http(self) -> "PluginConfig":
        if self.transport == "http":
            token = self.http.token
            if token is None or not token.get_secret_value():
                raise ValueError("A bearer token is required for the http transport")
        return self
