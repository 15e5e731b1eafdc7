"""Configuration models and loading."""

import json
import os
from collections.abc import Mapping
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, ValidationError, field_validator

from core.exceptions import ConfigurationError, InvalidURL
from core.router import DEFAULT_OPENAI_MODELS
from core.urls import require_absolute_url

CONFIG_DIR = Path.home() / ".config" / "ollama-openai-proxy"
CONFIG_FILE = CONFIG_DIR / "config.json"

# Environment variable -> (section, field)
ENV_OVERRIDES = {
    "OPENAI_ENDPOINT": ("endpoints", "openai"),
    "OLLAMA_ENDPOINT": ("endpoints", "ollama"),
    "OPENAI_API_KEY": ("auth", "api_key"),
    "PROXY_HOST": ("proxy", "host"),
    "PROXY_PORT": ("proxy", "port"),
}


class ProxySettings(BaseModel):
    host: str = "127.0.0.1"
    port: int = 8080
    debug: bool = False


class EndpointSettings(BaseModel):
    openai: str = "https://api.openai.com"
    ollama: str = "http://localhost:11434"

    @field_validator("openai", "ollama")
    @classmethod
    def _absolute(cls, value: str) -> str:
        try:
            require_absolute_url(value)
        except InvalidURL as e:
            raise ValueError(str(e)) from e
        return value


class AuthSettings(BaseModel):
    # Empty or unset disables bearer authentication, see auth.BearerAuthGate
    api_key: str | None = None


class RoutingSettings(BaseModel):
    openai_models: list[str] = Field(default_factory=lambda: list(DEFAULT_OPENAI_MODELS))
    host_header: Literal["ollama", "target"] = "ollama"


class LimitsSettings(BaseModel):
    upstream_timeout: float | None = None
    max_connections: int = 100
    max_keepalive_connections: int = 20
    keep_alive_timeout: int = 5


class Config(BaseModel):
    proxy: ProxySettings = Field(default_factory=ProxySettings)
    endpoints: EndpointSettings = Field(default_factory=EndpointSettings)
    auth: AuthSettings = Field(default_factory=AuthSettings)
    routing: RoutingSettings = Field(default_factory=RoutingSettings)
    limits: LimitsSettings = Field(default_factory=LimitsSettings)


def load_config(
    config_file: Path = CONFIG_FILE,
    environ: Mapping[str, str] | None = None,
) -> Config:
    """Load configuration from JSON file and environment, creating default file if needed.

    Raises:
        ConfigurationError: if the resulting configuration is invalid
            (for example an endpoint that is not an absolute URL).
    """
    environ = os.environ if environ is None else environ
    data = _read_config_file(config_file)

    for env_name, (section, field) in ENV_OVERRIDES.items():
        if env_name in environ:
            section_data = data.setdefault(section, {})
            if not isinstance(section_data, dict):
                raise ConfigurationError(
                    f"Invalid configuration: '{section}' must be an object"
                )
            section_data[field] = environ[env_name]

    try:
        return Config.model_validate(data)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid configuration: {e}") from e


def _read_config_file(config_file: Path) -> dict:
    if not config_file.exists():
        config_file.parent.mkdir(parents=True, exist_ok=True)
        config_file.write_text(Config().model_dump_json(indent=2))
        return {}

    try:
        data = json.loads(config_file.read_text())
    except json.JSONDecodeError:
        data = None

    if not isinstance(data, dict):
        # Backup corrupted config and recreate default
        backup = config_file.with_suffix(".json.bak")
        config_file.rename(backup)
        config_file.write_text(Config().model_dump_json(indent=2))
        return {}
    return data
