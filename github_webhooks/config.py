"""Configuration management with Pydantic Settings + optional YAML."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_GITHUB_URL = "https://api.github.com"


class Config(BaseModel):
    """GitHub App credentials used by the dispatcher.

    Without a ``secret`` signatures are not verified. Without ``app_id`` and
    ``private_key`` no installation token is fetched.
    """

    model_config = ConfigDict(frozen=True)

    # The GitHub App ID
    app_id: str | None = None
    # The webhook secret used to sign and verify requests
    secret: str | None = None
    # The GitHub App private key (PEM) used to create tokens
    private_key: str | None = None

    @field_validator("private_key")
    @classmethod
    def _unescape_newlines(cls, value: str | None) -> str | None:
        # Keys copied into env vars often carry literal "\n"
        if value and "\\n" in value:
            return value.replace("\\n", "\n")
        return value


class ServerConfig(BaseModel):
    bind: str = "0.0.0.0"
    port: int = 8000
    path: str = "/"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
    )

    app_id: str | None = None
    app_secret: str | None = None
    app_private_key: str | None = None
    github_url: str = DEFAULT_GITHUB_URL
    token_timeout: float = 10.0
    handler_timeout: float | None = None
    server: ServerConfig = Field(default_factory=ServerConfig)
    log_level: str = "INFO"
    log_json: bool = False

    def to_config(self) -> Config:
        return Config(
            app_id=self.app_id or None,
            secret=self.app_secret or None,
            private_key=self.app_private_key or None,
        )


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    result = base.copy()
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def _nested_env() -> dict[str, Any]:
    """Nested env vars (``SERVER__PORT``) shaped like the YAML document."""
    nested: dict[str, Any] = {}
    for name, value in os.environ.items():
        parts = name.lower().split("__")
        if len(parts) < 2 or parts[0] not in Settings.model_fields:
            continue
        node = nested
        for part in parts[:-1]:
            node = node.setdefault(part, {})
            if not isinstance(node, dict):
                break
        else:
            node[parts[-1]] = value
    return nested


def load_settings(config_path: str | Path | None = None) -> Settings:
    """Load settings from env vars, optionally overlaying a YAML config."""
    yaml_data: dict[str, Any] = {}

    if config_path is None:
        config_path = os.environ.get("GITHUB_WEBHOOKS_CONFIG")

    if config_path is not None:
        path = Path(config_path)
        if path.exists():
            with open(path) as f:
                yaml_data = yaml.safe_load(f) or {}

    # YAML values are init kwargs; pydantic-settings gives those priority,
    # so env vars are folded in here: top-level ones replace the YAML key,
    # nested ones are merged into its subtree.
    overridden = {key.lower() for key in os.environ}
    yaml_data = {k: v for k, v in yaml_data.items() if k.lower() not in overridden}
    yaml_data = _deep_merge(yaml_data, _nested_env())

    return Settings(**yaml_data)
