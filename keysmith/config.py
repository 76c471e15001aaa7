"""Keysmith configuration management.

Configuration sources (in priority order):
1. Environment variables (KEYSMITH_ prefix)
2. Config file (config.yaml)
3. Defaults
"""

from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path

import yaml
from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class ServerConfig(BaseModel):
    """HTTP server configuration."""

    host: str = "127.0.0.1"
    port: int = 8000


class DatabaseConfig(BaseModel):
    """Database configuration."""

    url: str = "sqlite+aiosqlite:///./keysmith.db"
    echo: bool = False


class KeysConfig(BaseModel):
    """Key generation configuration."""

    # Key format: {prefix}{token_bytes * 2 hex chars}
    prefix: str = "sk-"
    token_bytes: int = Field(default=32, ge=16, le=128)


class SecurityConfig(BaseModel):
    """Security configuration."""

    # Bearer token required for POST /v1/keys.
    # None = key creation is open (development default)
    admin_token: str | None = None


class ConsoleConfig(BaseModel):
    """Key manager console configuration."""

    endpoint: str = "http://127.0.0.1:8000"
    timeout: float = 10.0

    # Re-fetch the whole list after a successful generate instead of
    # prepending the new record locally
    refresh_after_generate: bool = False


class Settings(BaseSettings):
    """Keysmith application settings."""

    model_config = SettingsConfigDict(
        env_prefix="KEYSMITH_",
        env_nested_delimiter="__",
        case_sensitive=False,
    )

    server: ServerConfig = Field(default_factory=ServerConfig)
    database: DatabaseConfig = Field(default_factory=DatabaseConfig)
    keys: KeysConfig = Field(default_factory=KeysConfig)
    security: SecurityConfig = Field(default_factory=SecurityConfig)
    console: ConsoleConfig = Field(default_factory=ConsoleConfig)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls,
        init_settings,
        env_settings,
        dotenv_settings,
        file_secret_settings,
    ):
        # YAML file values arrive as init kwargs; environment wins over them
        return env_settings, init_settings, dotenv_settings, file_secret_settings


def _load_config_file() -> dict:
    """Load configuration from YAML file if exists.

    Looks for config file in order:
    1. KEYSMITH_CONFIG_FILE environment variable
    2. ./config.yaml
    3. /etc/keysmith/config.yaml
    """
    config_paths = [
        os.environ.get("KEYSMITH_CONFIG_FILE"),
        Path("config.yaml"),
        Path("/etc/keysmith/config.yaml"),
    ]

    for path in config_paths:
        if path is None:
            continue
        path = Path(path)
        if path.exists():
            with open(path) as f:
                return yaml.safe_load(f) or {}

    return {}


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance.

    Configuration is loaded from:
    1. YAML config file (if exists)
    2. Environment variables (override)
    3. Defaults
    """
    file_config = _load_config_file()
    return Settings(**file_config)
