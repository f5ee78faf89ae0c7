"""Configuration loader with YAML parsing, env-var interpolation, and Pydantic validation."""

from __future__ import annotations

import os
import re
from pathlib import Path

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator


class ServerConfig(BaseModel):
    host: str = "0.0.0.0"
    port: int = 3000


class StorageConfig(BaseModel):
    db_path: str = "./data/x_research.db"


class UpstreamConfig(BaseModel):
    base_url: str = "https://api.x.com/2"
    page_delay: float = Field(default=0.35, ge=0)  # seconds between search pages
    timeout: float = Field(default=30.0, gt=0)  # per-request timeout in seconds

    @field_validator("base_url")
    @classmethod
    def _strip_base_url(cls, value: str) -> str:
        return value.rstrip("/")


class AppConfig(BaseModel):
    log_level: str = "INFO"
    public_url: str = ""
    server: ServerConfig = Field(default_factory=ServerConfig)
    storage: StorageConfig = Field(default_factory=StorageConfig)
    upstream: UpstreamConfig = Field(default_factory=UpstreamConfig)

    @field_validator("public_url", mode="before")
    @classmethod
    def _strip_public_url(cls, value: object) -> object:
        if value is None:
            return ""
        if not isinstance(value, str):
            return value
        # An uninterpolated ${VAR} means the variable was never set
        if _ENV_VAR_PATTERN.fullmatch(value.strip()):
            return ""
        return value.strip().rstrip("/")


_ENV_VAR_PATTERN = re.compile(r"\$\{(\w+)\}")


def _interpolate_env_vars(text: str) -> str:
    """Replace ${VAR_NAME} patterns with environment variable values."""

    def _replace(match: re.Match) -> str:
        value = os.environ.get(match.group(1))
        if value is None:
            return match.group(0)
        return value

    return _ENV_VAR_PATTERN.sub(_replace, text)


def load_config(config_path: str | Path = "config.yaml", env_path: str | Path = ".env") -> AppConfig:
    """Load and validate configuration from YAML file with env-var interpolation."""
    env_file = Path(env_path)
    if env_file.exists():
        load_dotenv(env_file)

    config_file = Path(config_path)
    if not config_file.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_file}")

    raw_text = config_file.read_text(encoding="utf-8")
    data = yaml.safe_load(_interpolate_env_vars(raw_text)) or {}

    return AppConfig(**data)
