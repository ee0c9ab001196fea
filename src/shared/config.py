"""Configuration management for the ePortal MCP server.

Configuration comes from three sources: a YAML/JSON config file, CLI
flags and ``TUXCARE_*`` environment variables. ``merge_config`` combines
them (file > CLI > environment) into one validated ``AppConfig``; it is a
pure function so it can be tested without touching the process.
"""

from pathlib import Path
from typing import Any, Mapping, Optional

import httpx
import pydantic
import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from shared.errors import ConfigurationError
from shared.models import AuthConfig

DEFAULT_TIMEOUT = 30.0


class AppConfig(BaseModel):
    """Fully resolved process configuration."""
    eportal_url: str = Field(..., description="Base URL of the ePortal instance")
    auth: AuthConfig
    timeout: float = Field(default=DEFAULT_TIMEOUT, gt=0, description="Request timeout in seconds")
    verify_ssl: bool = Field(default=True)
    log_level: str = Field(default="INFO")
    log_json: bool = Field(default=False)

    model_config = ConfigDict(frozen=True, extra="ignore")

    @field_validator("eportal_url")
    @classmethod
    def _check_url(cls, value: str) -> str:
        try:
            url = httpx.URL(value)
        except (httpx.InvalidURL, TypeError) as e:
            raise ValueError(f"invalid URL: {e}") from e
        if url.scheme not in ("http", "https") or not url.host:
            raise ValueError("must be an absolute http(s) URL")
        return value.rstrip("/")

    @field_validator("log_level")
    @classmethod
    def _check_log_level(cls, value: str) -> str:
        value = value.upper()
        if value not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"unknown log level '{value}'")
        return value


class EnvSettings(BaseSettings):
    """Configuration values read from ``TUXCARE_*`` environment variables."""
    eportal_url: Optional[str] = None
    auth_type: Optional[str] = None
    username: Optional[str] = None
    password: Optional[str] = None
    api_key: Optional[str] = None
    header_name: Optional[str] = None
    timeout: Optional[float] = None
    verify_ssl: Optional[bool] = None
    log_level: Optional[str] = None

    model_config = SettingsConfigDict(
        env_prefix="TUXCARE_",
        env_file=".env",
        extra="ignore"
    )

    def to_config_dict(self) -> dict[str, Any]:
        """Return the values in the nested config-file layout."""
        return {
            "eportal_url": self.eportal_url,
            "timeout": self.timeout,
            "verify_ssl": self.verify_ssl,
            "log_level": self.log_level,
            "auth": {
                "type": self.auth_type,
                "username": self.username,
                "password": self.password,
                "api_key": self.api_key,
                "header_name": self.header_name,
            },
        }


def load_config_file(path: str | Path) -> dict[str, Any]:
    """
    Load a YAML or JSON configuration file.

    Raises:
        ConfigurationError: If the file is missing, unreadable or not a mapping
    """
    path = Path(path)
    if not path.is_file():
        raise ConfigurationError(f"Config file not found: {path}")

    try:
        with open(path) as f:
            data = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        raise ConfigurationError(f"Error loading config file {path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigurationError(f"Config file {path} must contain a mapping")
    return data


def _overlay(base: dict[str, Any], top: Mapping[str, Any]) -> dict[str, Any]:
    """Return ``base`` updated with the non-None values of ``top``."""
    merged = dict(base)
    for key, value in top.items():
        if value is None:
            continue
        if isinstance(value, Mapping) and isinstance(merged.get(key), dict):
            merged[key] = _overlay(merged[key], value)
        elif isinstance(value, Mapping):
            merged[key] = _overlay({}, value)
        else:
            merged[key] = value
    return merged


def _format_validation_error(error: pydantic.ValidationError) -> str:
    parts = []
    for item in error.errors():
        location = ".".join(str(p) for p in item["loc"]) or "config"
        parts.append(f"{location}: {item['msg']}")
    return "; ".join(parts)


def merge_config(
    file_data: Optional[Mapping[str, Any]] = None,
    cli_flags: Optional[Mapping[str, Any]] = None,
    env_vars: Optional[Mapping[str, Any]] = None
) -> AppConfig:
    """
    Merge the three configuration sources into one validated config.

    Precedence is config file > CLI flags > environment variables, applied
    per key. All three use the nested config-file layout.

    Raises:
        ConfigurationError: If a required value is missing or invalid
    """
    merged: dict[str, Any] = {}
    for source in (env_vars, cli_flags, file_data):
        if source:
            merged = _overlay(merged, source)

    if not merged.get("eportal_url"):
        raise ConfigurationError(
            "ePortal URL is required. Use --url, provide a config file, "
            "or set the TUXCARE_EPORTAL_URL environment variable."
        )

    auth = dict(merged.get("auth") or {})
    auth.setdefault("type", "basic")
    merged["auth"] = auth

    try:
        return AppConfig(**merged)
    except pydantic.ValidationError as e:
        raise ConfigurationError(f"Invalid configuration: {_format_validation_error(e)}") from e
