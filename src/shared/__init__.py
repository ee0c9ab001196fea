"""Shared utilities and base classes for the ePortal MCP server."""

from shared.errors import (
    ApiError,
    ConfigurationError,
    EPortalMCPError,
    ToolNotFoundError,
    UnknownError,
    ValidationError,
)
from shared.models import (
    AuthConfig,
    AuthType,
    TextContent,
    ToolCallRequest,
    ToolCallResult,
    ToolDefinition,
)
from shared.config import AppConfig, EnvSettings, load_config_file, merge_config
from shared.logging import get_logger, setup_logging

__all__ = [
    "ApiError",
    "ConfigurationError",
    "EPortalMCPError",
    "ToolNotFoundError",
    "UnknownError",
    "ValidationError",
    "AuthConfig",
    "AuthType",
    "TextContent",
    "ToolCallRequest",
    "ToolCallResult",
    "ToolDefinition",
    "AppConfig",
    "EnvSettings",
    "load_config_file",
    "merge_config",
    "get_logger",
    "setup_logging",
]
