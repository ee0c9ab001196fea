"""Core data models for the ePortal MCP server.

This module defines the shared data structures that flow between the
server facade, the tool router, the domain handlers and the API client.
"""

from enum import Enum
from typing import Any, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from shared.errors import ConfigurationError

DEFAULT_API_KEY_HEADER = "X-API-Key"


class AuthType(str, Enum):
    """Supported ePortal authentication modes."""
    BASIC = "basic"
    API_KEY = "api_key"


class AuthConfig(BaseModel):
    """
    Credentials used for every outbound ePortal request.

    Built once at start-up and never changed afterwards. A mode that is
    missing its required fields raises ConfigurationError on construction.
    """
    type: AuthType = Field(default=AuthType.BASIC)
    username: Optional[str] = None
    password: Optional[str] = Field(default=None, repr=False)
    api_key: Optional[str] = Field(default=None, repr=False)
    header_name: Optional[str] = None

    model_config = ConfigDict(frozen=True)

    @model_validator(mode="before")
    @classmethod
    def _default_header_name(cls, data: Any) -> Any:
        if isinstance(data, dict) and data.get("type") in (AuthType.API_KEY, "api_key"):
            if not data.get("header_name"):
                data = {**data, "header_name": DEFAULT_API_KEY_HEADER}
        return data

    @model_validator(mode="after")
    def _check_required_fields(self) -> "AuthConfig":
        if self.type == AuthType.BASIC:
            missing = [f for f in ("username", "password") if not getattr(self, f)]
            if missing:
                raise ConfigurationError(
                    "Username and password are required for basic auth "
                    f"(missing: {', '.join(missing)})"
                )
        elif self.type == AuthType.API_KEY:
            if not self.api_key:
                raise ConfigurationError("API key is required for api_key auth")
        return self


class ToolDefinition(BaseModel):
    """
    Declarative description of one MCP tool.

    ``input_schema`` is a JSON Schema object; it is published verbatim to
    the agent and used to validate call arguments.
    """
    name: str = Field(..., description="Wire-visible tool name")
    description: str = Field(..., description="Clear description for LLM usage")
    domain: str = Field(default="", description="Owning functional area")
    input_schema: dict[str, Any] = Field(
        default_factory=lambda: {"type": "object", "properties": {}},
        description="JSON Schema for input validation"
    )

    model_config = ConfigDict(frozen=True)


class ToolCallRequest(BaseModel):
    """A single tool invocation received from the agent."""
    name: str
    arguments: Any = None


class TextContent(BaseModel):
    """One block of textual tool output."""
    type: Literal["text"] = "text"
    text: str


class ToolCallResult(BaseModel):
    """
    Uniform envelope returned for every tool call, success or failure.

    Serialized with ``by_alias=True`` the flag appears as ``isError``.
    """
    content: list[TextContent] = Field(default_factory=list)
    is_error: bool = Field(default=False, alias="isError")

    model_config = ConfigDict(populate_by_name=True)

    @classmethod
    def text(cls, text: str) -> "ToolCallResult":
        """Create a success result carrying one text block."""
        return cls(content=[TextContent(text=text)], is_error=False)

    @classmethod
    def error(cls, tool_name: str, message: str) -> "ToolCallResult":
        """Create an error result for a failed tool."""
        return cls(
            content=[TextContent(text=f"Error executing tool {tool_name}: {message}")],
            is_error=True
        )
