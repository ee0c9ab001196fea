"""Error taxonomy for the ePortal MCP server.

Configuration errors are fatal and stop the process before it serves.
Every other error is caught by the tool router and turned into an
error result for the calling agent.
"""

from typing import Any, Optional

import httpx


class EPortalMCPError(Exception):
    """Base exception for all ePortal MCP errors."""

    code = "ERROR"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return self.message


class ConfigurationError(EPortalMCPError):
    """Start-up configuration is missing or invalid."""

    code = "CONFIGURATION_ERROR"


class ValidationError(EPortalMCPError):
    """Tool arguments do not match the tool's input schema."""

    code = "VALIDATION_ERROR"

    def __init__(self, tool_name: str, errors: list[str]) -> None:
        self.tool_name = tool_name
        self.errors = list(errors)
        super().__init__(f"Invalid arguments: {'; '.join(self.errors)}")


class ToolNotFoundError(EPortalMCPError):
    """No functional area owns the requested tool name."""

    code = "TOOL_NOT_FOUND"

    def __init__(self, tool_name: str) -> None:
        self.tool_name = tool_name
        super().__init__(f"Tool {tool_name} not found")


class ApiError(EPortalMCPError):
    """
    A call to the ePortal API failed.

    ``status_code`` is None when no response was received (connection
    failure, timeout) and set when the API answered with an error status.
    """

    code = "API_ERROR"

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        details: Any = None
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.details = details

    @property
    def is_auth_failure(self) -> bool:
        return self.status_code in (401, 403)

    def __str__(self) -> str:
        if self.status_code is None:
            return self.message
        return f"HTTP {self.status_code}: {self.message}"

    @classmethod
    def from_response(cls, response: httpx.Response) -> "ApiError":
        """Build an error from an HTTP error response."""
        try:
            details: Any = response.json()
        except ValueError:
            details = response.text or None

        remote_message = None
        if isinstance(details, dict):
            for key in ("message", "error", "detail"):
                if isinstance(details.get(key), str) and details[key]:
                    remote_message = details[key]
                    break

        status = response.status_code
        if status == 401:
            message = "Authorization failed: check the ePortal credentials"
        elif status == 403:
            message = "Authorization failed: access to this resource is forbidden"
        else:
            message = remote_message or response.reason_phrase or "Request failed"

        if remote_message and status in (401, 403):
            message = f"{message} ({remote_message})"

        return cls(message, status_code=status, details=details)

    @classmethod
    def from_transport(cls, exc: httpx.TransportError) -> "ApiError":
        """Build an error for a request that never got a response."""
        if isinstance(exc, httpx.TimeoutException):
            return cls(f"Request to ePortal timed out: {exc}")
        return cls(f"Cannot connect to ePortal: {exc}")


class UnknownError(EPortalMCPError):
    """Any other failure, with its message coerced to a string."""

    code = "UNKNOWN_ERROR"

    @classmethod
    def wrap(cls, exc: BaseException) -> "UnknownError":
        message = str(exc) or type(exc).__name__
        error = cls(message)
        error.__cause__ = exc
        return error
