"""Base class for ePortal functional areas.

Each area:
- Declares its tools (name, description, input schema)
- Turns validated arguments into one or a few ePortal API calls
- Renders the API response as tool text
- Holds no state between calls
"""

import json
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, Awaitable, Callable

from shared.logging import get_logger
from shared.models import ToolCallResult, ToolDefinition
from shared.schema import create_tool_schema

if TYPE_CHECKING:
    from eportal_client.client import EPortalClient
    from mcp_server.registry import ToolRegistry

logger = get_logger(__name__)

ActionHandler = Callable[[dict[str, Any], "EPortalClient"], Awaitable[ToolCallResult]]


class BaseDomain(ABC):
    """
    Base class for a functional area of the ePortal API.

    Subclasses set ``name`` and implement ``_define_tools`` and
    ``_handlers``. The router calls ``handle`` with arguments that have
    already been validated against the tool's schema.
    """

    name: str = ""

    def __init__(self) -> None:
        self._tools: dict[str, ToolDefinition] = {}
        self._define_tools()

    @abstractmethod
    def _define_tools(self) -> None:
        """Populate ``self._tools``."""

    @abstractmethod
    def _handlers(self) -> dict[str, ActionHandler]:
        """Map each tool name to the coroutine that executes it."""

    @property
    def tools(self) -> list[ToolDefinition]:
        """Return all tool definitions for this area."""
        return list(self._tools.values())

    @property
    def tool_names(self) -> frozenset[str]:
        return frozenset(self._tools)

    def register_tools(self, registry: "ToolRegistry") -> None:
        """Insert this area's tools into the registry."""
        registry.register_many(self.tools)
        logger.info("Domain registered", domain=self.name, tool_count=len(self._tools))

    def _tool(self, name: str, description: str, parameters: list[dict[str, Any]]) -> None:
        self._tools[name] = ToolDefinition(
            name=name,
            domain=self.name,
            description=description,
            input_schema=create_tool_schema(parameters)
        )

    async def handle(
        self,
        name: str,
        arguments: dict[str, Any],
        client: "EPortalClient"
    ) -> ToolCallResult:
        """
        Execute one of this area's tools.

        Raises:
            KeyError: If the tool does not belong to this area
            ApiError: If the underlying API call fails
        """
        handler = self._handlers().get(name)
        if handler is None:
            raise KeyError(f"Tool {name} is not handled by domain {self.name}")

        logger.debug("Domain action", domain=self.name, tool=name)
        return await handler(arguments, client)


def format_payload(payload: Any) -> str:
    """Pretty-print an API payload without dropping any field."""
    if isinstance(payload, str):
        return payload
    return json.dumps(payload, indent=2, ensure_ascii=False, default=str)


def extract_items(payload: Any, *keys: str) -> Any:
    """
    Return the list inside a response envelope.

    ePortal list endpoints answer either with a bare list or with an
    object wrapping it (``{"result": [...]}``, ``{"servers": [...]}``).
    Anything else is returned unchanged.
    """
    if isinstance(payload, dict):
        for key in (*keys, "result", "results", "data", "items"):
            if isinstance(payload.get(key), list):
                return payload[key]
    return payload


def list_result(payload: Any, noun: str, *keys: str) -> ToolCallResult:
    """Render a list endpoint response."""
    items = extract_items(payload, *keys)
    if isinstance(items, list):
        if not items:
            return ToolCallResult.text(f"No {noun} found.")
        return ToolCallResult.text(f"Found {len(items)} {noun}:\n{format_payload(items)}")
    return ToolCallResult.text(format_payload(payload))


def action_result(summary: str, payload: Any) -> ToolCallResult:
    """Render the response of a write operation."""
    if payload is None or payload == "":
        return ToolCallResult.text(summary)
    return ToolCallResult.text(f"{summary}\n{format_payload(payload)}")
