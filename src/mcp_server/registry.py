"""Tool Registry for the MCP server.

Holds every tool definition keyed by name. The registry is filled once
at start-up by the functional areas, then frozen; it is read-only while
the server handles calls.
"""

from types import MappingProxyType
from typing import TYPE_CHECKING, Any, Mapping, Optional

from shared.errors import ToolNotFoundError
from shared.logging import get_logger
from shared.models import ToolDefinition
from shared.schema import validate_arguments

if TYPE_CHECKING:
    from domains import DomainRegistration
    from domains.base import BaseDomain

logger = get_logger(__name__)


class ToolRegistry:
    """
    Central registry for all MCP tools.

    Responsibilities:
    - Register tools from functional areas
    - List available tools
    - Lookup tools by name
    - Validate call arguments against tool schemas
    """

    def __init__(self) -> None:
        self._tools: dict[str, ToolDefinition] = {}
        self._frozen = False

    def register(self, tool: ToolDefinition) -> None:
        """
        Register a tool in the registry.

        Args:
            tool: Tool definition to register

        Raises:
            ValueError: If the tool name is already registered
            RuntimeError: If the registry has been frozen
        """
        if self._frozen:
            raise RuntimeError("Tool registry is frozen")

        if tool.name in self._tools:
            raise ValueError(f"Tool '{tool.name}' is already registered")

        self._tools[tool.name] = tool

        logger.debug("Tool registered", tool=tool.name, domain=tool.domain)

    def register_many(self, tools: list[ToolDefinition]) -> None:
        """Register multiple tools at once."""
        for tool in tools:
            self.register(tool)

    def freeze(self) -> None:
        """Reject any further registration."""
        self._frozen = True

    @property
    def frozen(self) -> bool:
        return self._frozen

    @property
    def tools(self) -> Mapping[str, ToolDefinition]:
        """Read-only view of the name to definition mapping."""
        return MappingProxyType(self._tools)

    def get(self, tool_name: str) -> Optional[ToolDefinition]:
        """
        Get a tool by name.

        Returns:
            ToolDefinition if found, None otherwise
        """
        return self._tools.get(tool_name)

    def list_tools(self) -> list[ToolDefinition]:
        """List all registered tools in registration order."""
        return list(self._tools.values())

    def validate_input(self, tool_name: str, arguments: Any) -> dict[str, Any]:
        """
        Validate call arguments against the tool's input schema.

        Returns:
            The validated arguments with schema defaults applied

        Raises:
            ToolNotFoundError: If the tool is not registered
            ValidationError: Listing every offending field
        """
        tool = self.get(tool_name)
        if not tool:
            raise ToolNotFoundError(tool_name)

        return validate_arguments(tool_name, arguments, tool.input_schema)

    def __contains__(self, tool_name: object) -> bool:
        return tool_name in self._tools

    def __len__(self) -> int:
        return len(self._tools)


def build_registry(
    registrations: Optional[tuple["DomainRegistration", ...]] = None
) -> tuple[ToolRegistry, list["BaseDomain"]]:
    """
    Build a frozen registry from the functional-area registration routines.

    Args:
        registrations: Registration routines (all ePortal areas by default)

    Returns:
        Tuple of (frozen registry, registered areas)
    """
    from domains import DOMAIN_REGISTRATIONS, load_all_domains

    registry = ToolRegistry()
    domains = load_all_domains(registry, registrations or DOMAIN_REGISTRATIONS)
    registry.freeze()

    logger.info(
        "Tool registry built",
        domains=[d.name for d in domains],
        tool_count=len(registry)
    )
    return registry, domains
