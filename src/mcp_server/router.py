"""Tool Router for the MCP server.

Routes tool calls to the functional area that owns them. Handles
lookup, argument validation and execution, and is the single point
where every failure becomes an error result.
"""

import time
from typing import TYPE_CHECKING, Any, Iterable

from shared.errors import EPortalMCPError, ToolNotFoundError, UnknownError
from shared.logging import get_logger
from shared.models import ToolCallRequest, ToolCallResult
from mcp_server.registry import ToolRegistry

if TYPE_CHECKING:
    from domains.base import BaseDomain
    from eportal_client.client import EPortalClient

logger = get_logger(__name__)


def build_partition(domains: Iterable["BaseDomain"]) -> dict[str, "BaseDomain"]:
    """
    Map every tool name to the area that owns it.

    Raises:
        ValueError: If two areas claim the same tool name
    """
    owners: dict[str, "BaseDomain"] = {}
    for domain in domains:
        for name in sorted(domain.tool_names):
            if name in owners:
                raise ValueError(
                    f"Tool '{name}' is claimed by both '{owners[name].name}' "
                    f"and '{domain.name}'"
                )
            owners[name] = domain
    return owners


class ToolRouter:
    """
    Routes tool calls to functional-area handlers.

    Responsibilities:
    - Look up the area owning a tool name
    - Validate arguments against the tool's schema
    - Invoke the area handler with the API client
    - Convert every failure into an error result
    """

    def __init__(
        self,
        registry: ToolRegistry,
        domains: Iterable["BaseDomain"],
        client: "EPortalClient"
    ) -> None:
        self.registry = registry
        self.client = client
        self._owners = build_partition(domains)

        unowned = [name for name in registry.tools if name not in self._owners]
        if unowned:
            raise ValueError(f"Registered tools without a handler: {', '.join(unowned)}")

    def owner_of(self, tool_name: str) -> "BaseDomain":
        """
        Return the area owning ``tool_name``.

        Raises:
            ToolNotFoundError: If no area owns the name
        """
        domain = self._owners.get(tool_name)
        if domain is None or tool_name not in self.registry:
            raise ToolNotFoundError(tool_name)
        return domain

    async def execute(self, request: ToolCallRequest) -> ToolCallResult:
        """
        Execute a tool call.

        This is the main entry point for tool execution and never raises.

        Args:
            request: Tool call request

        Returns:
            Tool execution result, with ``is_error`` set on failure
        """
        start_time = time.time()
        tool_name = request.name
        log = logger.bind(tool=tool_name)

        try:
            domain = self.owner_of(tool_name)
            arguments = self.registry.validate_input(tool_name, request.arguments)

            log.debug("Executing tool", domain=domain.name)
            result = await domain.handle(tool_name, arguments, self.client)
        except EPortalMCPError as e:
            log.warning("Tool execution failed", error_code=e.code, error=str(e))
            return ToolCallResult.error(tool_name, str(e))
        except Exception as e:
            error = UnknownError.wrap(e)
            log.error("Tool execution failed", error_code=error.code, error=str(error), exc_info=True)
            return ToolCallResult.error(tool_name, str(error))

        log.debug(
            "Tool executed",
            execution_time_ms=round((time.time() - start_time) * 1000, 2)
        )
        return result

    async def call(self, name: str, arguments: Any = None) -> ToolCallResult:
        """Shorthand for ``execute`` with a name and raw arguments."""
        return await self.execute(ToolCallRequest(name=name, arguments=arguments))
