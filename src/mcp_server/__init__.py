"""MCP Server - Tool registry and execution routing.

The MCP server registers the ePortal tools, validates call arguments,
routes calls to the owning functional area and normalizes every
failure into an error result.
"""

__version__ = "1.0.5"
SERVER_NAME = "tuxcare-eportal-mcp"

from mcp_server.registry import ToolRegistry, build_registry
from mcp_server.router import ToolRouter, build_partition

__all__ = [
    "ToolRegistry",
    "ToolRouter",
    "build_partition",
    "build_registry",
    "SERVER_NAME",
    "__version__",
]
