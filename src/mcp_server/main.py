"""MCP Server - stdio entry point.

Binds the tool registry and router to the MCP protocol's list-tools and
call-tool operations, and resolves start-up configuration from a config
file, CLI flags and environment variables.
"""

import argparse
import asyncio
import sys
from typing import Any, Optional, Sequence

import mcp.types as types
import pydantic
from mcp.server import Server
from mcp.server.stdio import stdio_server

from shared.config import AppConfig, EnvSettings, load_config_file, merge_config
from shared.errors import ConfigurationError
from shared.logging import get_logger, setup_logging
from shared.models import ToolCallResult, ToolDefinition
from eportal_client.client import EPortalClient
from mcp_server import SERVER_NAME, __version__
from mcp_server.registry import build_registry
from mcp_server.router import ToolRouter

logger = get_logger(__name__)


class EPortalMCPServer:
    """
    ePortal MCP server facade.

    Builds the API client, tool registry and router once, then serves
    ``list_tools`` and ``call_tool`` for the lifetime of the process.
    """

    def __init__(self, config: AppConfig, client: Optional[EPortalClient] = None) -> None:
        self.config = config
        self.client = client or EPortalClient(
            config.eportal_url,
            config.auth,
            timeout=config.timeout,
            verify_ssl=config.verify_ssl
        )
        self.registry, domains = build_registry()
        self.router = ToolRouter(self.registry, domains, self.client)
        self.server = Server(SERVER_NAME, version=__version__)
        self._setup_handlers()

    def list_tools(self) -> list[ToolDefinition]:
        """Return every registered tool, unfiltered."""
        return self.registry.list_tools()

    async def call_tool(self, name: str, arguments: Any = None) -> ToolCallResult:
        """Execute a tool; always returns a result, never raises."""
        return await self.router.call(name, arguments)

    def _setup_handlers(self) -> None:
        async def handle_list_tools(request: types.ListToolsRequest) -> types.ServerResult:
            tools = [
                types.Tool(
                    name=tool.name,
                    description=tool.description,
                    inputSchema=tool.input_schema
                )
                for tool in self.list_tools()
            ]
            return types.ServerResult(types.ListToolsResult(tools=tools))

        async def handle_call_tool(request: types.CallToolRequest) -> types.ServerResult:
            result = await self.call_tool(request.params.name, request.params.arguments)
            return types.ServerResult(to_mcp_result(result))

        # Installed directly rather than through the SDK decorators so the
        # router's error flag reaches the wire as-is
        self.server.request_handlers[types.ListToolsRequest] = handle_list_tools
        self.server.request_handlers[types.CallToolRequest] = handle_call_tool

    async def run(self) -> None:
        """Serve over stdio until the client disconnects."""
        logger.info(
            "Starting ePortal MCP server",
            eportal_url=self.config.eportal_url,
            auth_type=self.config.auth.type.value,
            tool_count=len(self.registry)
        )
        async with stdio_server() as (read_stream, write_stream):
            await self.server.run(
                read_stream,
                write_stream,
                self.server.create_initialization_options()
            )
        logger.info("ePortal MCP server stopped")


def to_mcp_result(result: ToolCallResult) -> types.CallToolResult:
    """Convert a tool result into the MCP wire type."""
    return types.CallToolResult(
        content=[types.TextContent(type="text", text=block.text) for block in result.content],
        isError=result.is_error
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="tuxcare-eportal-mcp",
        description="TuxCare ePortal MCP server for ePortal API integration"
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("-c", "--config", help="Path to a YAML or JSON config file")
    parser.add_argument("-u", "--url", help="ePortal URL")
    parser.add_argument(
        "-a", "--auth-type",
        choices=["basic", "api_key"],
        help="Authentication type (default: basic)"
    )
    parser.add_argument("--username", help="Username for basic auth")
    parser.add_argument("--password", help="Password for basic auth")
    parser.add_argument("--api-key", help="API key for api_key auth")
    parser.add_argument("--header-name", help="Custom header name for the API key")
    parser.add_argument("--timeout", type=float, help="Request timeout in seconds")
    parser.add_argument(
        "--insecure",
        action="store_true",
        default=None,
        help="Do not verify the ePortal TLS certificate"
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Minimum log level (default: INFO)"
    )
    return parser


def cli_flags_to_config(args: argparse.Namespace) -> dict[str, Any]:
    """Return the CLI flags in the nested config-file layout."""
    return {
        "eportal_url": args.url,
        "timeout": args.timeout,
        "verify_ssl": False if args.insecure else None,
        "log_level": args.log_level,
        "auth": {
            "type": args.auth_type,
            "username": args.username,
            "password": args.password,
            "api_key": args.api_key,
            "header_name": args.header_name,
        },
    }


def resolve_config(argv: Optional[Sequence[str]] = None) -> AppConfig:
    """
    Resolve configuration from the config file, CLI flags and environment.

    Raises:
        ConfigurationError: If a required value is missing or invalid
    """
    args = build_parser().parse_args(argv)
    file_data = load_config_file(args.config) if args.config else None
    try:
        env_vars = EnvSettings().to_config_dict()
    except pydantic.ValidationError as e:
        raise ConfigurationError(f"Invalid TUXCARE_* environment variable: {e}") from e
    return merge_config(
        file_data=file_data,
        cli_flags=cli_flags_to_config(args),
        env_vars=env_vars
    )


def main(argv: Optional[Sequence[str]] = None) -> None:
    """Run the ePortal MCP server."""
    try:
        config = resolve_config(argv)
    except ConfigurationError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        sys.exit(1)

    setup_logging(config.log_level, json_output=config.log_json)

    server = EPortalMCPServer(config)
    try:
        asyncio.run(server.run())
    except KeyboardInterrupt:
        pass
    except Exception as e:
        logger.error("Fatal error in MCP server", error=str(e), exc_info=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
