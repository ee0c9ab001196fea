"""Servers domain - registered hosts and their tags.

Covers listing servers, registering and unregistering hosts, bulk
unregistration and tag management.
"""

from typing import TYPE_CHECKING, Any
from urllib.parse import quote

from shared.logging import get_logger
from shared.models import ToolCallResult
from domains.base import ActionHandler, BaseDomain, action_result, list_result

if TYPE_CHECKING:
    from eportal_client.client import EPortalClient
    from mcp_server.registry import ToolRegistry

logger = get_logger(__name__)


class ServersDomain(BaseDomain):
    """
    Servers domain.

    Provides tools for:
    - Listing registered servers with filters
    - Registering and unregistering hosts
    - Replacing a server's tags
    """

    name = "servers"

    def _define_tools(self) -> None:
        self._tool(
            "list_servers",
            "List servers registered in ePortal. Optionally filter by license key, "
            "feed, hostname or tag, and page through results with limit/offset.",
            [
                {"name": "key", "type": "string", "description": "Filter by registration key"},
                {"name": "feed", "type": "string", "description": "Filter by feed name"},
                {"name": "hostname", "type": "string", "description": "Filter by hostname"},
                {"name": "tag", "type": "string", "description": "Filter by server tag"},
                {"name": "limit", "type": "integer", "description": "Maximum number of servers to return",
                 "minimum": 1},
                {"name": "offset", "type": "integer", "description": "Number of servers to skip",
                 "minimum": 0},
            ]
        )

        self._tool(
            "register_host",
            "Register a host in ePortal using a registration key.",
            [
                {"name": "key", "type": "string", "description": "Registration key", "required": True},
                {"name": "hostname", "type": "string", "description": "Hostname of the server",
                 "required": True},
                {"name": "ip", "type": "string", "description": "IP address of the server"},
                {"name": "tags", "type": "array", "items": "string",
                 "description": "Tags to assign to the server"},
            ]
        )

        self._tool(
            "unregister_host",
            "Unregister a single server from ePortal by its server ID.",
            [
                {"name": "server_id", "type": "string", "description": "ePortal server ID",
                 "required": True},
            ]
        )

        self._tool(
            "bulk_unregister_hosts",
            "Unregister several servers from ePortal in one request.",
            [
                {"name": "server_ids", "type": "array", "items": "string", "minItems": 1,
                 "description": "IDs of the servers to unregister", "required": True},
            ]
        )

        self._tool(
            "set_server_tags",
            "Replace the tags of a server. Pass an empty list to clear all tags.",
            [
                {"name": "server_id", "type": "string", "description": "ePortal server ID",
                 "required": True},
                {"name": "tags", "type": "array", "items": "string",
                 "description": "New tags for the server", "required": True},
            ]
        )

    def _handlers(self) -> dict[str, ActionHandler]:
        return {
            "list_servers": self._list_servers,
            "register_host": self._register_host,
            "unregister_host": self._unregister_host,
            "bulk_unregister_hosts": self._bulk_unregister_hosts,
            "set_server_tags": self._set_server_tags,
        }

    async def _list_servers(
        self,
        params: dict[str, Any],
        client: "EPortalClient"
    ) -> ToolCallResult:
        query = {
            k: params.get(k)
            for k in ("key", "feed", "hostname", "tag", "limit", "offset")
        }
        payload = await client.get("/servers", query=query)
        return list_result(payload, "servers", "servers")

    async def _register_host(
        self,
        params: dict[str, Any],
        client: "EPortalClient"
    ) -> ToolCallResult:
        body = {k: params[k] for k in ("key", "hostname", "ip", "tags") if k in params}
        payload = await client.post("/servers", body=body)
        return action_result(f"Host {params['hostname']} registered.", payload)

    async def _unregister_host(
        self,
        params: dict[str, Any],
        client: "EPortalClient"
    ) -> ToolCallResult:
        server_id = params["server_id"]
        payload = await client.delete(f"/servers/{quote(server_id, safe='')}")
        return action_result(f"Server {server_id} unregistered.", payload)

    async def _bulk_unregister_hosts(
        self,
        params: dict[str, Any],
        client: "EPortalClient"
    ) -> ToolCallResult:
        server_ids = params["server_ids"]
        logger.info("Bulk unregister requested", count=len(server_ids))
        payload = await client.post("/servers/unregister", body={"server_ids": server_ids})
        return action_result(f"Unregistered {len(server_ids)} servers.", payload)

    async def _set_server_tags(
        self,
        params: dict[str, Any],
        client: "EPortalClient"
    ) -> ToolCallResult:
        server_id = params["server_id"]
        tags = params["tags"]
        payload = await client.put(
            f"/servers/{quote(server_id, safe='')}/tags",
            body={"tags": tags}
        )
        summary = (
            f"Tags of server {server_id} set to: {', '.join(tags)}."
            if tags else f"Tags of server {server_id} cleared."
        )
        return action_result(summary, payload)


def register_server_tools(registry: "ToolRegistry") -> ServersDomain:
    """Register the servers domain tools and return the domain handler."""
    domain = ServersDomain()
    domain.register_tools(registry)
    return domain
