"""Keys domain - registration keys used to register servers."""

from typing import TYPE_CHECKING, Any
from urllib.parse import quote

from shared.logging import get_logger
from shared.models import ToolCallResult
from domains.base import ActionHandler, BaseDomain, action_result, list_result

if TYPE_CHECKING:
    from eportal_client.client import EPortalClient
    from mcp_server.registry import ToolRegistry

logger = get_logger(__name__)


class KeysDomain(BaseDomain):
    """
    Keys domain.

    Registration keys bind servers to a feed and a product, with an
    optional cap on the number of servers that may use the key.
    """

    name = "keys"

    def _define_tools(self) -> None:
        self._tool(
            "list_keys",
            "List registration keys, optionally restricted to one feed.",
            [
                {"name": "feed", "type": "string", "description": "Filter by feed name"},
            ]
        )

        self._tool(
            "create_key",
            "Create a registration key. If no key value is given ePortal generates one.",
            [
                {"name": "key", "type": "string", "description": "Explicit key value"},
                {"name": "description", "type": "string", "description": "Key description",
                 "required": True},
                {"name": "server_limit", "type": "integer", "minimum": 0,
                 "description": "Maximum number of servers (0 means unlimited)"},
                {"name": "feed", "type": "string", "description": "Feed the key is bound to"},
                {"name": "product", "type": "string", "description": "Product the key is for",
                 "enum": ["kernel", "user", "qemu", "db"]},
                {"name": "note", "type": "string", "description": "Free-form note"},
            ]
        )

        self._tool(
            "delete_key",
            "Delete a registration key. Servers registered with it stay registered.",
            [
                {"name": "key", "type": "string", "description": "Key to delete", "required": True},
            ]
        )

    def _handlers(self) -> dict[str, ActionHandler]:
        return {
            "list_keys": self._list_keys,
            "create_key": self._create_key,
            "delete_key": self._delete_key,
        }

    async def _list_keys(self, params: dict[str, Any], client: "EPortalClient") -> ToolCallResult:
        payload = await client.get("/keys", query={"feed": params.get("feed")})
        return list_result(payload, "keys", "keys")

    async def _create_key(self, params: dict[str, Any], client: "EPortalClient") -> ToolCallResult:
        fields = ("key", "description", "server_limit", "feed", "product", "note")
        body = {k: params[k] for k in fields if k in params}
        payload = await client.post("/keys", body=body)
        return action_result("Registration key created.", payload)

    async def _delete_key(self, params: dict[str, Any], client: "EPortalClient") -> ToolCallResult:
        key = params["key"]
        payload = await client.delete(f"/keys/{quote(key, safe='')}")
        logger.info("Registration key deleted")
        return action_result(f"Key {key} deleted.", payload)


def register_key_tools(registry: "ToolRegistry") -> KeysDomain:
    """Register the keys domain tools and return the domain handler."""
    domain = KeysDomain()
    domain.register_tools(registry)
    return domain
