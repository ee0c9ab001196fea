"""Users domain - ePortal user accounts."""

from typing import TYPE_CHECKING, Any

from shared.models import ToolCallResult
from domains.base import ActionHandler, BaseDomain, list_result

if TYPE_CHECKING:
    from eportal_client.client import EPortalClient
    from mcp_server.registry import ToolRegistry


class UsersDomain(BaseDomain):
    name = "users"

    def _define_tools(self) -> None:
        self._tool(
            "list_users",
            "List ePortal user accounts.",
            []
        )

    def _handlers(self) -> dict[str, ActionHandler]:
        return {"list_users": self._list_users}

    async def _list_users(self, params: dict[str, Any], client: "EPortalClient") -> ToolCallResult:
        payload = await client.get("/users")
        return list_result(payload, "users", "users")


def register_user_tools(registry: "ToolRegistry") -> UsersDomain:
    """Register the users domain tools and return the domain handler."""
    domain = UsersDomain()
    domain.register_tools(registry)
    return domain
