"""Feeds domain - patch feeds servers are subscribed to."""

from typing import TYPE_CHECKING, Any
from urllib.parse import quote

from shared.models import ToolCallResult
from domains.base import ActionHandler, BaseDomain, action_result, list_result

if TYPE_CHECKING:
    from eportal_client.client import EPortalClient
    from mcp_server.registry import ToolRegistry


class FeedsDomain(BaseDomain):
    """Feeds domain: list, create and delete patch feeds."""

    name = "feeds"

    def _define_tools(self) -> None:
        self._tool(
            "list_feeds",
            "List all patch feeds configured in ePortal.",
            []
        )

        self._tool(
            "create_feed",
            "Create a new patch feed. Auto-update feeds pull new patches from the "
            "selected channel, optionally delayed by deploy_after hours.",
            [
                {"name": "name", "type": "string", "description": "Feed name", "required": True},
                {"name": "auto", "type": "boolean", "description": "Automatically download new patches",
                 "default": False},
                {"name": "channel", "type": "string", "description": "Update channel",
                 "enum": ["default", "test", "release"]},
                {"name": "deploy_after", "type": "integer", "minimum": 0,
                 "description": "Hours to wait before deploying new patches"},
            ]
        )

        self._tool(
            "delete_feed",
            "Delete a patch feed by name.",
            [
                {"name": "name", "type": "string", "description": "Feed name", "required": True},
            ]
        )

    def _handlers(self) -> dict[str, ActionHandler]:
        return {
            "list_feeds": self._list_feeds,
            "create_feed": self._create_feed,
            "delete_feed": self._delete_feed,
        }

    async def _list_feeds(self, params: dict[str, Any], client: "EPortalClient") -> ToolCallResult:
        payload = await client.get("/feeds")
        return list_result(payload, "feeds", "feeds")

    async def _create_feed(self, params: dict[str, Any], client: "EPortalClient") -> ToolCallResult:
        body = {k: params[k] for k in ("name", "auto", "channel", "deploy_after") if k in params}
        payload = await client.post("/feeds", body=body)
        return action_result(f"Feed {params['name']} created.", payload)

    async def _delete_feed(self, params: dict[str, Any], client: "EPortalClient") -> ToolCallResult:
        name = params["name"]
        payload = await client.delete(f"/feeds/{quote(name, safe='')}")
        return action_result(f"Feed {name} deleted.", payload)


def register_feed_tools(registry: "ToolRegistry") -> FeedsDomain:
    """Register the feeds domain tools and return the domain handler."""
    domain = FeedsDomain()
    domain.register_tools(registry)
    return domain
