"""Patchsets domain - patch releases available in a feed.

Patchsets can be enabled or disabled individually, or in bulk up to
(or down to) a given release.
"""

from typing import TYPE_CHECKING, Any

from shared.models import ToolCallResult
from domains.base import ActionHandler, BaseDomain, action_result, list_result

if TYPE_CHECKING:
    from eportal_client.client import EPortalClient
    from mcp_server.registry import ToolRegistry

PATCHSET_ACTIONS = ["enable", "disable", "enable-upto", "undeploy-downto"]
PRODUCTS = ["kernel", "user", "qemu", "db"]


class PatchsetsDomain(BaseDomain):
    """Patchsets domain: list patchsets and change their deployment state."""

    name = "patchsets"

    def _define_tools(self) -> None:
        self._tool(
            "list_patchsets",
            "List patchsets available in ePortal with their deployment status.",
            [
                {"name": "feed", "type": "string", "description": "Feed name (default feed if omitted)"},
                {"name": "product", "type": "string", "description": "Product the patchsets belong to",
                 "enum": PRODUCTS},
            ]
        )

        self._tool(
            "manage_patchsets",
            "Change the deployment state of a patchset. 'enable-upto' enables every "
            "patchset up to the given one; 'undeploy-downto' undeploys every patchset "
            "down to the given one.",
            [
                {"name": "patchset", "type": "string", "description": "Patchset identifier",
                 "required": True},
                {"name": "action", "type": "string", "description": "Action to perform",
                 "enum": PATCHSET_ACTIONS, "required": True},
                {"name": "feed", "type": "string", "description": "Feed name (default feed if omitted)"},
                {"name": "product", "type": "string", "description": "Product the patchset belongs to",
                 "enum": PRODUCTS},
            ]
        )

    def _handlers(self) -> dict[str, ActionHandler]:
        return {
            "list_patchsets": self._list_patchsets,
            "manage_patchsets": self._manage_patchsets,
        }

    async def _list_patchsets(self, params: dict[str, Any], client: "EPortalClient") -> ToolCallResult:
        query = {"feed": params.get("feed"), "product": params.get("product")}
        payload = await client.get("/patchsets", query=query)
        return list_result(payload, "patchsets", "patchsets")

    async def _manage_patchsets(self, params: dict[str, Any], client: "EPortalClient") -> ToolCallResult:
        body = {k: params[k] for k in ("patchset", "action", "feed", "product") if k in params}
        payload = await client.post("/patchsets/manage", body=body)
        return action_result(
            f"Patchset {params['patchset']}: {params['action']} applied.",
            payload
        )


def register_patchset_tools(registry: "ToolRegistry") -> PatchsetsDomain:
    """Register the patchsets domain tools and return the domain handler."""
    domain = PatchsetsDomain()
    domain.register_tools(registry)
    return domain
