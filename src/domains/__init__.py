"""ePortal functional areas.

Each area contains:
- Tool definitions
- Handlers turning tool calls into ePortal API calls

Areas are isolated by design with no cross-area calls or shared state,
and each owns a fixed, disjoint set of tool names.
"""

from typing import TYPE_CHECKING, Callable

from domains.base import BaseDomain
from domains.feeds import register_feed_tools
from domains.keys import register_key_tools
from domains.patchsets import register_patchset_tools
from domains.servers import register_server_tools
from domains.users import register_user_tools

if TYPE_CHECKING:
    from mcp_server.registry import ToolRegistry

DomainRegistration = Callable[["ToolRegistry"], BaseDomain]

# Order matters only for listing; tool names are disjoint across areas
DOMAIN_REGISTRATIONS: tuple[DomainRegistration, ...] = (
    register_server_tools,
    register_feed_tools,
    register_key_tools,
    register_patchset_tools,
    register_user_tools,
)


def load_all_domains(
    registry: "ToolRegistry",
    registrations: tuple[DomainRegistration, ...] = DOMAIN_REGISTRATIONS
) -> list[BaseDomain]:
    """
    Register every functional area's tools and return the areas.

    This is called once at server start-up, before any tool call.
    """
    return [register(registry) for register in registrations]


__all__ = ["BaseDomain", "DOMAIN_REGISTRATIONS", "load_all_domains"]
