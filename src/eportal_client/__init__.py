"""ePortal API client.

Wraps the ePortal REST API behind an authenticated, failure-normalizing
async client used by every domain handler.
"""

from eportal_client.auth import (
    ApiKeyAuthStrategy,
    AuthStrategy,
    BasicAuthStrategy,
    create_auth_strategy,
)
from eportal_client.client import EPortalClient

__all__ = [
    "ApiKeyAuthStrategy",
    "AuthStrategy",
    "BasicAuthStrategy",
    "create_auth_strategy",
    "EPortalClient",
]
