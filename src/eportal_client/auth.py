"""Authentication strategies for outbound ePortal requests.

Each strategy is an ``httpx.Auth`` so the client can hand it straight to
httpx.
"""

from abc import ABC, abstractmethod
from typing import Generator

import httpx

from shared.logging import get_logger
from shared.models import AuthConfig, AuthType

logger = get_logger(__name__)


class AuthStrategy(httpx.Auth, ABC):
    """Attaches credentials to every request."""

    @abstractmethod
    def auth_flow(self, request: httpx.Request) -> Generator[httpx.Request, httpx.Response, None]:
        """Add the credentials to ``request`` and send it."""


class BasicAuthStrategy(AuthStrategy):
    """Standard HTTP Basic credentials."""

    def __init__(self, username: str, password: str) -> None:
        self._basic = httpx.BasicAuth(username, password)

    def auth_flow(self, request: httpx.Request) -> Generator[httpx.Request, httpx.Response, None]:
        yield from self._basic.auth_flow(request)


class ApiKeyAuthStrategy(AuthStrategy):
    """API key sent in a configurable header."""

    def __init__(self, api_key: str, header_name: str) -> None:
        self.header_name = header_name
        self._api_key = api_key

    def auth_flow(self, request: httpx.Request) -> Generator[httpx.Request, httpx.Response, None]:
        request.headers[self.header_name] = self._api_key
        yield request


def create_auth_strategy(config: AuthConfig) -> AuthStrategy:
    """Pick the strategy matching the configured auth mode."""
    if config.type == AuthType.API_KEY:
        logger.debug("Using API key authentication", header=config.header_name)
        return ApiKeyAuthStrategy(config.api_key, config.header_name)

    logger.debug("Using basic authentication")
    return BasicAuthStrategy(config.username, config.password)
