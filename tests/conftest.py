"""Shared fixtures for ePortal MCP tests."""

import json
from typing import Any, Callable, Optional

import httpx
import pytest

from shared.models import AuthConfig

BASE_URL = "https://eportal.example.com"


class StubEPortal:
    """
    In-memory stand-in for the ePortal API.

    Records every request and answers with a fixed status and payload.
    """

    def __init__(
        self,
        payload: Any = None,
        status_code: int = 200,
        responder: Optional[Callable[[httpx.Request], httpx.Response]] = None
    ) -> None:
        self.payload = payload
        self.status_code = status_code
        self.responder = responder
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.responder is not None:
            return self.responder(request)
        if self.payload is None:
            return httpx.Response(self.status_code)
        return httpx.Response(self.status_code, json=self.payload)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self)

    @property
    def last_request(self) -> httpx.Request:
        return self.requests[-1]

    def last_json(self) -> Any:
        return json.loads(self.last_request.content)


@pytest.fixture
def basic_auth() -> AuthConfig:
    return AuthConfig(type="basic", username="admin", password="secret")


@pytest.fixture
def make_client(basic_auth):
    """Build an EPortalClient wired to a StubEPortal."""
    from eportal_client.client import EPortalClient

    def _make(stub: StubEPortal, auth: Optional[AuthConfig] = None) -> EPortalClient:
        return EPortalClient(BASE_URL, auth or basic_auth, transport=stub.transport)

    return _make
