"""Client for the TuxCare ePortal REST API.

Attaches the configured credentials to every request and normalizes
every failure into ``ApiError``. Each call is a single attempt; nothing
is cached or retried.
"""

from typing import Any, Optional

import httpx

from eportal_client.auth import AuthStrategy, create_auth_strategy
from shared.errors import ApiError
from shared.logging import get_logger
from shared.models import AuthConfig

logger = get_logger(__name__)

DEFAULT_API_PREFIX = "/admin/api"


class EPortalClient:
    """
    Client for the ePortal admin API.

    Holds only the base URL, the auth strategy and transport settings for
    the process lifetime. A fresh ``httpx.AsyncClient`` is opened per call.
    """

    def __init__(
        self,
        base_url: str,
        auth: AuthConfig,
        timeout: float = 30.0,
        verify_ssl: bool = True,
        api_prefix: str = DEFAULT_API_PREFIX,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ) -> None:
        """
        Initialize the client.

        Args:
            base_url: ePortal base URL
            auth: Authentication configuration
            timeout: Request timeout in seconds
            verify_ssl: Verify the server's TLS certificate
            api_prefix: Path prefix of the admin API
            transport: Optional httpx transport (used by tests)
        """
        self.base_url = base_url.rstrip("/")
        self.api_prefix = "/" + api_prefix.strip("/") if api_prefix.strip("/") else ""
        self.timeout = timeout
        self.verify_ssl = verify_ssl
        self._auth: AuthStrategy = create_auth_strategy(auth)
        self._transport = transport

    def build_url(self, path: str) -> str:
        """Join the base URL, API prefix and a resource path."""
        return f"{self.base_url}{self.api_prefix}/{path.lstrip('/')}"

    def _get_headers(self) -> dict[str, str]:
        return {
            "Accept": "application/json",
            "User-Agent": "tuxcare-eportal-mcp",
        }

    def _create_client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            auth=self._auth,
            headers=self._get_headers(),
            timeout=self.timeout,
            verify=self.verify_ssl,
            transport=self._transport
        )

    async def request(
        self,
        method: str,
        path: str,
        query: Optional[dict[str, Any]] = None,
        body: Any = None
    ) -> Any:
        """
        Make an authenticated request to the ePortal API.

        Args:
            method: HTTP method
            path: Resource path below the API prefix
            query: Query parameters; None values are dropped
            body: JSON-serializable request body

        Returns:
            Decoded JSON payload, response text, or None for empty responses

        Raises:
            ApiError: On transport failure or an HTTP status >= 400
        """
        params = {k: v for k, v in (query or {}).items() if v is not None}
        url = self.build_url(path)

        kwargs: dict[str, Any] = {"params": params}
        if body is not None:
            kwargs["json"] = body

        try:
            async with self._create_client() as client:
                response = await client.request(method.upper(), url, **kwargs)
        except httpx.TransportError as e:
            logger.warning("ePortal request failed", method=method.upper(), path=path, error=str(e))
            raise ApiError.from_transport(e) from e

        logger.debug(
            "ePortal request",
            method=method.upper(),
            path=path,
            status=response.status_code
        )

        if response.status_code >= 400:
            error = ApiError.from_response(response)
            if error.is_auth_failure:
                logger.warning(
                    "ePortal rejected the configured credentials",
                    method=method.upper(),
                    path=path,
                    status=response.status_code
                )
            raise error

        return self._decode(response)

    @staticmethod
    def _decode(response: httpx.Response) -> Any:
        if response.status_code == 204 or not response.content:
            return None
        content_type = response.headers.get("content-type", "")
        if "json" in content_type:
            try:
                return response.json()
            except ValueError:
                return response.text
        return response.text

    async def get(self, path: str, query: Optional[dict[str, Any]] = None) -> Any:
        return await self.request("GET", path, query=query)

    async def post(
        self,
        path: str,
        body: Any = None,
        query: Optional[dict[str, Any]] = None
    ) -> Any:
        return await self.request("POST", path, query=query, body=body)

    async def put(
        self,
        path: str,
        body: Any = None,
        query: Optional[dict[str, Any]] = None
    ) -> Any:
        return await self.request("PUT", path, query=query, body=body)

    async def delete(self, path: str, query: Optional[dict[str, Any]] = None) -> Any:
        return await self.request("DELETE", path, query=query)
