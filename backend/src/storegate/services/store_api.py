"""HTTP client for the remote store backend's ``/items`` endpoints."""

from typing import Any
from urllib.parse import quote

import httpx

from storegate.config import Settings, get_settings
from storegate.core.exceptions import BackendNotConfiguredError, TransportError, UpstreamError
from storegate.utils.logging import get_logger

logger = get_logger(__name__)

JSON_HEADERS = {"Content-Type": "application/json"}


class StoreApiClient:
    """Forwards item operations to the remote store backend."""

    def __init__(
        self,
        settings: Settings | None = None,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize client.

        Args:
            settings: Application settings
            http_client: Client used for backend calls; one is created lazily if omitted
        """
        self.settings = settings or get_settings()
        self._http_client = http_client
        self._owns_client = http_client is None

    def require_configured(self) -> str:
        """Return the backend base URL.

        Raises:
            BackendNotConfiguredError: If no backend URL is configured.
        """
        if self.settings.api_url is None:
            raise BackendNotConfiguredError()
        return self.settings.api_url

    def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._http_client is None or self._http_client.is_closed:
            self._http_client = httpx.AsyncClient(timeout=self.settings.request_timeout)
            self._owns_client = True
        return self._http_client

    async def _request(
        self,
        method: str,
        path: str,
        error_message: str,
        payload: dict[str, Any] | None = None,
    ) -> Any:
        """Send one request and decode the JSON answer.

        Raises:
            BackendNotConfiguredError: If no backend URL is configured.
            UpstreamError: If the backend answers with a non-2xx status.
            TransportError: If the backend cannot be reached.
        """
        url = f"{self.require_configured()}{path}"

        try:
            response = await self._get_client().request(
                method,
                url,
                json=payload,
                headers=JSON_HEADERS,
                timeout=self.settings.request_timeout,
            )
        except httpx.HTTPError as e:
            logger.error("Backend request failed", method=method, url=url, error=str(e))
            raise TransportError(str(e)) from e

        if not response.is_success:
            message = _upstream_message(response) or error_message
            logger.warning(
                "Backend returned error status",
                method=method,
                url=url,
                status_code=response.status_code,
                message=message,
            )
            raise UpstreamError(response.status_code, message)

        if not response.content:
            return {}

        try:
            return response.json()
        except ValueError as e:
            logger.error("Backend returned invalid JSON", method=method, url=url)
            raise TransportError(f"Invalid JSON from backend: {e}") from e

    async def list_items(self) -> list[dict[str, Any]]:
        """Fetch every sale item."""
        return await self._request("GET", "/items", "Failed to fetch items from backend")

    async def get_item(self, item_id: str) -> dict[str, Any]:
        """Fetch one sale item by id."""
        return await self._request("GET", _item_path(item_id), "Item not found")

    async def create_item(self, payload: dict[str, Any]) -> dict[str, Any]:
        """Create a sale item from an already validated payload."""
        return await self._request("POST", "/items", "Failed to create item in backend", payload)

    async def update_item(self, item_id: str, payload: dict[str, Any]) -> dict[str, Any]:
        """Update a sale item from an already validated payload."""
        return await self._request("PUT", _item_path(item_id), "Failed to update item", payload)

    async def delete_item(self, item_id: str) -> dict[str, Any]:
        """Delete a sale item."""
        return await self._request("DELETE", _item_path(item_id), "Failed to delete item")

    async def aclose(self) -> None:
        """Close the HTTP client if this instance created it."""
        if self._owns_client and self._http_client and not self._http_client.is_closed:
            await self._http_client.aclose()


def _item_path(item_id: str) -> str:
    """Path of one item, with the id encoded as a single segment."""
    return f"/items/{quote(item_id, safe='')}"

def _upstream_message(response: httpx.Response) -> str | None:
    """Extract the ``message`` field of an upstream error body, if any."""
    try:
        data = response.json()
    except ValueError:
        return None
    if isinstance(data, dict) and data.get("message"):
        return str(data["message"])
    return None
