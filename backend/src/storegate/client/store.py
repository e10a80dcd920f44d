"""Async client for the storegate proxy API."""

import asyncio
from dataclasses import dataclass, field
from typing import Any

import httpx
from pydantic import BaseModel

from storegate.client.wake_retry import Sleep, WakeRetryProtocol, WakeState
from storegate.config import Settings, get_settings
from storegate.models.item import SaleItem, SalesFilter, SalesSummary, SortField, SortOrder
from storegate.services.sales import filter_items, sort_items, summarize
from storegate.utils.logging import get_logger

logger = get_logger(__name__)


@dataclass
class FetchResult:
    """Items loaded by ``StoreClient.fetch_items``."""

    state: WakeState
    items: list[SaleItem] = field(default_factory=list)
    polls: int = 0
    loaded: bool = False


class StoreClient:
    """Talks to the proxy the way the store-sales page does.

    Listing items goes through the wake-retry protocol; every successful
    create, update or delete reloads the list.
    """

    def __init__(
        self,
        base_url: str,
        settings: Settings | None = None,
        http_client: httpx.AsyncClient | None = None,
        sleep: Sleep = asyncio.sleep,
    ) -> None:
        self.settings = settings or get_settings()
        self.api_url = f"{base_url.rstrip('/')}{self.settings.api_prefix}"
        self._http_client = http_client or httpx.AsyncClient(
            timeout=self.settings.request_timeout
        )
        self._owns_client = http_client is None
        self.protocol = WakeRetryProtocol(
            probe=self.check_health,
            interval=self.settings.wake_retry_interval,
            max_retries=self.settings.wake_max_retries,
            sleep=sleep,
        )
        self.items: list[SaleItem] = []

    @property
    def state(self) -> WakeState:
        return self.protocol.state

    async def check_health(self) -> bool:
        """Whether the proxy reports the backend as healthy."""
        try:
            response = await self._http_client.get(f"{self.api_url}/health")
        except httpx.HTTPError:
            return False
        return response.is_success

    async def fetch_items(self) -> FetchResult:
        """Load every sale item, waiting for the backend to wake if needed."""
        outcome = await self.protocol.run(lambda: self._http_client.get(f"{self.api_url}/items"))

        if outcome.state is not WakeState.IDLE or not outcome.ok:
            if outcome.response is not None:
                logger.warning("Could not load items", status_code=outcome.response.status_code)
            # An error status on a normal answer still ends the load
            state = WakeState.FAILED if outcome.state is WakeState.FAILED else WakeState.IDLE
            return FetchResult(state=state, polls=outcome.polls)

        try:
            data = outcome.response.json()
            if isinstance(data, dict):
                data = data.get("items", [])
            items = [SaleItem.model_validate(item) for item in data]
        except (ValueError, TypeError) as e:
            logger.error("Could not parse items", error=str(e))
            return FetchResult(state=WakeState.FAILED, polls=outcome.polls)

        self.items = items
        return FetchResult(
            state=WakeState.IDLE, items=list(self.items), polls=outcome.polls, loaded=True
        )

    async def _mutate(self, method: str, path: str, payload: Any = None) -> bool:
        if isinstance(payload, BaseModel):
            payload = payload.model_dump(by_alias=True, exclude_none=True)

        try:
            response = await self._http_client.request(method, f"{self.api_url}{path}", json=payload)
        except httpx.HTTPError as e:
            logger.error("Item request failed", method=method, path=path, error=str(e))
            return False

        if not response.is_success:
            logger.warning(
                "Item request rejected",
                method=method,
                path=path,
                status_code=response.status_code,
            )
            return False

        await self.fetch_items()
        return True

    async def create_item(self, data: BaseModel | dict[str, Any]) -> bool:
        """Create an item and reload the list."""
        return await self._mutate("POST", "/items", data)

    async def update_item(self, item_id: str, data: BaseModel | dict[str, Any]) -> bool:
        """Update an item and reload the list."""
        return await self._mutate("PUT", f"/items/{item_id}", data)

    async def delete_item(self, item_id: str) -> bool:
        """Delete an item and reload the list."""
        return await self._mutate("DELETE", f"/items/{item_id}")

    def summary(self) -> SalesSummary:
        """Totals over the last loaded items."""
        return summarize(self.items)

    def search(
        self,
        criteria: SalesFilter | None = None,
        sort_by: SortField = SortField.DATE,
        order: SortOrder = SortOrder.DESC,
    ) -> list[SaleItem]:
        """Filter and sort the last loaded items."""
        items = filter_items(self.items, criteria) if criteria else list(self.items)
        return sort_items(items, sort_by, order)

    async def aclose(self) -> None:
        if self._owns_client:
            await self._http_client.aclose()

    async def __aenter__(self) -> "StoreClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()
