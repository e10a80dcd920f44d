"""Sale item endpoints proxied to the remote store backend.

Every route consults the health gate before talking to the backend so
a sleeping backend yields a quick 503 ``isBackendWaking`` answer that
the client can poll on, instead of a request hanging through the cold
start.
"""

from typing import Any

from fastapi import APIRouter, Request, status
from pydantic import BaseModel, ValidationError

from storegate.core.dependencies import HealthGateDep, StoreApiDep
from storegate.core.exceptions import InvalidPayloadError, UpstreamError
from storegate.models.item import SaleItem, SaleItemCreate, SaleItemUpdate, SalesSummary
from storegate.services.sales import summarize
from storegate.utils.logging import get_logger

router = APIRouter()
logger = get_logger(__name__)

REQUIRED_FIELDS_MESSAGE = "Name, quantity, and unitPrice are required"
INVALID_ITEMS_MESSAGE = "Backend returned invalid item data"


async def read_json_object(request: Request) -> dict[str, Any]:
    """Decode the request body, which must be a JSON object."""
    try:
        body = await request.json()
    except ValueError:
        raise InvalidPayloadError("Request body must be valid JSON")

    if not isinstance(body, dict):
        raise InvalidPayloadError("Request body must be a JSON object")
    return body


def validate_payload(model: type[BaseModel], body: dict[str, Any]) -> None:
    """Check ``body`` against ``model``; the body itself is forwarded unchanged."""
    try:
        model.model_validate(body)
    except ValidationError as e:
        raise InvalidPayloadError(
            "Invalid sale item",
            errors=e.errors(include_url=False, include_context=False, include_input=False),
        )


@router.get("")
async def list_items(gate: HealthGateDep, store_api: StoreApiDep) -> Any:
    """List all sale items."""
    store_api.require_configured()
    await gate.ensure_healthy()
    return await store_api.list_items()


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_item(request: Request, gate: HealthGateDep, store_api: StoreApiDep) -> Any:
    """Create a sale item. ``name``, ``quantity`` and ``unitPrice`` are required."""
    store_api.require_configured()
    body = await read_json_object(request)

    if not body.get("name") or body.get("quantity") is None or body.get("unitPrice") is None:
        raise InvalidPayloadError(REQUIRED_FIELDS_MESSAGE)
    validate_payload(SaleItemCreate, body)

    await gate.ensure_healthy()
    item = await store_api.create_item(body)
    logger.info("Sale item created", name=body["name"])
    return item


@router.get("/summary", response_model=SalesSummary)
async def items_summary(gate: HealthGateDep, store_api: StoreApiDep) -> SalesSummary:
    """Totals over every sale item."""
    store_api.require_configured()
    await gate.ensure_healthy()
    data = await store_api.list_items()
    if isinstance(data, dict):
        data = data.get("items", [])
    try:
        items = [SaleItem.model_validate(item) for item in data]
    except ValidationError:
        logger.warning("Backend returned malformed sale items")
        raise UpstreamError(status.HTTP_502_BAD_GATEWAY, INVALID_ITEMS_MESSAGE)
    return summarize(items)


@router.get("/{item_id}")
async def get_item(item_id: str, gate: HealthGateDep, store_api: StoreApiDep) -> Any:
    """Get a sale item by id."""
    store_api.require_configured()
    await gate.ensure_healthy()
    return await store_api.get_item(item_id)


@router.put("/{item_id}")
async def update_item(
    item_id: str, request: Request, gate: HealthGateDep, store_api: StoreApiDep
) -> Any:
    """Update a sale item."""
    store_api.require_configured()
    await gate.ensure_healthy()

    body = await read_json_object(request)
    validate_payload(SaleItemUpdate, body)

    item = await store_api.update_item(item_id, body)
    logger.info("Sale item updated", item_id=item_id)
    return item


@router.delete("/{item_id}")
async def delete_item(item_id: str, gate: HealthGateDep, store_api: StoreApiDep) -> Any:
    """Delete a sale item."""
    store_api.require_configured()
    await gate.ensure_healthy()

    result = await store_api.delete_item(item_id)
    logger.info("Sale item deleted", item_id=item_id)
    return result
