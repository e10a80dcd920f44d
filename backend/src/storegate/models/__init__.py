"""storegate data models."""

from storegate.models.health import (
    HealthResponse,
    LivenessResponse,
)
from storegate.models.item import (
    SaleItem,
    SaleItemCreate,
    SaleItemUpdate,
    SalesFilter,
    SalesSummary,
    SortField,
    SortOrder,
)

__all__ = [
    "HealthResponse",
    "LivenessResponse",
    "SaleItem",
    "SaleItemCreate",
    "SaleItemUpdate",
    "SalesFilter",
    "SalesSummary",
    "SortField",
    "SortOrder",
]
