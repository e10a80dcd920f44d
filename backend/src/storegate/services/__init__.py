"""storegate services."""

from storegate.services.health_gate import BackendHealthGate, HealthCheckResult, HealthStatus
from storegate.services.sales import filter_items, sort_items, summarize
from storegate.services.store_api import StoreApiClient

__all__ = [
    "BackendHealthGate",
    "HealthCheckResult",
    "HealthStatus",
    "StoreApiClient",
    "filter_items",
    "sort_items",
    "summarize",
]
