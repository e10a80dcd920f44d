"""
storegate FastAPI Dependencies

Provides dependency injection functions for FastAPI routes.
"""

from typing import Annotated

from fastapi import Depends, Request

from storegate.services.health_gate import BackendHealthGate
from storegate.services.store_api import StoreApiClient


def get_health_gate(request: Request) -> BackendHealthGate:
    """Get backend health gate from app state."""
    return request.app.state.health_gate


HealthGateDep = Annotated[BackendHealthGate, Depends(get_health_gate)]


def get_store_api(request: Request) -> StoreApiClient:
    """Get store backend client from app state."""
    return request.app.state.store_api


StoreApiDep = Annotated[StoreApiClient, Depends(get_store_api)]
