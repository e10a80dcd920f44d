"""Health check endpoints."""

from fastapi import APIRouter, status
from fastapi.responses import JSONResponse

from storegate.core.dependencies import HealthGateDep
from storegate.models.health import HealthResponse, LivenessResponse
from storegate.utils.logging import get_logger

router = APIRouter(tags=["Health"])
logger = get_logger(__name__)


@router.get("/health", response_model=HealthResponse)
async def backend_health(gate: HealthGateDep) -> JSONResponse:
    """
    Report whether the remote backend is awake.

    Clients poll this while the backend wakes from a cold start; a
    503 means "not yet", not a failure of the proxy.
    """
    try:
        result = await gate.check_health()
    except Exception as e:
        logger.exception("Health check error")
        body = HealthResponse(status="error", message=str(e) or "Unknown error")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=body.model_dump(by_alias=True, exclude_none=True),
        )

    body = HealthResponse(
        status="healthy" if result.healthy else "unhealthy",
        message=result.message,
        response_time=result.response_time_ms,
    )
    return JSONResponse(
        status_code=status.HTTP_200_OK if result.healthy else status.HTTP_503_SERVICE_UNAVAILABLE,
        content=body.model_dump(by_alias=True, exclude_none=True),
    )


@router.get("/live", response_model=LivenessResponse)
async def liveness_check() -> LivenessResponse:
    """
    Liveness check endpoint.

    Returns OK while the proxy process runs, whatever the backend state.
    """
    return LivenessResponse()
