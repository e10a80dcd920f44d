"""Exception handlers converting errors into JSON responses."""

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from storegate.core.exceptions import StoreGateError
from storegate.utils.logging import get_logger

logger = get_logger(__name__)


async def storegate_exception_handler(request: Request, exc: StoreGateError) -> JSONResponse:
    """Convert a StoreGateError to its JSON response."""
    if exc.status_code >= 500:
        logger.error(exc.message, error_type=type(exc).__name__, **exc.details)
    else:
        logger.info(exc.message, error_type=type(exc).__name__, status_code=exc.status_code)

    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Last resort: log and answer 500 without leaking internals."""
    logger.exception("Unhandled error", error_type=type(exc).__name__)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": "Internal server error"},
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Attach the storegate exception handlers to ``app``."""
    app.add_exception_handler(StoreGateError, storegate_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
