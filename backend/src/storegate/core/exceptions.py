"""
storegate Custom Exceptions

Defines the errors raised while proxying requests to the remote store
backend. Each carries the HTTP status it is surfaced with.
"""

from typing import Any


class StoreGateError(Exception):
    """Base exception for all storegate errors."""

    status_code: int = 500

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to API response body."""
        return {"error": self.message}


# =============================================================================
# Configuration Errors
# =============================================================================


class ConfigurationError(StoreGateError):
    """Raised when there's a configuration problem."""

    status_code = 500


class BackendNotConfiguredError(ConfigurationError):
    """Raised when no remote backend URL is configured."""

    def __init__(self, message: str = "Backend API URL not configured") -> None:
        super().__init__(message)


# =============================================================================
# Backend Availability Errors
# =============================================================================


class BackendUnavailableError(StoreGateError):
    """Raised when the backend is unhealthy, most likely still waking up."""

    status_code = 503

    def __init__(self, message: str) -> None:
        super().__init__(message, details={"reason": message})

    def to_dict(self) -> dict[str, Any]:
        return {"error": self.message, "isBackendWaking": True}


# =============================================================================
# Upstream Errors
# =============================================================================


class UpstreamError(StoreGateError):
    """Raised when the backend answers with a non-2xx status."""

    def __init__(self, status_code: int, message: str) -> None:
        super().__init__(message, details={"status_code": status_code})
        self.status_code = status_code


class TransportError(StoreGateError):
    """Raised when the backend cannot be reached at all."""

    status_code = 500

    def __init__(self, reason: str, message: str = "Failed to connect to backend API") -> None:
        super().__init__(message, details={"reason": reason})
        self.reason = reason


# =============================================================================
# Request Errors
# =============================================================================


class InvalidPayloadError(StoreGateError):
    """Raised when a request body fails validation before any backend call."""

    status_code = 400

    def __init__(self, message: str, errors: list[dict[str, Any]] | None = None) -> None:
        super().__init__(message, details={"errors": errors or []})
        self.errors = errors or []
