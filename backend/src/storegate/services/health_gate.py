"""Backend availability gate.

The remote store backend runs on a free tier that sleeps when idle, so
the first request after a quiet period may take up to a minute. The gate
probes ``{api_url}/health`` before real work is attempted and caches a
positive answer for a short while so a burst of proxied requests costs
at most one probe.
"""

import asyncio
import time
from collections.abc import Callable
from dataclasses import dataclass, replace

import httpx

from storegate.config import Settings, get_settings
from storegate.core.exceptions import BackendNotConfiguredError, BackendUnavailableError
from storegate.utils.logging import get_logger

logger = get_logger(__name__)

NOT_CONFIGURED_MESSAGE = "Backend API URL not configured"
TIMEOUT_MESSAGE = "Health check timed out - backend may be starting up"


@dataclass
class HealthStatus:
    """Cached outcome of the last health check.

    ``last_checked_at`` only moves on a completed, successful check.
    """

    healthy: bool = False
    last_checked_at: float | None = None

    def is_fresh(self, now: float, ttl: float) -> bool:
        """Whether a positive result is still inside the cache window."""
        if not self.healthy or self.last_checked_at is None:
            return False
        return now - self.last_checked_at < ttl


@dataclass(frozen=True)
class HealthCheckResult:
    """Result of a single health check; never an exception."""

    healthy: bool
    message: str
    response_time_ms: float | None = None


class BackendHealthGate:
    """Decides whether the remote backend can be talked to right now."""

    def __init__(
        self,
        settings: Settings | None = None,
        http_client: httpx.AsyncClient | None = None,
        clock: Callable[[], float] = time.monotonic,
        status: HealthStatus | None = None,
    ) -> None:
        """Initialize gate.

        Args:
            settings: Application settings
            http_client: Client used for the probe; one is created lazily if omitted
            clock: Monotonic time source in seconds
            status: Initial cached state
        """
        self.settings = settings or get_settings()
        self._http_client = http_client
        self._owns_client = http_client is None
        self._clock = clock
        self._status = status or HealthStatus()
        self._inflight: asyncio.Task[HealthCheckResult] | None = None

    @property
    def status(self) -> HealthStatus:
        """Snapshot of the cached health state."""
        return replace(self._status)

    @property
    def health_url(self) -> str | None:
        if self.settings.api_url is None:
            return None
        return f"{self.settings.api_url}/health"

    def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._http_client is None or self._http_client.is_closed:
            self._http_client = httpx.AsyncClient()
            self._owns_client = True
        return self._http_client

    async def check_health(self, timeout: float | None = None) -> HealthCheckResult:
        """Probe the backend, or answer from cache.

        Args:
            timeout: Total seconds allowed for the probe; defaults to
                ``settings.health_check_timeout``

        Returns:
            HealthCheckResult describing reachability
        """
        url = self.health_url
        if url is None:
            return HealthCheckResult(healthy=False, message=NOT_CONFIGURED_MESSAGE)

        if timeout is None:
            timeout = self.settings.health_check_timeout

        if self._status.is_fresh(self._clock(), self.settings.health_cache_ttl):
            return HealthCheckResult(
                healthy=True,
                message="Backend is healthy (cached)",
                response_time_ms=0,
            )

        # Concurrent callers share one in-flight probe, each bounded by its own timeout.
        if self._inflight is None or self._inflight.done():
            self._inflight = asyncio.ensure_future(self._probe(url, timeout))
            self._inflight.add_done_callback(self._clear_inflight)

        start = self._clock()
        try:
            return await asyncio.wait_for(asyncio.shield(self._inflight), timeout)
        except asyncio.TimeoutError:
            logger.warning("Backend health check timed out", url=url, timeout=timeout)
            return HealthCheckResult(
                healthy=False,
                message=TIMEOUT_MESSAGE,
                response_time_ms=(self._clock() - start) * 1000,
            )

    def _clear_inflight(self, task: asyncio.Task) -> None:
        if self._inflight is task:
            self._inflight = None

    async def _probe(self, url: str, timeout: float) -> HealthCheckResult:
        start = self._clock()

        def elapsed_ms() -> float:
            return (self._clock() - start) * 1000

        try:
            client = self._get_client()
            response = await asyncio.wait_for(
                client.get(
                    url,
                    headers={"Content-Type": "application/json"},
                    timeout=timeout,
                ),
                timeout=timeout,
            )
        except (asyncio.TimeoutError, httpx.TimeoutException):
            self._status.healthy = False
            logger.warning("Backend health check timed out", url=url, timeout=timeout)
            return HealthCheckResult(
                healthy=False, message=TIMEOUT_MESSAGE, response_time_ms=elapsed_ms()
            )
        except Exception as e:
            self._status.healthy = False
            logger.warning("Backend health check failed", url=url, error=str(e))
            return HealthCheckResult(
                healthy=False,
                message=f"Health check failed: {e}",
                response_time_ms=elapsed_ms(),
            )

        response_time_ms = elapsed_ms()

        if response.is_success:
            self._status.healthy = True
            self._status.last_checked_at = self._clock()
            logger.info("Backend is healthy", response_time_ms=round(response_time_ms, 1))
            return HealthCheckResult(
                healthy=True, message="Backend is healthy", response_time_ms=response_time_ms
            )

        self._status.healthy = False
        logger.warning("Backend health check returned error status", status_code=response.status_code)
        return HealthCheckResult(
            healthy=False,
            message=f"Backend returned status {response.status_code}",
            response_time_ms=response_time_ms,
        )

    async def ensure_healthy(self) -> HealthCheckResult:
        """Run a health check and raise if the backend is not reachable.

        Raises:
            BackendNotConfiguredError: If no backend URL is configured.
            BackendUnavailableError: If the check reports unhealthy.
        """
        if self.health_url is None:
            raise BackendNotConfiguredError(NOT_CONFIGURED_MESSAGE)

        result = await self.check_health()
        if not result.healthy:
            raise BackendUnavailableError(result.message)
        return result

    def reset_cache(self) -> None:
        """Forget the cached result so the next check hits the network."""
        self._status.healthy = False
        self._status.last_checked_at = None

    async def aclose(self) -> None:
        """Close the HTTP client if the gate created it."""
        if self._owns_client and self._http_client and not self._http_client.is_closed:
            await self._http_client.aclose()
