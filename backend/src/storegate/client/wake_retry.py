"""Wake-retry protocol for a proxy whose backend may be asleep.

When a request comes back ``503`` with ``isBackendWaking: true`` the
protocol enters WAKING and polls a health probe on a fixed interval.
The first healthy poll triggers exactly one retry of the original
request; running out of polls ends in FAILED without a retry.

    IDLE -> LOADING -> IDLE
    IDLE -> LOADING -> WAKING -> IDLE | FAILED
"""

import asyncio
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from enum import Enum

import httpx

from storegate.utils.logging import get_logger

logger = get_logger(__name__)

Sender = Callable[[], Awaitable[httpx.Response]]
Probe = Callable[[], Awaitable[bool]]
Sleep = Callable[[float], Awaitable[None]]


class WakeState(str, Enum):
    """State of the wake-retry protocol."""

    IDLE = "idle"
    LOADING = "loading"
    WAKING = "waking"
    FAILED = "failed"


@dataclass
class WakeOutcome:
    """How a protocol run ended."""

    state: WakeState
    response: httpx.Response | None = None
    polls: int = 0
    retried: bool = False
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.response is not None and self.response.is_success


def is_waking_response(response: httpx.Response) -> bool:
    """Whether ``response`` says the backend is still waking up."""
    if response.status_code != 503:
        return False
    try:
        data = response.json()
    except ValueError:
        return False
    return isinstance(data, dict) and bool(data.get("isBackendWaking"))


class WakeRetryProtocol:
    """Runs a request, waiting out a backend cold start if needed."""

    def __init__(
        self,
        probe: Probe,
        interval: float = 5.0,
        max_retries: int = 12,
        sleep: Sleep = asyncio.sleep,
        on_state_change: Callable[[WakeState], None] | None = None,
    ) -> None:
        """Initialize protocol.

        Args:
            probe: Coroutine returning True once the backend is healthy
            interval: Seconds to wait before each poll
            max_retries: Maximum number of polls before giving up
            sleep: Coroutine used to wait; replaced in tests
            on_state_change: Callback for state changes
        """
        if max_retries < 1:
            raise ValueError("max_retries must be at least 1")

        self.probe = probe
        self.interval = interval
        self.max_retries = max_retries
        self._sleep = sleep
        self.on_state_change = on_state_change
        self._state = WakeState.IDLE

    @property
    def state(self) -> WakeState:
        """Current protocol state."""
        return self._state

    def _set_state(self, state: WakeState) -> None:
        """Update state and notify callback."""
        self._state = state

        if self.on_state_change:
            try:
                self.on_state_change(state)
            except Exception as e:
                logger.error("State change callback error", error=str(e))

        logger.debug("Wake-retry state", state=state.value)

    async def _poll(self) -> bool:
        try:
            return await self.probe()
        except httpx.HTTPError as e:
            logger.debug("Health probe failed", error=str(e))
            return False

    async def wait_until_healthy(self) -> tuple[bool, int]:
        """Poll the probe until healthy or out of attempts.

        Returns:
            Tuple of (healthy, number of polls made)
        """
        polls = 0
        healthy = False
        while not healthy and polls < self.max_retries:
            await self._sleep(self.interval)
            healthy = await self._poll()
            polls += 1
        return healthy, polls

    async def run(self, send: Sender) -> WakeOutcome:
        """Send a request through the protocol.

        Args:
            send: Coroutine issuing the request; called once, or twice
                when the backend had to be woken

        Returns:
            WakeOutcome with the final state and last response
        """
        self._set_state(WakeState.LOADING)

        try:
            response = await send()
        except httpx.HTTPError as e:
            logger.error("Request failed", error=str(e))
            self._set_state(WakeState.FAILED)
            return WakeOutcome(state=WakeState.FAILED, error=str(e))

        if not is_waking_response(response):
            self._set_state(WakeState.IDLE)
            return WakeOutcome(state=WakeState.IDLE, response=response)

        self._set_state(WakeState.WAKING)
        logger.info(
            "Backend is waking up, polling health",
            interval=self.interval,
            max_retries=self.max_retries,
        )

        healthy, polls = await self.wait_until_healthy()

        if not healthy:
            logger.warning("Backend did not wake up in time", polls=polls)
            self._set_state(WakeState.FAILED)
            return WakeOutcome(state=WakeState.FAILED, response=response, polls=polls)

        logger.info("Backend is awake, retrying request", polls=polls)

        try:
            response = await send()
        except httpx.HTTPError as e:
            logger.error("Retried request failed", error=str(e))
            self._set_state(WakeState.FAILED)
            return WakeOutcome(state=WakeState.FAILED, polls=polls, retried=True, error=str(e))

        self._set_state(WakeState.IDLE)
        return WakeOutcome(state=WakeState.IDLE, response=response, polls=polls, retried=True)
