"""Client side of the storegate proxy."""

from storegate.client.store import FetchResult, StoreClient
from storegate.client.wake_retry import WakeOutcome, WakeRetryProtocol, WakeState, is_waking_response

__all__ = [
    "FetchResult",
    "StoreClient",
    "WakeOutcome",
    "WakeRetryProtocol",
    "WakeState",
    "is_waking_response",
]
