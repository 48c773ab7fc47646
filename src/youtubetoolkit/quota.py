"""YouTube API quota accounting."""

import functools
import threading
from typing import Callable, TypeVar

from .logging_config import get_logger

logger = get_logger(__name__)

T = TypeVar("T")

# Units charged by the YouTube Data API v3 for each request.
# List requests are charged once per page.
QUOTA_COSTS = {
    "subscriptions.list": 1,
    "subscriptions.insert": 50,
    "subscriptions.delete": 50,
    "playlists.list": 1,
    "playlists.insert": 50,
    "playlists.delete": 50,
    "playlistItems.list": 1,
    "playlistItems.insert": 50,
    "channels.list": 1,
}


class QuotaCounter:
    """Thread-safe counter of the quota units spent by this process."""

    def __init__(self) -> None:
        self._used = 0
        self._lock = threading.Lock()

    def charge(self, operation: str) -> int:
        """Charge the cost of one request.

        Args:
            operation: API operation name, e.g. "playlists.insert"

        Returns:
            The units charged

        Raises:
            KeyError: If the operation has no known cost
        """
        units = QUOTA_COSTS[operation]
        self.add(units)
        logger.debug("Quota: %s costs %d units", operation, units)
        return units

    def add(self, units: int) -> None:
        with self._lock:
            self._used += units

    @property
    def used(self) -> int:
        with self._lock:
            return self._used


def with_quota_cost(operation: str) -> Callable[[Callable[..., T]], Callable[..., T]]:
    """Decorator charging a single-request API method before it runs.

    The decorated method must belong to an object with a ``quota`` attribute
    holding a QuotaCounter.

    Args:
        operation: API operation name used to look up the cost

    Returns:
        Decorated function
    """
    if operation not in QUOTA_COSTS:
        raise ValueError(f"Unknown quota operation: {operation}")

    def decorator(func: Callable[..., T]) -> Callable[..., T]:
        @functools.wraps(func)
        def wrapper(self, *args, **kwargs) -> T:
            self.quota.charge(operation)
            return func(self, *args, **kwargs)

        return wrapper

    return decorator
