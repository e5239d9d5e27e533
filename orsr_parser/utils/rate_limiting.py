"""
Thread-safe request throttling for register calls.

The register has no published rate limit but blocks aggressive clients, so
every fetcher owns a RequestThrottle that enforces:
- a minimum interval between requests (requests_per_second)
- an extra pause after every Nth request (delay / every)

Usage:
    from orsr_parser.utils.rate_limiting import RequestThrottle

    throttle = RequestThrottle(requests_per_second=2.0, delay=0.5, every=10)

    # Use as a callable
    throttle()
    make_request()

    # Or use as a context manager
    with throttle:
        make_request()
"""

import logging
import time
from threading import Lock

logger = logging.getLogger(__name__)


class RequestThrottle:
    """
    Thread-safe request throttle.

    The request counter and the last call time are guarded by one lock, so a
    throttle can be shared by worker threads of the same fetcher.

    Args:
        requests_per_second: Maximum requests per second allowed
        delay: Seconds to pause after every `every`-th request (0 disables)
        every: N for the periodic pause

    Example:
        >>> throttle = RequestThrottle(requests_per_second=2.0, delay=1.0, every=5)
        >>> throttle()  # First call - no wait
        >>> throttle()  # Waits if needed to keep 2 req/sec
    """

    def __init__(self, requests_per_second: float, delay: float = 0.0, every: int = 1):
        """
        Initialize the throttle.

        Raises:
            ValueError: If requests_per_second <= 0, delay < 0 or every < 1
        """
        if requests_per_second <= 0:
            raise ValueError(f"requests_per_second must be > 0, got {requests_per_second}")
        if delay < 0:
            raise ValueError(f"delay must be >= 0, got {delay}")
        if every < 1:
            raise ValueError(f"every must be >= 1, got {every}")

        self.requests_per_second = requests_per_second
        self.min_interval = 1.0 / requests_per_second
        self.delay = delay
        self.every = every
        self._lock = Lock()
        self._last_call = 0.0
        self._count = 0

    @property
    def count(self) -> int:
        """Number of requests let through so far."""
        return self._count

    def __call__(self) -> None:
        """
        Wait until the next request may be sent.

        Sleeps for the rest of the minimum interval, plus `delay` seconds when
        the previous request was an `every`-th one.
        """
        with self._lock:
            wait = 0.0
            if self._last_call:
                elapsed = time.time() - self._last_call
                if elapsed < self.min_interval:
                    wait = self.min_interval - elapsed
            if self.delay and self._count and self._count % self.every == 0:
                wait = max(wait, self.delay)

            if wait > 0:
                logger.debug(f"Throttling request #{self._count + 1} for {wait:.2f}s")
                time.sleep(wait)

            self._count += 1
            self._last_call = time.time()

    def __enter__(self):
        """Context manager entry - enforces throttling."""
        self()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit - no cleanup needed."""
        return False

    def reset(self) -> None:
        """
        Reset the throttle (clears last call time and request counter).

        Useful for testing or when you want to allow immediate calls.
        """
        with self._lock:
            self._last_call = 0.0
            self._count = 0

    @classmethod
    def from_settings(cls, settings) -> "RequestThrottle":
        """Create a throttle from requests_per_second / request_delay / delay_every."""
        return cls(
            requests_per_second=settings.requests_per_second,
            delay=settings.request_delay,
            every=settings.delay_every,
        )
