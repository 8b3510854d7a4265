# ficsync/utils/rate_limit.py

import time
import threading
import logging
from typing import Callable, Optional, TypeVar

from ficsync.config import MIN_REQUEST_INTERVAL

T = TypeVar("T")

logger = logging.getLogger(__name__)


class RateLimiter:
    def __init__(self,
                 min_interval: float = MIN_REQUEST_INTERVAL,
                 clock: Callable[[], float] = time.monotonic,
                 sleep: Callable[[float], None] = time.sleep):
        """
        Initialize a process-wide request throttle.

        Args:
            min_interval: Minimum gap between two requests in seconds. Values
                below the archive minimum are raised to it.
            clock: Monotonic time source, replaceable in tests
            sleep: Blocking sleep function, replaceable in tests
        """
        if min_interval < MIN_REQUEST_INTERVAL:
            logger.warning(f"Requested interval {min_interval}s raised to {MIN_REQUEST_INTERVAL}s")
            min_interval = MIN_REQUEST_INTERVAL
        self.min_interval = min_interval
        self._clock = clock
        self._sleep = sleep
        self._lock = threading.Lock()
        self.last_request_time: Optional[float] = None

    def throttle(self, operation: Callable[[], T]) -> T:
        """
        Run an operation once the minimum interval since the last one has passed.

        Callers are serialized: only one operation runs at a time, and the
        last request time is recorded when the operation finishes, whether
        it returned or raised.

        Args:
            operation: Zero-argument callable performing the request

        Returns:
            Whatever the operation returns. Exceptions propagate unchanged.
        """
        with self._lock:
            if self.last_request_time is not None:
                wait_time = self.min_interval - (self._clock() - self.last_request_time)
                if wait_time > 0:
                    logger.debug(f"Waiting {wait_time:.1f} seconds before next request")
                    self._sleep(wait_time)
            try:
                return operation()
            finally:
                self.last_request_time = self._clock()

    def time_until_next_request(self) -> float:
        """Seconds until a request could start without waiting"""
        last = self.last_request_time
        if last is None:
            return 0.0
        return max(0.0, self.min_interval - (self._clock() - last))

    def reset(self) -> None:
        """Forget the last request so the next one starts immediately"""
        with self._lock:
            self.last_request_time = None
