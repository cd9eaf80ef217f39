"""Token-bucket request pacing for the GitHub client."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable

logger = logging.getLogger(__name__)


class Throttle:
    """Allow *burst* requests at once, refilled at *hourly_tokens* per hour."""

    def __init__(
        self,
        hourly_tokens: int,
        burst: int,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        if hourly_tokens <= 0 or burst <= 0:
            raise ValueError("hourly_tokens and burst must be positive")
        self._interval = 3600.0 / hourly_tokens
        self._burst = float(burst)
        self._clock = clock
        self._sleep = sleep
        self._tokens = float(burst)
        self._last = clock()

    @property
    def available(self) -> float:
        return self._tokens

    def wait(self) -> None:
        """Take one token, sleeping until one has been refilled if needed."""
        now = self._clock()
        elapsed = max(0.0, now - self._last)
        self._tokens = min(self._burst, self._tokens + elapsed / self._interval)
        self._last = now

        if self._tokens < 1.0:
            delay = (1.0 - self._tokens) * self._interval
            logger.debug("Throttled, sleeping %.2fs", delay)
            self._sleep(delay)
            self._tokens = 1.0
            self._last = now + delay

        self._tokens -= 1.0
