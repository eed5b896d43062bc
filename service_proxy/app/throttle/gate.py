"""
Process-wide throttle gate for rate-sensitive upstreams.
"""

import asyncio
import itertools
import time
from dataclasses import dataclass
from typing import Awaitable, Callable, Optional

from shared.errors import ThrottleError
from shared.logging import get_logger


@dataclass(frozen=True)
class ThrottleTicket:
    """Proof that a caller was admitted through the gate."""

    position: int
    released_at: float
    waited: float


class ThrottleGate:
    """Space gated calls at least ``min_interval`` seconds apart, FIFO.

    Callers queue on an ``asyncio.Lock`` whose waiters are woken in arrival
    order. The holder computes the remaining delay from the last release
    time, sleeps it off, stamps the new release time and lets go of the lock.
    Only the start of each outbound call is spaced; how long it runs is not
    bounded here.
    """

    def __init__(
        self,
        min_interval: float = 0.5,
        *,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        if min_interval < 0:
            raise ValueError("min_interval must be non-negative")
        self.min_interval = min_interval
        self._clock = clock
        self._sleep = sleep
        self._lock = asyncio.Lock()
        self._positions = itertools.count()
        self._last_release: Optional[float] = None
        self.logger = get_logger("proxy.throttle")

    @property
    def last_release(self) -> Optional[float]:
        """Clock reading of the most recent release, if any."""
        return self._last_release

    async def acquire(self) -> ThrottleTicket:
        """Wait for this caller's turn and return its ticket."""
        position = next(self._positions)
        entered_at = self._clock()

        async with self._lock:
            try:
                await self._wait_for_slot(position)
            except asyncio.CancelledError:
                raise
            except Exception as exc:
                self.logger.error("Throttle wait failed", position=position, error=str(exc))
                raise ThrottleError(
                    f"Request throttling failed: {exc}",
                    details={"position": position},
                ) from exc

            released_at = self._clock()
            self._last_release = released_at

        return ThrottleTicket(
            position=position,
            released_at=released_at,
            waited=max(0.0, released_at - entered_at),
        )

    async def _wait_for_slot(self, position: int) -> None:
        if self._last_release is None:
            return

        # Loop timers may fire marginally early; re-check until the gap holds.
        while True:
            delay = self._last_release + self.min_interval - self._clock()
            if delay <= 0:
                return
            self.logger.debug("Throttling request", position=position, delay_ms=round(delay * 1000, 1))
            await self._sleep(delay)
