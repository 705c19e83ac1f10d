"""Per-identity chat rate limiting.

Each identity gets a window that starts on its first message and rolls
forward lazily: the first message seen after the window has expired opens a
new one. A background sweeper evicts windows that have been idle for more
than twice the window length so departed identities do not accumulate.
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Callable
from dataclasses import dataclass
from threading import Lock

logger = logging.getLogger(__name__)


@dataclass
class RateWindow:
    """Message count for one identity within its current window."""

    count: int
    window_start: float


class RateLimiter:
    """Sliding-window message counter keyed by identity."""

    def __init__(
        self,
        window_seconds: float = 60.0,
        max_messages: int = 30,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.window_seconds = window_seconds
        self.max_messages = max_messages
        self._clock = clock
        self._windows: dict[str, RateWindow] = {}
        self._lock = Lock()

    def check(self, identity: str) -> bool:
        """Record one message for ``identity`` and return True if it is allowed.

        Denied messages are not counted, so hammering while over the limit
        does not push the reset further out.
        """
        now = self._clock()
        with self._lock:
            window = self._windows.get(identity)
            if window is None or now - window.window_start > self.window_seconds:
                self._windows[identity] = RateWindow(count=1, window_start=now)
                return True
            if window.count < self.max_messages:
                window.count += 1
                return True
            return False

    def sweep(self, now: float | None = None) -> int:
        """Evict windows idle for more than twice the window length.

        Returns:
            Number of identities evicted.
        """
        if now is None:
            now = self._clock()
        cutoff = self.window_seconds * 2
        with self._lock:
            expired = [
                identity
                for identity, window in self._windows.items()
                if now - window.window_start > cutoff
            ]
            for identity in expired:
                del self._windows[identity]
        return len(expired)

    def window_for(self, identity: str) -> RateWindow | None:
        """Return a copy of the current window for ``identity``, if tracked."""
        with self._lock:
            window = self._windows.get(identity)
            if window is None:
                return None
            return RateWindow(count=window.count, window_start=window.window_start)

    def __len__(self) -> int:
        with self._lock:
            return len(self._windows)


class RateLimitSweeper:
    """Periodically evicts stale rate-limit windows in the background."""

    def __init__(self, limiter: RateLimiter, interval: float | None = None) -> None:
        self.limiter = limiter
        self.interval = interval if interval is not None else limiter.window_seconds
        self._task: asyncio.Task[None] | None = None
        self._stopping = asyncio.Event()

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def start(self) -> None:
        """Start the background sweep loop."""
        if self._task is None or self._task.done():
            self._stopping.clear()
            self._task = asyncio.create_task(self._run())

    async def stop(self) -> None:
        """Stop the background sweep loop and wait for it to exit."""
        if self._task is None:
            return

        self._stopping.set()
        await self._task
        self._task = None

    async def _run(self) -> None:
        interval = max(0.01, float(self.interval))

        while not self._stopping.is_set():
            try:
                await asyncio.wait_for(self._stopping.wait(), timeout=interval)
            except TimeoutError:
                pass
            else:
                return

            evicted = self.limiter.sweep()
            if evicted:
                logger.debug("Evicted %d stale rate-limit windows", evicted)
