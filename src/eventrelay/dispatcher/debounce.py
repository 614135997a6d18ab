"""Per-client debounce bookkeeping.

Keeps the timestamp of the last processed event for every client
identifier seen during the lifetime of the process. The check ("has the
window elapsed?") and the record ("the window starts now") happen under
one lock so two concurrent requests for the same client cannot both
fire.
"""

from __future__ import annotations

import logging
import threading
import time
from typing import Callable

logger = logging.getLogger(__name__)

Clock = Callable[[], float]


class DebounceState:
    """Thread-safe mapping of client identifier to last-processed time.

    Timestamps come from ``clock`` (monotonic seconds by default). Entries
    are never removed unless ``max_age`` is set, in which case entries
    older than ``max_age`` seconds are dropped and the client is treated
    as never seen.
    """

    def __init__(self, clock: Clock = time.monotonic, max_age: float | None = None) -> None:
        self._clock = clock
        self._max_age = max_age
        self._last_seen: dict[str, float] = {}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._last_seen)

    def __contains__(self, client: object) -> bool:
        with self._lock:
            return client in self._last_seen

    @property
    def max_age(self) -> float | None:
        return self._max_age

    def last_seen(self, client: str) -> float | None:
        """Return the recorded timestamp for ``client``, if any."""
        with self._lock:
            return self._last_seen.get(client)

    def claim(self, client: str, interval: float, bypass: bool = False) -> bool:
        """Decide whether an event for ``client`` should fire, and record it.

        Fires when the client has never been seen, when more than
        ``interval`` seconds passed since the last recorded event, or
        when ``bypass`` is set. A firing event moves the client's
        timestamp to now; a suppressed one leaves it untouched.
        """
        with self._lock:
            now = self._clock()
            if self._max_age is not None:
                self._evict(now)

            last = self._last_seen.get(client)
            if last is None:
                logger.debug("First sighting of %s", client)
                self._last_seen[client] = now
                return True

            elapsed = now - last
            if elapsed > interval or bypass:
                self._last_seen[client] = now
                return True

            logger.debug(
                "Suppressing %s: %.1fs since last event, window is %ss",
                client, elapsed, interval,
            )
            return False

    def prune(self) -> int:
        """Drop entries older than ``max_age``. Returns the number removed."""
        if self._max_age is None:
            return 0
        with self._lock:
            return self._evict(self._clock())

    def _evict(self, now: float) -> int:
        # Caller holds the lock.
        stale = [
            client for client, ts in self._last_seen.items()
            if now - ts > self._max_age  # type: ignore[operator]
        ]
        for client in stale:
            del self._last_seen[client]
        if stale:
            logger.debug("Evicted %d stale client(s)", len(stale))
        return len(stale)
