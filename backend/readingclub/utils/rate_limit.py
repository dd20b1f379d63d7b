"""In-memory login throttle keyed by client and account name."""

from __future__ import annotations

import threading
import time
from collections import defaultdict, deque


class LoginThrottle:
    """Lock a key out after too many failures inside a sliding window.

    Failures older than `window_seconds` fall out of the count; a
    successful login clears the key.
    """

    def __init__(self, max_failures: int, window_seconds: int):
        self.max_failures = max_failures
        self.window_seconds = window_seconds
        self._failures = defaultdict(deque)
        self._lock = threading.Lock()

    def _prune(self, q: deque, now: float) -> None:
        cutoff = now - self.window_seconds
        while q and q[0] < cutoff:
            q.popleft()

    def check(self, key: str) -> tuple[bool, int]:
        """Return `(allowed, retry_after_seconds)` for `key`."""
        now = time.monotonic()
        with self._lock:
            q = self._failures.get(key)
            if not q:
                return True, 0
            self._prune(q, now)
            if len(q) >= self.max_failures:
                return False, max(1, int(self.window_seconds - (now - q[0])))
        return True, 0

    def record_failure(self, key: str) -> None:
        now = time.monotonic()
        with self._lock:
            q = self._failures[key]
            self._prune(q, now)
            q.append(now)

    def reset(self, key: str) -> None:
        with self._lock:
            self._failures.pop(key, None)

    def clear(self) -> None:
        with self._lock:
            self._failures.clear()
