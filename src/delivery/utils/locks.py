"""Per-key mutual exclusion."""

from collections.abc import Iterator
from contextlib import contextmanager
from threading import Lock, RLock


class KeyedLocks:
    """One re-entrant lock per key, created on first use.

    Holding the lock for one key never blocks callers holding another.
    Locks are never evicted: memory grows with the number of distinct keys
    seen, one ``RLock`` per registered or ordering user.
    """

    def __init__(self) -> None:
        self._locks: dict[str, RLock] = {}
        self._guard = Lock()

    def _lock_for(self, key: str) -> RLock:
        with self._guard:
            lock = self._locks.get(key)
            if lock is None:
                lock = self._locks[key] = RLock()
            return lock

    @contextmanager
    def hold(self, key: str) -> Iterator[None]:
        lock = self._lock_for(key)
        with lock:
            yield
