"""Per-key mutual exclusion for in-process callers."""

from __future__ import annotations

import threading
from contextlib import contextmanager
from typing import Hashable, Iterable, Iterator


class KeyedLocks:
    """A lazily-created ``threading.Lock`` per key.

    ``hold`` acquires the locks of several keys in sorted order so two
    callers with overlapping key sets cannot deadlock.
    """

    def __init__(self) -> None:
        self._locks: dict[Hashable, threading.Lock] = {}
        self._guard = threading.Lock()

    def lock_for(self, key: Hashable) -> threading.Lock:
        with self._guard:
            lock = self._locks.get(key)
            if lock is None:
                lock = self._locks[key] = threading.Lock()
            return lock

    @contextmanager
    def hold(self, keys: Iterable[Hashable]) -> Iterator[None]:
        locks = [self.lock_for(key) for key in sorted(set(keys), key=str)]
        acquired: list[threading.Lock] = []
        try:
            for lock in locks:
                lock.acquire()
                acquired.append(lock)
            yield
        finally:
            for lock in reversed(acquired):
                lock.release()
