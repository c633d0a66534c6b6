"""
Per-key mutual exclusion for the in-process stores.

Callers working on the same key (an email, a phone number) are
serialized; callers on different keys never wait for each other.
Lock entries are reference counted and dropped once nobody holds or
waits on them, so the table does not grow with every key ever seen.
"""

import threading
from collections.abc import Iterator
from contextlib import contextmanager


class KeyedLock:
    """Table of reentrant locks created on demand per key."""

    def __init__(self) -> None:
        self._guard = threading.Lock()
        self._locks: dict[str, threading.RLock] = {}
        self._users: dict[str, int] = {}

    @contextmanager
    def hold(self, key: str) -> Iterator[None]:
        with self._guard:
            lock = self._locks.setdefault(key, threading.RLock())
            self._users[key] = self._users.get(key, 0) + 1
        try:
            with lock:
                yield
        finally:
            with self._guard:
                self._users[key] -= 1
                if self._users[key] == 0:
                    del self._users[key]
                    del self._locks[key]

    def __len__(self) -> int:
        with self._guard:
            return len(self._locks)
