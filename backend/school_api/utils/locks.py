"""In-process keyed locks used to serialize per-class membership changes."""

from __future__ import annotations

import threading
from contextlib import contextmanager
from typing import Dict, Hashable, Iterator, List


class KeyedLock:
    """One `threading.Lock` per key, alive only while someone holds or waits on it.

    Only callers in the same process are serialized; requests served by
    other worker processes are not.
    """

    def __init__(self):
        # key -> [lock, number of holders and waiters]
        self._locks: Dict[Hashable, List] = {}
        self._guard = threading.Lock()

    @contextmanager
    def hold(self, key: Hashable) -> Iterator[None]:
        with self._guard:
            entry = self._locks.get(key)
            if entry is None:
                entry = self._locks[key] = [threading.Lock(), 0]
            entry[1] += 1
        try:
            with entry[0]:
                yield
        finally:
            with self._guard:
                entry[1] -= 1
                if entry[1] == 0:
                    del self._locks[key]

    def __len__(self) -> int:
        with self._guard:
            return len(self._locks)


class_locks = KeyedLock()
