"""
KeyedLockRegistry -- in-process mutual exclusion per (tenant, barcode).

Two allocator calls for the same key in one process run one after the
other.  Across processes the row locks taken by
``WarehouseStockStore.read(..., lock=True)`` do the same job on databases
that support SELECT ... FOR UPDATE.
"""

from __future__ import annotations

import threading
from collections.abc import Generator, Hashable
from contextlib import contextmanager


class KeyedLockRegistry:
    """Hands out one ``threading.Lock`` per key, created on first use."""

    def __init__(self) -> None:
        self._guard = threading.Lock()
        self._locks: dict[Hashable, threading.Lock] = {}

    def lock_for(self, key: Hashable) -> threading.Lock:
        with self._guard:
            lock = self._locks.get(key)
            if lock is None:
                lock = self._locks[key] = threading.Lock()
            return lock

    @contextmanager
    def hold(self, key: Hashable) -> Generator[None, None, None]:
        lock = self.lock_for(key)
        with lock:
            yield

    def __len__(self) -> int:
        with self._guard:
            return len(self._locks)
