# custody_desk/core/locks.py

import threading
from contextlib import contextmanager


class ItemLockTable:
    """One mutex per item id.

    Checkout, return, stock adjustment, delete and the overdue sweep all
    read-then-write the same counters and movement rows, so every mutation
    of an item runs while holding that item's lock. Different items never
    contend.
    """

    def __init__(self):
        self._guard = threading.Lock()
        self._locks: dict[int, threading.Lock] = {}

    def _lock_for(self, item_id: int) -> threading.Lock:
        with self._guard:
            lock = self._locks.get(item_id)
            if lock is None:
                lock = threading.Lock()
                self._locks[item_id] = lock
            return lock

    @contextmanager
    def hold(self, item_id: int):
        lock = self._lock_for(item_id)
        with lock:
            yield

    def forget(self, item_id: int) -> None:
        with self._guard:
            self._locks.pop(item_id, None)


item_locks = ItemLockTable()
