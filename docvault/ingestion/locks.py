import threading
from collections.abc import Generator
from contextlib import contextmanager


class OwnerLocks:
    """One in-process lock per owner, created on demand and dropped when idle."""

    def __init__(self) -> None:
        self._locks: dict[str, threading.Lock] = {}
        self._users: dict[str, int] = {}
        self._guard = threading.Lock()

    @contextmanager
    def hold(self, owner_id: str) -> Generator[None, None, None]:
        with self._guard:
            lock = self._locks.setdefault(owner_id, threading.Lock())
            self._users[owner_id] = self._users.get(owner_id, 0) + 1
        try:
            with lock:
                yield
        finally:
            with self._guard:
                self._users[owner_id] -= 1
                if self._users[owner_id] == 0:
                    del self._users[owner_id]
                    del self._locks[owner_id]

    def __len__(self) -> int:
        with self._guard:
            return len(self._locks)
