import threading
from contextlib import contextmanager
from typing import Dict, List, Optional, Tuple

from xox.models import Room


class RoomStore:
    """Thread-safe in-memory registry of rooms and connection memberships.

    Holds no game logic. ``transaction()`` exposes the store lock so a
    caller can make several membership changes appear as one.
    """

    def __init__(self) -> None:
        self._rooms: Dict[str, Room] = {}
        self._memberships: Dict[str, str] = {}  # conn_id -> room code
        self._lock = threading.RLock()

    def transaction(self):
        return self._lock

    # ---------- rooms ---------- #

    def put(self, code: str, room: Room) -> None:
        with self._lock:
            self._rooms[code] = room

    def get(self, code: str) -> Optional[Room]:
        with self._lock:
            return self._rooms.get(code)

    def remove(self, code: str) -> Optional[Room]:
        with self._lock:
            return self._rooms.pop(code, None)

    def all(self) -> List[Tuple[str, Room]]:
        with self._lock:
            return list(self._rooms.items())

    def __len__(self) -> int:
        with self._lock:
            return len(self._rooms)

    # ---------- memberships ---------- #

    def bind(self, conn_id: str, code: str) -> None:
        with self._lock:
            self._memberships[conn_id] = code

    def unbind(self, conn_id: str) -> Optional[str]:
        with self._lock:
            return self._memberships.pop(conn_id, None)

    def room_of(self, conn_id: str) -> Optional[str]:
        with self._lock:
            return self._memberships.get(conn_id)


class RoomLocks:
    """One lock per room code so rooms never block each other."""

    def __init__(self) -> None:
        self._locks: Dict[str, threading.Lock] = {}
        self._guard = threading.Lock()

    def _lock_for(self, code: str) -> threading.Lock:
        with self._guard:
            lock = self._locks.get(code)
            if lock is None:
                lock = self._locks[code] = threading.Lock()
            return lock

    @contextmanager
    def hold(self, code: str):
        lock = self._lock_for(code)
        with lock:
            yield

    def discard(self, code: str) -> None:
        with self._guard:
            self._locks.pop(code, None)

    def __contains__(self, code: str) -> bool:
        with self._guard:
            return code in self._locks
