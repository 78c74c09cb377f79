import logging
import time
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from xox.errors import (
    AlreadyExists,
    AlreadyInRoom,
    AlreadyStarted,
    Full,
    IllegalMove,
    NotActive,
    NotAPlayer,
    NotFinished,
    NotFound,
    RoomError,
    WrongTurn,
)
from xox.models import (
    FIRST_MARKER,
    SECOND_MARKER,
    PlayerSlot,
    Room,
    RoomStatus,
    empty_board,
)
from xox.store import RoomLocks, RoomStore
from .rules import evaluate, is_legal_move

logger = logging.getLogger(__name__)

DEFAULT_TTL_SEC = 24 * 60 * 60
DEFAULT_CODE_MAX_LENGTH = 12


@dataclass
class RoomResult:
    """What a successful operation hands back to the transport layer.

    ``room`` is a snapshot taken while the room was locked, so it can be
    broadcast after the lock is released. ``assignments`` maps connection
    ids to the marker each of them should be told about.
    """
    code: str
    room: Dict[str, Any]
    marker: Optional[str] = None
    assignments: Dict[str, str] = field(default_factory=dict)
    removed: bool = False


def normalize_code(raw, max_length: int = DEFAULT_CODE_MAX_LENGTH) -> str:
    if not isinstance(raw, str):
        raise NotFound('Room code is required')
    code = raw.strip().upper()
    if not code or len(code) > max_length or not code.isalnum() or not code.isascii():
        raise NotFound(f'Invalid room code: {raw!r}')
    return code


class RoomCoordinator:
    """Authoritative state machine for every room.

    Each operation validates first and writes last, all while holding the
    room's lock, so a failed call leaves the room untouched. Lock order is
    always room lock, then store transaction.
    """

    def __init__(self, store: Optional[RoomStore] = None, ttl_sec: float = DEFAULT_TTL_SEC,
                 clock=time.time, code_max_length: int = DEFAULT_CODE_MAX_LENGTH):
        self.store = store if store is not None else RoomStore()
        self.ttl_sec = ttl_sec
        self.code_max_length = code_max_length
        self._clock = clock
        self._locks = RoomLocks()

    def normalize_code(self, raw) -> str:
        return normalize_code(raw, self.code_max_length)

    # ---------- lifecycle ---------- #

    def create_room(self, code, name: str, conn_id: str) -> RoomResult:
        code = self.normalize_code(code)
        try:
            with self._locks.hold(code):
                with self.store.transaction():
                    if self.store.room_of(conn_id) is not None:
                        raise AlreadyInRoom()
                    if self.store.get(code) is not None:
                        raise AlreadyExists(f'Game {code} already exists')
                    room = Room(code=code, first=PlayerSlot(name=name, conn_id=conn_id),
                                created_at=self._clock())
                    self.store.put(code, room)
                    self.store.bind(conn_id, code)
                    snapshot = room.to_dict()
        except RoomError:
            self._release_if_unused(code)
            raise
        return RoomResult(code=code, room=snapshot, marker=FIRST_MARKER.value)

    def join_room(self, code, name: str, conn_id: str) -> RoomResult:
        code = self.normalize_code(code)
        if self.store.get(code) is None:
            raise NotFound()
        try:
            with self._locks.hold(code):
                with self.store.transaction():
                    if self.store.room_of(conn_id) is not None:
                        raise AlreadyInRoom()
                    room = self.store.get(code)
                    if room is None:
                        raise NotFound()
                    if room.second is not None:
                        raise Full()
                    if room.status is not RoomStatus.WAITING:
                        raise AlreadyStarted()
                    room.second = PlayerSlot(name=name, conn_id=conn_id)
                    room.status = RoomStatus.ACTIVE
                    self.store.bind(conn_id, code)
                    snapshot = room.to_dict()
                    first_conn = room.first.conn_id
        except RoomError:
            self._release_if_unused(code)
            raise
        return RoomResult(
            code=code,
            room=snapshot,
            marker=SECOND_MARKER.value,
            assignments={first_conn: FIRST_MARKER.value, conn_id: SECOND_MARKER.value},
        )

    def _release_if_unused(self, code: str) -> None:
        # Codes that never became a room keep no lock
        if self.store.get(code) is None:
            self._locks.discard(code)

    # ---------- play ---------- #

    @contextmanager
    def _room_for(self, conn_id: str):
        code = self.store.room_of(conn_id)
        room = self.store.get(code) if code else None
        if room is None:
            raise NotFound()
        with self._locks.hold(code):
            # The room may have been evicted while we waited for its lock
            if self.store.get(code) is not room or self.store.room_of(conn_id) != code:
                raise NotFound()
            yield room

    def apply_move(self, conn_id: str, index) -> RoomResult:
        with self._room_for(conn_id) as room:
            if room.status is not RoomStatus.ACTIVE:
                raise NotActive()
            marker = room.marker_of(conn_id)
            if marker is None:
                raise NotAPlayer()
            if marker is not room.turn:
                raise WrongTurn()
            if not is_legal_move(room.board, index):
                raise IllegalMove()

            room.board[index] = marker
            outcome = evaluate(room.board)
            if outcome.finished:
                room.status = RoomStatus.FINISHED
                room.winner = outcome.winner
                room.winning_line = outcome.line
            else:
                room.turn = marker.other
            snapshot = room.to_dict()
            code = room.code
        return RoomResult(code=code, room=snapshot, marker=marker.value)

    def reset_room(self, conn_id: str) -> RoomResult:
        with self._room_for(conn_id) as room:
            if room.status is not RoomStatus.FINISHED:
                raise NotFinished()
            room.board = empty_board()
            room.turn = FIRST_MARKER
            room.status = RoomStatus.ACTIVE
            room.winner = None
            room.winning_line = None
            snapshot = room.to_dict()
            code = room.code
        return RoomResult(code=code, room=snapshot)

    def get_state(self, code) -> RoomResult:
        code = self.normalize_code(code)
        room = self.store.get(code)
        if room is None:
            raise NotFound()
        with self._locks.hold(code):
            if self.store.get(code) is not room:
                raise NotFound()
            snapshot = room.to_dict()
        return RoomResult(code=code, room=snapshot)

    # ---------- cleanup ---------- #

    def disconnect(self, conn_id: str) -> Optional[RoomResult]:
        """Mark the connection's slot as gone; drop the room once nobody is left.

        Returns None when the connection was not in a room.
        """
        code = self.store.room_of(conn_id)
        if code is None:
            return None
        room = self.store.get(code)
        if room is None:
            self.store.unbind(conn_id)
            return None
        with self._locks.hold(code):
            with self.store.transaction():
                self.store.unbind(conn_id)
                if self.store.get(code) is not room:
                    return None
                slot = room.slot_of(conn_id)
                if slot is not None:
                    slot.connected = False
                removed = room.all_disconnected() or room.age(self._clock()) > self.ttl_sec
                if removed:
                    self._drop(code, room)
                snapshot = room.to_dict()
        if removed:
            self._locks.discard(code)
        return RoomResult(code=code, room=snapshot, removed=removed)

    def expire_rooms(self, now: Optional[float] = None) -> List[str]:
        """Remove every room older than the TTL; returns the removed codes."""
        now = self._clock() if now is None else now
        expired = []
        for code, room in self.store.all():
            if room.age(now) <= self.ttl_sec:
                continue
            with self._locks.hold(code):
                with self.store.transaction():
                    if self.store.get(code) is not room:
                        continue
                    self._drop(code, room)
            self._locks.discard(code)
            expired.append(code)
        return expired

    def _drop(self, code: str, room: Room) -> None:
        self.store.remove(code)
        for conn_id in room.connection_ids():
            if self.store.room_of(conn_id) == code:
                self.store.unbind(conn_id)
        logger.info('[room-remove] room=%s status=%s', code, room.status.value)
