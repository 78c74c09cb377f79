from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Tuple
import time


BOARD_SIZE = 9


class Marker(str, Enum):
    X = 'X'
    O = 'O'

    @property
    def other(self) -> 'Marker':
        return Marker.O if self is Marker.X else Marker.X


FIRST_MARKER = Marker.X
SECOND_MARKER = Marker.O


class RoomStatus(str, Enum):
    WAITING = 'waiting'
    ACTIVE = 'active'
    FINISHED = 'finished'


@dataclass
class PlayerSlot:
    name: str
    conn_id: str
    connected: bool = True

    def to_dict(self):
        return {
            'name': self.name,
            'connected': self.connected,
        }


def empty_board() -> List[Optional[Marker]]:
    return [None] * BOARD_SIZE


@dataclass
class Room:
    code: str
    first: PlayerSlot
    second: Optional[PlayerSlot] = None
    board: List[Optional[Marker]] = field(default_factory=empty_board)
    turn: Marker = FIRST_MARKER
    status: RoomStatus = RoomStatus.WAITING
    winner: Optional[Marker] = None
    winning_line: Optional[Tuple[int, int, int]] = None
    created_at: float = field(default_factory=time.time)

    def slots(self):
        """Populated slots paired with their markers, first mover first."""
        pairs = [(FIRST_MARKER, self.first)]
        if self.second is not None:
            pairs.append((SECOND_MARKER, self.second))
        return pairs

    def marker_of(self, conn_id: str) -> Optional[Marker]:
        for marker, slot in self.slots():
            if slot.conn_id == conn_id:
                return marker
        return None

    def slot_of(self, conn_id: str) -> Optional[PlayerSlot]:
        for _, slot in self.slots():
            if slot.conn_id == conn_id:
                return slot
        return None

    def connection_ids(self) -> List[str]:
        return [slot.conn_id for _, slot in self.slots()]

    def all_disconnected(self) -> bool:
        return not any(slot.connected for _, slot in self.slots())

    def age(self, now: float) -> float:
        return now - self.created_at

    def to_dict(self):
        """Point-in-time snapshot safe to hand to the transport."""
        return {
            'room_code': self.code,
            'players': {
                FIRST_MARKER.value: self.first.to_dict(),
                SECOND_MARKER.value: self.second.to_dict() if self.second else None,
            },
            'board': [cell.value if cell else None for cell in self.board],
            'turn': self.turn.value,
            'status': self.status.value,
            'winner': self.winner.value if self.winner else None,
            'winning_line': list(self.winning_line) if self.winning_line else None,
            'created_at': self.created_at,
        }
