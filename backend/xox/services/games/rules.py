from dataclasses import dataclass
from typing import Optional, Sequence, Tuple

from xox.models import BOARD_SIZE, Marker

# Scan order matters: rows, then columns, then diagonals
WIN_LINES: Tuple[Tuple[int, int, int], ...] = (
    (0, 1, 2), (3, 4, 5), (6, 7, 8),
    (0, 3, 6), (1, 4, 7), (2, 5, 8),
    (0, 4, 8), (2, 4, 6),
)


@dataclass(frozen=True)
class Outcome:
    finished: bool
    winner: Optional[Marker] = None
    line: Optional[Tuple[int, int, int]] = None

    @property
    def is_draw(self) -> bool:
        return self.finished and self.winner is None


IN_PROGRESS = Outcome(finished=False)
DRAW = Outcome(finished=True)


def is_legal_move(board: Sequence[Optional[Marker]], index) -> bool:
    """True iff ``index`` is an integer cell on the board and that cell is empty."""
    if isinstance(index, bool) or not isinstance(index, int):
        return False
    return 0 <= index < BOARD_SIZE and board[index] is None


def evaluate(board: Sequence[Optional[Marker]]) -> Outcome:
    """Report the first completed line, a draw on a full board, or in-progress."""
    for line in WIN_LINES:
        a, b, c = line
        if board[a] is not None and board[a] == board[b] == board[c]:
            return Outcome(finished=True, winner=board[a], line=line)
    if all(cell is not None for cell in board):
        return DRAW
    return IN_PROGRESS
