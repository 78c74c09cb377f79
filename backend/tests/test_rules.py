from xox.models import Marker
from xox.services.games.rules import DRAW, IN_PROGRESS, WIN_LINES, evaluate, is_legal_move

X, O = Marker.X, Marker.O
_ = None


def test_empty_board_is_in_progress():
    assert evaluate([_] * 9) == IN_PROGRESS


def test_every_line_is_detected_for_both_markers():
    for marker in (X, O):
        for line in WIN_LINES:
            board = [_] * 9
            for i in line:
                board[i] = marker
            outcome = evaluate(board)
            assert outcome.finished
            assert outcome.winner is marker
            assert outcome.line == line


def test_mixed_line_is_not_a_win():
    board = [X, X, O,
             _, _, _,
             _, _, _]
    assert evaluate(board) == IN_PROGRESS


def test_full_board_without_line_is_draw():
    board = [X, O, X,
             X, O, O,
             O, X, X]
    outcome = evaluate(board)
    assert outcome == DRAW
    assert outcome.is_draw
    assert outcome.winner is None and outcome.line is None


def test_win_on_full_board_beats_draw():
    board = [X, X, X,
             O, O, X,
             X, O, O]
    outcome = evaluate(board)
    assert outcome.winner is X
    assert outcome.line == (0, 1, 2)


def test_scan_order_reports_rows_before_columns_before_diagonals():
    # Malformed board with a row, a column and a diagonal all complete
    board = [X, X, X,
             X, X, _,
             X, _, X]
    assert evaluate(board).line == (0, 1, 2)

    board = [X, _, _,
             X, X, _,
             X, _, X]
    assert evaluate(board).line == (0, 3, 6)


def test_is_legal_move():
    board = [X, _, _,
             _, _, _,
             _, _, _]
    assert is_legal_move(board, 1)
    assert is_legal_move(board, 8)
    assert not is_legal_move(board, 0)
    assert not is_legal_move(board, -1)
    assert not is_legal_move(board, 9)
    assert not is_legal_move(board, '1')
    assert not is_legal_move(board, 1.0)
    assert not is_legal_move(board, True)
    assert not is_legal_move(board, None)
