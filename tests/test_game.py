from __future__ import annotations

import pytest

from tictactoe.errors import GameOverError, InvalidMoveCodeError, InvalidMoveError
from tictactoe.game import (
    Game,
    Piece,
    Position,
    apply_move,
    available_moves,
    copy_board,
    is_game_over,
    is_game_won,
    is_valid_move,
    move_code_to_position,
    new_board,
    no_more_moves,
    position_to_move_code,
    render_board,
)


def test_piece_opponent():
    assert Piece.X.opponent is Piece.O
    assert Piece.O.opponent is Piece.X
    assert str(Piece.X) == "X"


def test_position_is_value_type():
    assert Position(1, 2) == Position(1, 2)
    assert len({Position(1, 2), Position(1, 2)}) == 1
    with pytest.raises(AttributeError):
        Position(0, 0).x = 1  # type: ignore[misc]


def test_available_moves_row_major(board_from):
    board = board_from(["X..", ".O.", "..X"])
    assert available_moves(board) == [
        Position(1, 0), Position(2, 0),
        Position(0, 1), Position(2, 1),
        Position(0, 2), Position(1, 2),
    ]
    assert len(available_moves(new_board())) == 9


def test_copy_board_does_not_alias():
    board = new_board()
    child = copy_board(board)
    apply_move(child, Position(1, 1), Piece.X)
    assert board[1][1] is None
    assert child[1][1] is Piece.X


def test_apply_move_rejects_occupied_and_out_of_range():
    board = new_board()
    apply_move(board, Position(0, 0), Piece.X)
    with pytest.raises(InvalidMoveError, match="occupied"):
        apply_move(board, Position(0, 0), Piece.O)
    with pytest.raises(InvalidMoveError, match="off the board"):
        apply_move(board, Position(3, 0), Piece.O)
    assert not is_valid_move(board, Position(-1, 0))


@pytest.mark.parametrize(
    "rows",
    [
        ["XXX", "OO.", "..."],
        ["OO.", "XXX", "..."],
        ["OO.", "...", "XXX"],
        ["XO.", "XO.", "X.."],
        ["OX.", "OX.", ".X."],
        ["O.X", "O.X", "..X"],
        ["XO.", "OX.", "..X"],
        ["O.X", "OX.", "X.."],
    ],
)
def test_is_game_won_every_line(board_from, rows):
    board = board_from(rows)
    assert is_game_won(board) is Piece.X
    assert is_game_over(board)


def test_draw_detection(board_from):
    board = board_from(["XOX", "XOO", "OXX"])
    assert is_game_won(board) is None
    assert no_more_moves(board)
    assert is_game_over(board)
    assert not is_game_over(board_from(["XO.", "...", "..."]))


def test_move_codes_follow_numpad():
    assert move_code_to_position("7") == Position(0, 0)
    assert move_code_to_position("5") == Position(1, 1)
    assert move_code_to_position("3") == Position(2, 2)
    assert move_code_to_position(" 9 ") == Position(2, 0)
    assert position_to_move_code(Position(0, 2)) == 1
    assert str(Position(2, 1)) == "6"
    for bad in ("0", "10", "a", "", "-1", "²", "٣", "５"):
        assert move_code_to_position(bad) is None
    assert position_to_move_code(Position(5, 5)) is None


def test_render_board_shows_codes_for_empty_cells(board_from):
    board = board_from(["X..", ".O.", "..."])
    assert render_board(board) == "X89\n4O6\n123"


def test_game_alternates_and_reports_result():
    game = Game()
    for code in ("7", "4", "8", "5"):
        game.push_code(code)
    assert game.current_piece is Piece.X
    assert game.result() is None
    game.push_code("9")
    assert game.winner() is Piece.X
    assert game.result() == "X"
    assert game.legal_moves() == []
    with pytest.raises(GameOverError):
        game.push_code("1")


def test_game_rejects_bad_input_without_changing_state():
    game = Game()
    game.push_code("5")
    with pytest.raises(InvalidMoveError):
        game.push_code("5")
    with pytest.raises(InvalidMoveCodeError):
        game.push_code("x")
    with pytest.raises(InvalidMoveCodeError):
        game.push_code("²")
    assert game.current_piece is Piece.O
    assert game.history == [Position(1, 1)]


def test_game_snapshot_and_reset():
    game = Game()
    game.push_code("5")
    snap = game.snapshot()
    assert snap["turn"] == "O"
    assert snap["last_move"] == 5
    assert snap["board"][1][1] == "X"
    assert 5 not in snap["legal_moves"]
    assert snap["game_over"] is False
    game.reset()
    assert game.snapshot()["history"] == []
    assert len(game.legal_moves()) == 9
