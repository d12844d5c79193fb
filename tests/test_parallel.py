from __future__ import annotations

from typing import Dict, Iterator, Tuple

import pytest

import tictactoe.ai as ai_module
from tictactoe.ai import AIPlayer, pick_best_move, pick_best_move_par, search_parallel, search_sequential
from tictactoe.config import SearchConfig
from tictactoe.errors import NoLegalMovesError, SearchError
from tictactoe.game import Board, Piece, Position, apply_move, available_moves, copy_board, is_game_over, new_board


def reachable_positions(pieces_on_board: int) -> Iterator[Tuple[Board, Piece]]:
    """Non-terminal positions reachable from the empty board with the side to move."""
    seen: Dict[tuple, Tuple[Board, Piece]] = {}

    def walk(board: Board, piece: Piece, placed: int) -> None:
        if is_game_over(board):
            return
        if placed == pieces_on_board:
            seen.setdefault(tuple(tuple(row) for row in board), (board, piece))
            return
        for move in available_moves(board):
            child = copy_board(board)
            apply_move(child, move, piece)
            walk(child, piece.opponent, placed + 1)

    walk(new_board(), Piece.X, 0)
    return iter(seen.values())


@pytest.mark.parametrize("pieces_on_board", [2, 5])
def test_parallel_matches_sequential(pieces_on_board):
    count = 0
    for board, piece in reachable_positions(pieces_on_board):
        expected = pick_best_move(board, piece)
        assert pick_best_move_par(board, piece, executor="thread", max_workers=4) == expected
        count += 1
    assert count > 0


def test_parallel_empty_board_on_process_pool():
    result = search_parallel(new_board(), Piece.X, executor="process", max_workers=2)
    assert result.best_move == Position(0, 0)
    assert result.score == 0
    # without the shared root window every candidate gets an exact value
    assert [score for _, score in result.scored_moves] == [0] * 9


def test_parallel_scenarios_on_process_pool(board_from):
    assert pick_best_move_par(board_from(["X.X", "OO.", "..."]), Piece.X) == Position(1, 0)
    assert pick_best_move_par(board_from(["..X", ".X.", "OO."]), Piece.X) == Position(2, 2)


def test_fresh_windows_visit_more_nodes(board_from):
    board = board_from(["X..", "...", "..."])
    seq = search_sequential(board, Piece.O)
    par = search_parallel(board, Piece.O, executor="thread")
    assert seq.best_move == par.best_move
    assert seq.score == par.score
    assert seq.nodes < par.nodes


def test_ai_player_dispatches_on_config(board_from):
    board = board_from(["X..", ".O.", "..."])
    sequential = AIPlayer()
    parallel = AIPlayer(SearchConfig(parallel=True, executor="thread", max_workers=2))
    assert sequential.choose_move(board, Piece.X) == parallel.choose_move(board, Piece.X)
    assert parallel.pick_best_move_par(board, Piece.X) == sequential.pick_best_move(board, Piece.X)


def test_worker_failure_is_reported(monkeypatch, board_from):
    def broken_branch(board, max_depth, piece):
        raise RuntimeError("worker crashed")

    monkeypatch.setattr(ai_module, "_search_branch", broken_branch)
    with pytest.raises(SearchError, match="parallel search failed") as excinfo:
        search_parallel(board_from(["X..", "...", "..."]), Piece.O, executor="thread")
    assert isinstance(excinfo.value.__cause__, RuntimeError)


def test_parallel_without_moves_raises(board_from):
    with pytest.raises(NoLegalMovesError):
        pick_best_move_par(board_from(["XOX", "XOO", "OXX"]), Piece.X, executor="thread")


def test_unknown_executor(board_from):
    with pytest.raises(ValueError):
        search_parallel(board_from(["X..", "...", "..."]), Piece.O, executor="gpu")
