from __future__ import annotations

from typing import List, Optional

import pytest

from tictactoe.game import Board, Piece

_CELLS = {"X": Piece.X, "O": Piece.O, ".": None}


def parse_board(rows: List[str]) -> Board:
    """Build a board from rows like ``["X.O", ".X.", "..O"]`` (top row first)."""
    board: List[List[Optional[Piece]]] = []
    for row in rows:
        board.append([_CELLS[ch] for ch in row])
    return board


@pytest.fixture
def board_from():
    return parse_board
