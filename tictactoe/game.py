from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional

from .errors import GameOverError, InvalidMoveCodeError, InvalidMoveError

BOARD_SIZE = 3


class Piece(Enum):
    X = "X"
    O = "O"

    @property
    def opponent(self) -> "Piece":
        return Piece.O if self is Piece.X else Piece.X

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class Position:
    """A cell on the board; ``x`` is the column and ``y`` the row."""

    x: int
    y: int

    def __str__(self) -> str:
        code = position_to_move_code(self)
        if code is None:
            raise ValueError(f"Invalid position: ({self.x}, {self.y})")
        return str(code)


Board = List[List[Optional[Piece]]]

# Numpad layout: 7 is the top-left cell, 3 the bottom-right one
_MOVE_CODES: Dict[int, Position] = {
    7: Position(0, 0), 8: Position(1, 0), 9: Position(2, 0),
    4: Position(0, 1), 5: Position(1, 1), 6: Position(2, 1),
    1: Position(0, 2), 2: Position(1, 2), 3: Position(2, 2),
}
_POSITION_CODES: Dict[Position, int] = {pos: code for code, pos in _MOVE_CODES.items()}

ALL_POSITIONS: List[Position] = [Position(x, y) for y in range(BOARD_SIZE) for x in range(BOARD_SIZE)]


def new_board(size: int = BOARD_SIZE) -> Board:
    return [[None] * size for _ in range(size)]


def copy_board(board: Board) -> Board:
    return [row[:] for row in board]


def available_moves(board: Board) -> List[Position]:
    """Empty cells in row-major order (y outer, x inner)."""
    return [
        Position(x, y)
        for y, row in enumerate(board)
        for x, cell in enumerate(row)
        if cell is None
    ]


def is_valid_move(board: Board, pos: Position) -> bool:
    size = len(board)
    return 0 <= pos.x < size and 0 <= pos.y < size and board[pos.y][pos.x] is None


def apply_move(board: Board, pos: Position, piece: Piece) -> None:
    if not is_valid_move(board, pos):
        size = len(board)
        in_range = 0 <= pos.x < size and 0 <= pos.y < size
        raise InvalidMoveError(pos, "cell is occupied" if in_range else "off the board")
    board[pos.y][pos.x] = piece


def no_more_moves(board: Board) -> bool:
    return all(cell is not None for row in board for cell in row)


def _lines(board: Board) -> List[List[Optional[Piece]]]:
    size = len(board)
    lines = [list(row) for row in board]
    lines.extend([board[y][x] for y in range(size)] for x in range(size))
    lines.append([board[i][i] for i in range(size)])
    lines.append([board[i][size - 1 - i] for i in range(size)])
    return lines


def check_line(line: List[Optional[Piece]]) -> Optional[Piece]:
    first = line[0]
    if first is not None and all(cell is first for cell in line):
        return first
    return None


def is_game_won(board: Board) -> Optional[Piece]:
    """Return the piece owning a completed row, column or diagonal."""
    for line in _lines(board):
        winner = check_line(line)
        if winner is not None:
            return winner
    return None


def is_game_over(board: Board) -> bool:
    return is_game_won(board) is not None or no_more_moves(board)


def move_code_to_position(code: str) -> Optional[Position]:
    code = code.strip()
    # ASCII only; str.isdigit() also accepts superscripts and other scripts
    if len(code) != 1 or code not in "123456789":
        return None
    return _MOVE_CODES.get(int(code))


def position_to_move_code(pos: Position) -> Optional[int]:
    return _POSITION_CODES.get(pos)


def render_board(board: Board) -> str:
    """Text form of the board; empty cells show the move code that fills them."""
    rows = []
    for y, row in enumerate(board):
        cells = []
        for x, cell in enumerate(row):
            if cell is not None:
                cells.append(str(cell))
            else:
                cells.append(str(Position(x, y)))
        rows.append("".join(cells))
    return "\n".join(rows)


class Game:
    """Owns the mutable state of one game for the CLI and the web API.

    X always moves first. Illegal moves raise and leave the state untouched.
    """

    def __init__(self) -> None:
        self.board: Board = new_board()
        self.current_piece: Piece = Piece.X
        self.history: List[Position] = []

    def reset(self) -> None:
        self.board = new_board()
        self.current_piece = Piece.X
        self.history = []

    def legal_moves(self) -> List[Position]:
        if self.is_game_over():
            return []
        return available_moves(self.board)

    def winner(self) -> Optional[Piece]:
        return is_game_won(self.board)

    def is_game_over(self) -> bool:
        return is_game_over(self.board)

    def result(self) -> Optional[str]:
        winner = self.winner()
        if winner is not None:
            return str(winner)
        if no_more_moves(self.board):
            return "draw"
        return None

    def push_move(self, pos: Position) -> None:
        if self.is_game_over():
            raise GameOverError()
        apply_move(self.board, pos, self.current_piece)
        self.history.append(pos)
        if not self.is_game_over():
            self.current_piece = self.current_piece.opponent

    def push_code(self, code: str) -> Position:
        pos = move_code_to_position(code)
        if pos is None:
            raise InvalidMoveCodeError(code)
        self.push_move(pos)
        return pos

    def render(self) -> str:
        return render_board(self.board)

    def snapshot(self) -> Dict[str, object]:
        last_move: Optional[int] = None
        if self.history:
            last_move = position_to_move_code(self.history[-1])

        return {
            "board": [[str(cell) if cell else None for cell in row] for row in self.board],
            "turn": str(self.current_piece),
            "legal_moves": [position_to_move_code(pos) for pos in self.legal_moves()],
            "game_over": self.is_game_over(),
            "result": self.result(),
            "last_move": last_move,
            "history": [position_to_move_code(pos) for pos in self.history],
        }
