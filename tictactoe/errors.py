"""Exception classes for the tic-tac-toe engine."""

from __future__ import annotations

from typing import Any


class TicTacToeError(Exception):
    """Base exception for all tic-tac-toe errors."""


class InvalidMoveError(TicTacToeError):
    """Raised when a move targets a cell that is off the board or occupied."""

    def __init__(self, position: Any, reason: str = "cell is not available") -> None:
        self.position = position
        self.reason = reason
        super().__init__(f"Invalid move {position!r}: {reason}")


class InvalidMoveCodeError(TicTacToeError):
    """Raised when user input is not a numpad move code in 1..9."""

    def __init__(self, code: str) -> None:
        self.code = code
        super().__init__(f"Invalid move code {code!r}. Expected a single digit 1-9.")


class GameOverError(TicTacToeError):
    """Raised when trying to play a move in a finished game."""

    def __init__(self) -> None:
        super().__init__("Cannot move; game already finished")


class SearchError(TicTacToeError):
    """Raised when a search cannot produce a move."""


class NoLegalMovesError(SearchError):
    """Raised when a search is started on a position without legal moves.

    Callers must check for a finished game before searching.
    """

    def __init__(self, context: str = "search") -> None:
        self.context = context
        super().__init__(f"{context}: no legal moves available")


class ConfigError(TicTacToeError):
    """Raised for invalid configuration files or environment overrides."""


__all__ = [
    "ConfigError",
    "GameOverError",
    "InvalidMoveCodeError",
    "InvalidMoveError",
    "NoLegalMovesError",
    "SearchError",
    "TicTacToeError",
]
