from __future__ import annotations

from .game import Board, Piece, is_game_won


class Evaluator:
    """Static evaluation for tic-tac-toe positions.

    Scores are from the point of view of ``perspective``: a completed line for
    that player is worth ``WIN_SCORE``, one for the opponent ``-WIN_SCORE``,
    anything else (draws, unfinished positions) is 0. The magnitude does not
    depend on how deep in the tree the position was reached.
    """

    WIN_SCORE: int = 100000
    DRAW_SCORE: int = 0

    @classmethod
    def evaluate(cls, board: Board, perspective: Piece) -> int:
        winner = is_game_won(board)
        if winner is None:
            return cls.DRAW_SCORE
        return cls.WIN_SCORE if winner is perspective else -cls.WIN_SCORE
