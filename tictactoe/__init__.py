"""Tic-tac-toe package providing game rules, evaluation, and AI search.

Modules:
- game: Board, pieces, rules and the Game state object
- evaluator: Terminal-position scoring
- ai: Minimax with alpha-beta pruning, sequential and parallel root search
- simulate: Minimax vs random match runner
"""

from .game import Game, Piece, Position, position_to_move_code
from .ai import AIPlayer, SearchResult, pick_best_move, pick_best_move_par
from .evaluator import Evaluator

__all__ = [
    "AIPlayer",
    "Evaluator",
    "Game",
    "Piece",
    "Position",
    "SearchResult",
    "pick_best_move",
    "pick_best_move_par",
    "position_to_move_code",
]
