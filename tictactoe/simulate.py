"""Minimax vs random match runner.

Each game gets its own ``random.Random`` seeded from the run seed, so a run is
reproducible whether games are played in-process or on a process pool.
"""

from __future__ import annotations

import logging
import random
import time
from concurrent.futures import ProcessPoolExecutor, as_completed
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from tqdm import tqdm

from .ai import AIPlayer, get_random_valid_move
from .game import Piece, apply_move, is_game_won, new_board, no_more_moves

logger = logging.getLogger(__name__)


class Strategy(Enum):
    RANDOM = "random"
    MINIMAX = "minimax"


@dataclass
class MatchStats:
    random_wins: int = 0
    minimax_wins: int = 0
    draws: int = 0
    elapsed_seconds: float = 0.0

    @property
    def total(self) -> int:
        return self.random_wins + self.minimax_wins + self.draws

    @property
    def minimax_win_rate(self) -> float:
        return self.minimax_wins / self.total if self.total else 0.0

    def record(self, winner: Optional[Strategy]) -> None:
        if winner is Strategy.RANDOM:
            self.random_wins += 1
        elif winner is Strategy.MINIMAX:
            self.minimax_wins += 1
        else:
            self.draws += 1


def play_match(
    rng: random.Random,
    first: Optional[Strategy] = None,
    ai: Optional[AIPlayer] = None,
) -> Optional[Strategy]:
    """Play one game minimax vs random. Returns the winning side, None on a draw."""
    ai = ai or AIPlayer()
    turn = first if first is not None else rng.choice([Strategy.RANDOM, Strategy.MINIMAX])
    board = new_board()
    piece = Piece.X

    while True:
        if turn is Strategy.RANDOM:
            pos = get_random_valid_move(rng, board)
        else:
            pos = ai.choose_move(board, piece)
        apply_move(board, pos, piece)

        if is_game_won(board) is not None:
            return turn
        if no_more_moves(board):
            return None

        piece = piece.opponent
        turn = Strategy.MINIMAX if turn is Strategy.RANDOM else Strategy.RANDOM


def play_self_match(ai: Optional[AIPlayer] = None) -> Optional[Piece]:
    """Minimax plays both sides from an empty board. Returns the winner, None on a draw."""
    ai = ai or AIPlayer()
    board = new_board()
    piece = Piece.X
    while True:
        apply_move(board, ai.choose_move(board, piece), piece)
        winner = is_game_won(board)
        if winner is not None or no_more_moves(board):
            return winner
        piece = piece.opponent


def _play_seeded(seed: int) -> Optional[Strategy]:
    return play_match(random.Random(seed))


def run_matches(
    num_games: int,
    seed: Optional[int] = None,
    workers: Optional[int] = None,
    progress: bool = True,
) -> MatchStats:
    """Play ``num_games`` minimax vs random games and tally the outcomes.

    With ``workers`` > 1 games run on a process pool, one task per game.
    """
    base_seed = seed if seed is not None else random.SystemRandom().randrange(2**32)
    seeds = [base_seed + i for i in range(num_games)]
    stats = MatchStats()
    start_time = time.time()

    logger.info("Starting %d games (seed=%d, workers=%s)", num_games, base_seed, workers or 1)

    with tqdm(total=num_games, desc="Games", unit="game", disable=not progress) as pbar:
        if workers and workers > 1:
            with ProcessPoolExecutor(max_workers=workers) as executor:
                futures = [executor.submit(_play_seeded, s) for s in seeds]
                for future in as_completed(futures):
                    stats.record(future.result())
                    pbar.update(1)
        else:
            for s in seeds:
                stats.record(_play_seeded(s))
                pbar.update(1)

    stats.elapsed_seconds = time.time() - start_time
    logger.info(
        "Finished %d games in %.2fs: random=%d minimax=%d draws=%d",
        stats.total,
        stats.elapsed_seconds,
        stats.random_wins,
        stats.minimax_wins,
        stats.draws,
    )
    return stats


__all__ = ["MatchStats", "Strategy", "play_match", "play_self_match", "run_matches"]
