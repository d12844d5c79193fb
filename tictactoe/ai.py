from __future__ import annotations

import logging
import os
import random
from concurrent.futures import Executor, ProcessPoolExecutor, ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from .config import SearchConfig
from .errors import NoLegalMovesError, SearchError
from .evaluator import Evaluator
from .game import (
    ALL_POSITIONS,
    Board,
    Piece,
    Position,
    apply_move,
    available_moves,
    copy_board,
    is_game_over,
)

logger = logging.getLogger(__name__)

# Strictly outside [-WIN_SCORE, WIN_SCORE]
SCORE_INF = 10**9


@dataclass
class SearchResult:
    best_move: Position
    score: int
    nodes: int
    # One entry per root candidate, in enumeration order. With a shared root
    # window only the best entry is exact; the others are upper bounds.
    scored_moves: List[Tuple[Position, int]] = field(default_factory=list)


def alphabeta(
    board: Board,
    depth: int,
    max_depth: int,
    perspective: Piece,
    player_to_move: Piece,
    alpha: int,
    beta: int,
) -> Tuple[int, int]:
    """Minimax with alpha-beta pruning. Returns (score, nodes visited).

    ``player_to_move`` is the piece that made the move leading to ``board``;
    the side to act here is its opponent. Every child gets its own copy of the
    board, so callers may hand in boards they keep using afterwards.
    """
    if depth == max_depth or is_game_over(board):
        return Evaluator.evaluate(board, perspective), 1

    mover = player_to_move.opponent
    moves = available_moves(board)
    if not moves:
        raise NoLegalMovesError("minimax")

    nodes = 1
    if mover is perspective:
        value = -SCORE_INF
        for move in moves:
            child = copy_board(board)
            apply_move(child, move, mover)
            score, child_nodes = alphabeta(
                child, depth + 1, max_depth, perspective, mover, alpha, beta
            )
            nodes += child_nodes
            value = max(value, score)
            alpha = max(alpha, score)
            if beta <= alpha:
                break
        return value, nodes

    value = SCORE_INF
    for move in moves:
        child = copy_board(board)
        apply_move(child, move, mover)
        score, child_nodes = alphabeta(
            child, depth + 1, max_depth, perspective, mover, alpha, beta
        )
        nodes += child_nodes
        value = min(value, score)
        beta = min(beta, score)
        if beta <= alpha:
            break
    return value, nodes


def minimax(
    board: Board,
    depth: int,
    max_depth: int,
    perspective: Piece,
    player_to_move: Piece,
    alpha: int,
    beta: int,
) -> int:
    score, _ = alphabeta(board, depth, max_depth, perspective, player_to_move, alpha, beta)
    return score


def _search_branch(board: Board, max_depth: int, piece: Piece) -> Tuple[int, int]:
    # Runs inside a worker; ``board`` already holds the candidate move
    return alphabeta(board, 1, max_depth, piece, piece, -SCORE_INF, SCORE_INF)


def _root_moves(board: Board, context: str) -> List[Position]:
    moves = available_moves(board)
    if not moves:
        raise NoLegalMovesError(context)
    return moves


def search_sequential(board: Board, piece: Piece) -> SearchResult:
    """Search every root move, narrowing one alpha-beta window across siblings."""
    moves = _root_moves(board, "pick_best_move")
    max_depth = len(moves)
    alpha, beta = -SCORE_INF, SCORE_INF

    best_move: Optional[Position] = None
    best_score = -SCORE_INF
    nodes = 0
    scored_moves: List[Tuple[Position, int]] = []

    for move in moves:
        child = copy_board(board)
        apply_move(child, move, piece)
        score, sub_nodes = alphabeta(child, 1, max_depth, piece, piece, alpha, beta)
        nodes += sub_nodes
        scored_moves.append((move, score))
        logger.debug("root %s for %s: score=%d nodes=%d", move, piece, score, sub_nodes)
        if score > best_score:
            best_score = score
            best_move = move
        alpha = max(alpha, score)

    assert best_move is not None
    return SearchResult(best_move=best_move, score=best_score, nodes=nodes, scored_moves=scored_moves)


def search_parallel(
    board: Board,
    piece: Piece,
    executor: str = "process",
    max_workers: Optional[int] = None,
) -> SearchResult:
    """Search every root move in its own task with a fresh window.

    Loses the cross-sibling pruning of :func:`search_sequential` but every
    task is independent. Returns the same move as the sequential search.
    """
    moves = _root_moves(board, "pick_best_move_par")
    max_depth = len(moves)
    num_workers = min(max_workers or os.cpu_count() or 1, len(moves))

    pool: Executor
    if executor == "process":
        pool = ProcessPoolExecutor(max_workers=num_workers)
    elif executor == "thread":
        pool = ThreadPoolExecutor(max_workers=num_workers)
    else:
        raise ValueError(f"Unknown executor: {executor!r}")

    # Leaving the with block waits for every task
    with pool:
        futures = []
        for move in moves:
            child = copy_board(board)
            apply_move(child, move, piece)
            futures.append(pool.submit(_search_branch, child, max_depth, piece))

    best_move: Optional[Position] = None
    best_score = -SCORE_INF
    nodes = 0
    scored_moves: List[Tuple[Position, int]] = []

    # Reduce in enumeration order so ties break exactly as in the sequential search
    for move, future in zip(moves, futures):
        try:
            score, sub_nodes = future.result()
        except NoLegalMovesError:
            raise
        except Exception as exc:
            raise SearchError(f"parallel search failed on root move {move}") from exc
        nodes += sub_nodes
        scored_moves.append((move, score))
        logger.debug("root %s for %s: score=%d nodes=%d", move, piece, score, sub_nodes)
        if score > best_score:
            best_score = score
            best_move = move

    assert best_move is not None
    return SearchResult(best_move=best_move, score=best_score, nodes=nodes, scored_moves=scored_moves)


def pick_best_move(board: Board, piece: Piece) -> Position:
    return search_sequential(board, piece).best_move


def pick_best_move_par(
    board: Board,
    piece: Piece,
    executor: str = "process",
    max_workers: Optional[int] = None,
) -> Position:
    return search_parallel(board, piece, executor=executor, max_workers=max_workers).best_move


def get_random_move(rng: random.Random) -> Position:
    """Any cell, occupied or not."""
    return rng.choice(ALL_POSITIONS)


def get_random_valid_move(rng: random.Random, board: Board) -> Position:
    moves = available_moves(board)
    if not moves:
        raise NoLegalMovesError("get_random_valid_move")
    return rng.choice(moves)


class AIPlayer:
    """Full-depth minimax with alpha-beta pruning.

    The root layer runs either in-process with one shared window or fanned out
    over a worker pool, depending on ``config.parallel``.
    """

    def __init__(self, config: Optional[SearchConfig] = None) -> None:
        self.config = config or SearchConfig()

    def choose_move(self, board: Board, piece: Piece) -> Position:
        if self.config.parallel:
            result = self.search_parallel(board, piece)
        else:
            result = self.search(board, piece)
        logger.debug(
            "%s plays %s (score=%d, nodes=%d, parallel=%s)",
            piece, result.best_move, result.score, result.nodes, self.config.parallel,
        )
        return result.best_move

    def search(self, board: Board, piece: Piece) -> SearchResult:
        return search_sequential(board, piece)

    def search_parallel(self, board: Board, piece: Piece) -> SearchResult:
        return search_parallel(
            board, piece, executor=self.config.executor, max_workers=self.config.max_workers
        )

    def pick_best_move(self, board: Board, piece: Piece) -> Position:
        return self.search(board, piece).best_move

    def pick_best_move_par(self, board: Board, piece: Piece) -> Position:
        return self.search_parallel(board, piece).best_move
