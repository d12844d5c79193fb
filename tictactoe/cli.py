"""Command line front end: interactive play, match simulation and the web server."""

from __future__ import annotations

import argparse
import random
import sys
from typing import Callable, Optional, Sequence

from .ai import AIPlayer
from .config import Config, SearchConfig, load_config
from .errors import InvalidMoveCodeError, InvalidMoveError
from .game import Game
from .logging_config import get_logger, setup_logging
from .simulate import run_matches

logger = get_logger(__name__)

InputFn = Callable[[], str]

PLAYER = "player"
COMPUTER = "computer"
COMMANDS = ("play", "simulate", "serve")
_GLOBAL_VALUE_OPTIONS = ("--config", "--log-level")


def _read_move(game: Game, input_fn: Optional[InputFn], prompt: str) -> Optional[bool]:
    """Prompt for and apply one move. None on end of input, False on a rejected move."""
    print(game.render())
    print(prompt)
    try:
        line = (input_fn or input)()
    except EOFError:
        return None
    try:
        game.push_code(line.strip())
    except InvalidMoveCodeError:
        print("Invalid input, try again.")
        return False
    except InvalidMoveError:
        print("Invalid move, try again.")
        return False
    return True


def _announce_end(game: Game, winner_label: str) -> bool:
    if game.winner() is not None:
        print(game.render())
        print(winner_label)
        return True
    if game.is_game_over():
        print(game.render())
        print("Game over! It's a draw!")
        return True
    return False


def play_pvp(input_fn: Optional[InputFn] = None) -> Optional[str]:
    """Two humans alternate at the same terminal. Returns the game result."""
    game = Game()
    while True:
        piece = game.current_piece
        accepted = _read_move(game, input_fn, f"Player {piece}, enter your move [1..9]:")
        if accepted is None:
            return None
        if not accepted:
            continue
        if _announce_end(game, f"Player {piece} wins!"):
            return game.result()


def play_pvc(
    ai: AIPlayer,
    rng: random.Random,
    first: Optional[str] = None,
    input_fn: Optional[InputFn] = None,
) -> Optional[str]:
    """Human against the engine. ``first`` is "player" or "computer"; random when None."""
    game = Game()
    turn = first or rng.choice([PLAYER, COMPUTER])
    print("Player goes first!" if turn == PLAYER else "Computer goes first!")

    while True:
        piece = game.current_piece
        if turn == PLAYER:
            accepted = _read_move(game, input_fn, f"Player {piece}, enter your move [1..9]:")
            if accepted is None:
                return None
            if not accepted:
                continue
            winner_label = f"Player {piece} wins!"
        else:
            pos = ai.choose_move(game.board, piece)
            print(f"Computer chose position {pos}")
            game.push_move(pos)
            winner_label = "Computer wins!"

        if _announce_end(game, winner_label):
            return game.result()
        turn = COMPUTER if turn == PLAYER else PLAYER


def _cmd_play(args: argparse.Namespace, cfg: Config) -> int:
    if args.pvp:
        play_pvp()
        return 0
    search = SearchConfig(
        parallel=args.parallel or cfg.search.parallel,
        executor=cfg.search.executor,
        max_workers=cfg.search.max_workers,
    )
    first = None if args.first == "random" else args.first
    play_pvc(AIPlayer(search), random.Random(args.seed), first=first)
    return 0


def _cmd_simulate(args: argparse.Namespace, cfg: Config) -> int:
    games = args.games if args.games is not None else cfg.simulation.games
    workers = args.workers if args.workers is not None else cfg.simulation.workers
    seed = args.seed if args.seed is not None else cfg.simulation.seed

    stats = run_matches(games, seed=seed, workers=workers, progress=not args.no_progress)
    print(f"Random: {stats.random_wins}, Minimax: {stats.minimax_wins}, Draws: {stats.draws}")
    print(f"Minimax win rate: {stats.minimax_win_rate * 100:.1f}%")
    if stats.random_wins:
        logger.error("Random player won %d games", stats.random_wins)
        return 1
    return 0


def _cmd_serve(args: argparse.Namespace, cfg: Config) -> int:
    from web.app import create_app

    host = args.host or cfg.web.host
    port = args.port or cfg.web.port
    create_app(cfg).run(host=host, port=port, debug=args.debug or cfg.web.debug)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="tictactoe",
        description="Plays a game of Tic Tac Toe against a perfect minimax opponent.",
    )
    parser.add_argument("--config", default=None, help="Path to a TOML config file.")
    parser.add_argument("--log-level", default=None, help="DEBUG, INFO, WARNING, ...")

    subparsers = parser.add_subparsers(dest="command")

    play = subparsers.add_parser("play", help="Play in the terminal (default command).")
    mode = play.add_mutually_exclusive_group()
    mode.add_argument("-p", "--pvp", action="store_true", help="Player vs Player mode.")
    mode.add_argument("-c", "--pvc", action="store_true", help="Player vs Computer mode (default).")
    play.add_argument(
        "--first",
        choices=[PLAYER, COMPUTER, "random"],
        default="random",
        help="Who moves first against the computer.",
    )
    play.add_argument("--parallel", action="store_true", help="Search root moves on a worker pool.")
    play.add_argument("--seed", type=int, default=None, help="Seed for choosing who starts.")
    play.set_defaults(handler=_cmd_play)

    simulate = subparsers.add_parser("simulate", help="Play minimax against a random mover.")
    simulate.add_argument("--games", type=int, default=None, help="Number of games.")
    simulate.add_argument("--workers", type=int, default=None, help="Worker processes.")
    simulate.add_argument("--seed", type=int, default=None, help="Base seed for the run.")
    simulate.add_argument("--no-progress", action="store_true", help="Hide the progress bar.")
    simulate.set_defaults(handler=_cmd_simulate)

    serve = subparsers.add_parser("serve", help="Run the JSON web API.")
    serve.add_argument("--host", default=None)
    serve.add_argument("--port", type=int, default=None)
    serve.add_argument("--debug", action="store_true")
    serve.set_defaults(handler=_cmd_serve)

    return parser


def with_default_command(argv: Sequence[str]) -> list[str]:
    """Insert "play" after the global options when no subcommand is named.

    Lets "tictactoe -p" and "tictactoe --log-level DEBUG -c --first computer" work.
    """
    argv = list(argv)
    i = 0
    while i < len(argv):
        arg = argv[i]
        if arg in COMMANDS or arg in ("-h", "--help"):
            return argv
        if arg in _GLOBAL_VALUE_OPTIONS:
            i += 2
        elif arg.split("=", 1)[0] in _GLOBAL_VALUE_OPTIONS:
            i += 1
        else:
            break
    return [*argv[:i], "play", *argv[i:]]


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(with_default_command(sys.argv[1:] if argv is None else argv))

    cfg = load_config(args.config)
    setup_logging(args.log_level or cfg.log_level)
    return args.handler(args, cfg)


if __name__ == "__main__":
    sys.exit(main())
