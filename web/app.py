from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Optional

from flask import Flask, jsonify, request

# Ensure project root is importable when running this file directly
PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from tictactoe import AIPlayer, Game, position_to_move_code
from tictactoe.config import Config, SearchConfig, load_config
from tictactoe.errors import TicTacToeError

logger = logging.getLogger(__name__)


def create_app(config: Optional[Config] = None) -> Flask:
    app = Flask(__name__)

    cfg = config or load_config()
    game = Game()
    ai = AIPlayer(cfg.search)

    def ai_reply() -> Optional[int]:
        pos = ai.choose_move(game.board, game.current_piece)
        game.push_move(pos)
        return position_to_move_code(pos)

    @app.get("/")
    @app.get("/api/state")
    def api_state():
        return jsonify(game.snapshot())

    @app.post("/api/new")
    def api_new():
        data = request.get_json(silent=True) or {}
        first = (data.get("first") or "player").lower()
        if first not in ("player", "computer"):
            return jsonify({"error": f"Unknown first mover: {first}"}), 400
        if "parallel" in data:
            ai.config = SearchConfig(
                parallel=bool(data["parallel"]),
                executor=cfg.search.executor,
                max_workers=cfg.search.max_workers,
            )

        game.reset()

        ai_move = None
        # If the computer starts it moves immediately
        if first == "computer":
            ai_move = ai_reply()

        snap = game.snapshot()
        snap["ai_move"] = ai_move
        return jsonify(snap)

    @app.post("/api/move")
    def api_move():
        payload = request.get_json(silent=True) or {}
        code = payload.get("move")
        if code is None:
            return jsonify({"error": "Missing move"}), 400

        try:
            game.push_code(str(code))
        except TicTacToeError as exc:
            return jsonify({"error": str(exc)}), 400

        ai_move = None
        if not game.is_game_over():
            ai_move = ai_reply()
            logger.info("AI replied %s", ai_move)

        snap = game.snapshot()
        snap["ai_move"] = ai_move
        return jsonify(snap)

    return app


if __name__ == "__main__":
    cfg = load_config()
    create_app(cfg).run(host=cfg.web.host, port=cfg.web.port, debug=cfg.web.debug)
