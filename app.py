# app.py
import logging
import os
from flask import Flask, render_template, jsonify, request
from uuid import uuid4
from game_logic import TicTacToeGame
from typing import Dict
from dotenv import load_dotenv

load_dotenv()

app = Flask(__name__)
app.config.from_mapping(MAX_GAMES=1000)
app.config.from_prefixed_env()

# In-memory games store (simple). Format: games[g_id] = TicTacToeGame()
# Insertion-ordered; the oldest game is evicted once MAX_GAMES is reached.
games: Dict[str, TicTacToeGame] = {}


def _int_field(body, name):
    """Return body[name] if it is a plain int, else None (bools are rejected)."""
    if not isinstance(body, dict):
        return None
    value = body.get(name)
    if isinstance(value, bool) or not isinstance(value, int):
        return None
    return value


@app.route("/")
def index():
    return render_template("index.html")

@app.route("/api/new", methods=["POST"])
def api_new():
    """
    Create a new game.
    Returns: {"game_id": "...", "state": {...}}
    """
    while games and len(games) >= app.config["MAX_GAMES"]:
        evicted = next(iter(games))
        del games[evicted]
        app.logger.info("evicted game %s", evicted)

    g = TicTacToeGame()
    g_id = str(uuid4())
    games[g_id] = g
    app.logger.info("created game %s (%d active)", g_id, len(games))
    return jsonify({"game_id": g_id, "state": serialize_game_state(g)})

@app.route("/api/state/<game_id>", methods=["GET"])
def api_state(game_id):
    game = games.get(game_id)
    if not game:
        return jsonify({"error": "game not found"}), 404
    return jsonify({"state": serialize_game_state(game)})

@app.route("/api/move/<game_id>", methods=["POST"])
def api_move(game_id):
    """
    Cell click.
    Body: {"index": 0-8}
    Returns: {"state": {...}, "ok": true/false}

    Clicking an occupied cell or a finished board is not an error: ok is false
    and the state is unchanged.
    """
    game = games.get(game_id)
    if not game:
        return jsonify({"error": "game not found"}), 404

    body = request.get_json(silent=True) or {}
    idx = _int_field(body, "index")
    if idx is None or not 0 <= idx <= 8:
        app.logger.warning("game %s: rejected move payload %r", game_id, body)
        return jsonify({"error": "invalid index"}), 400

    ok = game.handle_click(idx)
    return jsonify({"ok": ok, "state": serialize_game_state(game)})

@app.route("/api/jump/<game_id>", methods=["POST"])
def api_jump(game_id):
    """
    History-entry click.
    Body: {"move": 0..len(history)-1}
    Returns: {"state": {...}}
    """
    game = games.get(game_id)
    if not game:
        return jsonify({"error": "game not found"}), 404

    body = request.get_json(silent=True) or {}
    move = _int_field(body, "move")
    if move is None or not 0 <= move < len(game.history):
        app.logger.warning("game %s: rejected jump payload %r", game_id, body)
        return jsonify({"error": "invalid move"}), 400

    game.jump_to(move)
    return jsonify({"state": serialize_game_state(game)})

@app.route("/api/reset/<game_id>", methods=["POST"])
def api_reset(game_id):
    game = games.get(game_id)
    if not game:
        return jsonify({"error": "game not found"}), 404
    game.reset()
    app.logger.info("reset game %s", game_id)
    return jsonify({"state": serialize_game_state(game)})

# Helper to turn TicTacToeGame into JSON-able dict
def serialize_game_state(game: TicTacToeGame):
    return {
        "board": game.board.to_list(),
        "current_move": game.current_move,
        "x_is_next": game.x_is_next,
        "current_player": game.current_player,
        "winner": game.winner,  # 'X'/'O'/None
        "turns": game.turns,
        "status": game.status,
        "moves": [{"move": i, "description": d} for i, d in game.moves()],
        "history": [b.to_list() for b in game.history],
    }

if __name__ == "__main__":
    logging.basicConfig(level=os.environ.get("TICTACTOE_LOG_LEVEL", "INFO").upper())
    # Use FLASK_DEBUG=1 during development
    app.run(host=os.environ.get("TICTACTOE_HOST", "127.0.0.1"),
            port=int(os.environ.get("TICTACTOE_PORT", "5000")))
