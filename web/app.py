import argparse

from flask import Flask, jsonify, request

from dama.board import Board
from dama.codec import board_from_rows, board_to_rows, move_to_json, moveset_to_json, player_from_wire, player_to_wire
from dama.config import get_config
from dama.errors import ConfigurationError, DamaError, IllegalMove, InvalidPosition, NotYourTurn
from dama.game import apply_move
from dama.rules import DamaRules

app = Flask(__name__)

# The engine holds no game state: every request carries the board and the turn.
STATUS_BY_ERROR = {
    IllegalMove: 409,
    NotYourTurn: 409,
    InvalidPosition: 400,
    ConfigurationError: 400,
}


def _payload():
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise InvalidPosition("Request body must be a JSON object")
    return data


def _rules(data):
    return get_config(data.get('rules', 'standard'))


@app.errorhandler(DamaError)
def handle_engine_error(error):
    status = STATUS_BY_ERROR.get(type(error), 400)
    app.logger.info("Rejected request to %s: %s", request.path, error)
    return jsonify({"error": error.to_dict()}), status


@app.route('/api/initial', methods=['GET'])
def initial():
    return jsonify({"board": board_to_rows(Board.initial()), "turn": 1})


@app.route('/api/legal_moves', methods=['POST'])
def get_legal_moves():
    data = _payload()
    board = board_from_rows(data.get('board'))
    player = player_from_wire(data.get('turn'))
    moves = DamaRules.legal_moves(board, player, _rules(data))
    return jsonify({"turn": player_to_wire(player), "legal_moves": moveset_to_json(moves)})


@app.route('/api/apply_move', methods=['POST'])
def post_move():
    data = _payload()
    board = board_from_rows(data.get('board'))
    to_move = player_from_wire(data.get('turn'))
    player = player_from_wire(data.get('player'))
    if 'move' not in data:
        raise IllegalMove("No move")

    result = apply_move(board, player, data['move'], to_move=to_move, config=_rules(data))
    return jsonify({
        "board": board_to_rows(result.board),
        "turn": player_to_wire(result.next_player),
        "chain_continues": result.chain_continues,
        "captured": [list(c) for c in result.captured],
        "move": move_to_json(data['move']),
    })


if __name__ == '__main__':
    parser = argparse.ArgumentParser(description="Stateless HTTP front for the Dama rules engine")
    parser.add_argument('--host', default='127.0.0.1')
    parser.add_argument('--port', type=int, default=5000)
    parser.add_argument('--debug', action='store_true')
    args = parser.parse_args()

    print(f"Dama engine API on http://{args.host}:{args.port}")
    app.run(host=args.host, port=args.port, debug=args.debug)
