"""
Serialization helpers for boards, players and moves.

Two board layouts are supported:
- rows: nested lists of {"player": 1|2, "king": bool} or None, the shape the
  shared game-state store keeps
- grid: nested lists of signed cell codes (Board.array.tolist())

Moves travel as nested coordinate lists:
- simple move:  [[r1, c1], [r2, c2]]
- capture step: [[r_start, c_start], [r_over, c_over], [r_land, c_land]]
- capture chain: a list of capture steps
"""

from typing import Any, Dict, List, Optional, Union

from .board import Board, Piece, Player
from .errors import IllegalMove, InvalidPosition
from .geometry import BOARD_SIZE
from .rules import CaptureChain, CaptureStep, Captures, MoveSet, Slide

Move = Union[Slide, CaptureStep, CaptureChain]

_WIRE_PLAYERS = {1: Player.PLAYER1, 2: Player.PLAYER2}


# ------------------------------------------------------------------
# Players
# ------------------------------------------------------------------
def player_to_wire(player) -> int:
    return 1 if Player(player) == Player.PLAYER1 else 2


def player_from_wire(value: Any) -> Player:
    if isinstance(value, bool) or not isinstance(value, int) or value not in _WIRE_PLAYERS:
        raise InvalidPosition("Unknown player id", context={"player": value})
    return _WIRE_PLAYERS[value]


# ------------------------------------------------------------------
# Boards
# ------------------------------------------------------------------
def board_to_rows(board: Board) -> List[List[Optional[Dict[str, Any]]]]:
    rows = []
    for r in range(BOARD_SIZE):
        row = []
        for c in range(BOARD_SIZE):
            piece = board.piece_at((r, c))
            if piece is None:
                row.append(None)
            else:
                row.append({"player": player_to_wire(piece.owner), "king": piece.promoted})
        rows.append(row)
    return rows


def board_from_rows(rows: Any) -> Board:
    if not isinstance(rows, list) or len(rows) != BOARD_SIZE:
        raise InvalidPosition("Board must have 8 rows")

    grid = []
    for r, row in enumerate(rows):
        if not isinstance(row, list) or len(row) != BOARD_SIZE:
            raise InvalidPosition("Board row must have 8 cells", context={"row": r})
        codes = []
        for c, cell in enumerate(row):
            if cell is None:
                codes.append(0)
                continue
            if not isinstance(cell, dict) or "player" not in cell:
                raise InvalidPosition("Malformed cell", context={"coord": (r, c)})
            king = cell.get("king", False)
            if not isinstance(king, bool):
                raise InvalidPosition("Malformed king flag", context={"coord": (r, c)})
            codes.append(Piece(player_from_wire(cell["player"]), king).code)
        grid.append(codes)
    return Board(grid)


def board_to_grid(board: Board) -> List[List[int]]:
    return board.array.tolist()


def board_from_grid(grid: Any) -> Board:
    if not isinstance(grid, list) or any(not isinstance(row, list) for row in grid):
        raise InvalidPosition("Board grid must be a list of rows")
    for row in grid:
        for value in row:
            if isinstance(value, bool) or not isinstance(value, int):
                raise InvalidPosition("Board grid cells must be integers")
    return Board(grid)


# ------------------------------------------------------------------
# Moves
# ------------------------------------------------------------------
def _is_coord(value: Any) -> bool:
    return (
        isinstance(value, (list, tuple))
        and len(value) == 2
        and all(isinstance(v, int) and not isinstance(v, bool) for v in value)
    )


def _is_capture_step(value: Any) -> bool:
    return (
        isinstance(value, (list, tuple))
        and len(value) == 3
        and all(_is_coord(p) for p in value)
    )


def normalize_move_format(move: Any) -> Move:
    """
    Convert a move given as nested lists or tuples into Slide, CaptureStep or
    a tuple of CaptureSteps. Anything else is rejected as IllegalMove.
    """
    if isinstance(move, (Slide, CaptureStep)):
        return move

    if _is_capture_step(move):
        return CaptureStep(*(tuple(p) for p in move))

    if isinstance(move, (list, tuple)) and len(move) == 2 and _is_coord(move[0]) and _is_coord(move[1]):
        return Slide(tuple(move[0]), tuple(move[1]))

    if isinstance(move, (list, tuple)) and move and all(_is_capture_step(s) for s in move):
        return tuple(CaptureStep(*(tuple(p) for p in step)) for step in move)

    raise IllegalMove("Unrecognized move format", context={"move": repr(move)})


def move_to_json(move: Move) -> List:
    move = normalize_move_format(move)
    if isinstance(move, Slide):
        return [list(move.start), list(move.landing)]
    if isinstance(move, CaptureStep):
        return [list(move.start), list(move.over), list(move.landing)]
    return [move_to_json(step) for step in move]


def move_from_json(payload: Any) -> Move:
    return normalize_move_format(payload)


def moveset_to_json(moveset: MoveSet) -> Dict[str, Any]:
    if isinstance(moveset, Captures):
        return {
            "kind": "captures",
            "length": moveset.chain_length,
            "moves": [
                {"origin": list(origin), "chain": move_to_json(chain)}
                for origin, chain in moveset.moves
            ],
        }
    return {
        "kind": "slides",
        "moves": [
            {"origin": list(slide.start), "to": list(slide.landing)}
            for slide in moveset.moves
        ],
    }
