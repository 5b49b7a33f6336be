from dataclasses import dataclass
from enum import Enum
from typing import Any, List, Optional, Tuple

from .board import Board, Player, parse_player
from .codec import Move, normalize_move_format
from .config import DEFAULT_RULES, RulesConfig
from .errors import IllegalMove, InvalidPosition, NotYourTurn
from .geometry import Coord
from .rules import CaptureChain, CaptureStep, Captures, DamaRules, MoveSet, Slide, Slides


class Phase(Enum):
    AWAITING_SELECTION = "awaiting_selection"
    CHAIN_IN_PROGRESS = "chain_in_progress"


@dataclass(frozen=True)
class ChainInProgress:
    """The piece mid-jump and the chain tails it may still play."""
    piece: Coord
    remaining: Tuple[CaptureChain, ...]


@dataclass(frozen=True)
class TurnState:
    board: Board
    to_move: Player = Player.PLAYER1
    chain: Optional[ChainInProgress] = None

    @classmethod
    def initial(cls) -> "TurnState":
        return cls(Board.initial(), Player.PLAYER1)

    @property
    def phase(self) -> Phase:
        if self.chain is None:
            return Phase.AWAITING_SELECTION
        return Phase.CHAIN_IN_PROGRESS


@dataclass(frozen=True)
class MoveResult:
    board: Board
    next_player: Player
    chain_continues: bool = False
    captured: Tuple[Coord, ...] = ()


def _origin_of(move: Move) -> Coord:
    if isinstance(move, Slide):
        return move.start
    if isinstance(move, CaptureStep):
        return move.start
    return move[0].start


def legal_actions(state: TurnState, config: RulesConfig = DEFAULT_RULES) -> MoveSet:
    """What `step` accepts right now: the full legal-move set, or the chain tails mid-jump."""
    if state.chain is None:
        return DamaRules.legal_moves(state.board, state.to_move, config)
    piece = state.chain.piece
    return Captures(tuple((piece, tail) for tail in state.chain.remaining))


def step(state: TurnState, player, move: Any,
         config: RulesConfig = DEFAULT_RULES) -> Tuple[TurnState, MoveResult]:
    """
    Apply a slide, a full capture chain, or part of one (one or more leading steps).

    While steps of the selected chain remain, the same player keeps the move
    and the returned state only accepts the next step of a remaining tail.
    The turn passes once the chain is exhausted. Nothing is applied when an
    error is raised.
    """
    player = parse_player(player)
    if player != state.to_move:
        raise NotYourTurn(
            "It is not this player's turn",
            context={"player": int(player), "to_move": int(state.to_move)},
        )

    board = state.board
    if board.count() == 0:
        raise InvalidPosition("Board is empty")

    move = normalize_move_format(move)
    origin = _origin_of(move)
    if board.piece_at(origin) is None:
        raise InvalidPosition("No piece on the chosen square", context={"coord": origin})

    # -----------------------
    # Simple move
    # -----------------------
    if isinstance(move, Slide):
        if state.chain is not None:
            raise IllegalMove("A capture chain is in progress", context={"piece": state.chain.piece})
        legal = DamaRules.legal_moves(board, player, config)
        if not isinstance(legal, Slides) or move not in legal.moves:
            raise IllegalMove("Move is not in the legal-move set", context={"move": tuple(move)})

        new_board = board.with_piece_moved(move.start, move.landing)
        next_player = player.opponent
        return TurnState(new_board, next_player), MoveResult(new_board, next_player)

    # -----------------------
    # Capture steps
    # -----------------------
    steps = (move,) if isinstance(move, CaptureStep) else move

    if state.chain is None:
        legal = DamaRules.legal_moves(board, player, config)
        candidates = tuple(chain for _, chain in legal.moves) if isinstance(legal, Captures) else ()
    else:
        if origin != state.chain.piece:
            raise IllegalMove(
                "Only the piece mid-chain may continue",
                context={"piece": state.chain.piece, "origin": origin},
            )
        candidates = state.chain.remaining

    captured: List[Coord] = []
    for s in steps:
        candidates = tuple(chain[1:] for chain in candidates if chain and chain[0] == s)
        if not candidates:
            raise IllegalMove("Capture is not in the legal-move set", context={"step": tuple(s)})
        # Promotion is checked on every landing, including intermediate ones.
        board = board.with_piece_moved(s.start, s.landing).with_piece_removed(s.over)
        captured.append(s.over)

    remaining = tuple(chain for chain in candidates if chain)
    if remaining:
        landing = steps[-1].landing
        new_state = TurnState(board, player, ChainInProgress(landing, remaining))
        return new_state, MoveResult(board, player, True, tuple(captured))

    next_player = player.opponent
    return TurnState(board, next_player), MoveResult(board, next_player, False, tuple(captured))


def apply_move(board: Board, player, move: Any, to_move=None,
               config: RulesConfig = DEFAULT_RULES) -> MoveResult:
    """
    Validate `move` against the legal moves of `player` on `board` and apply it.

    `to_move` is the authoritative player to move; when omitted the claimed
    player is trusted. A full chain or a slide ends the turn. Playing only the
    first steps of a chain returns chain_continues=True; use `step` with a
    TurnState to continue it.
    """
    if to_move is None:
        to_move = player
    state = TurnState(board, parse_player(to_move))
    _, result = step(state, player, move, config)
    return result
