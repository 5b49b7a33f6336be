from dataclasses import dataclass
from typing import ClassVar, FrozenSet, List, NamedTuple, Tuple

import numpy as np

from .board import EMPTY, Board, parse_player
from .config import DEFAULT_RULES, RulesConfig
from .errors import InvalidPosition
from .geometry import DIRECTIONS, Coord, forward_directions, in_bounds, promotion_row, ray


class CaptureStep(NamedTuple):
    """A single jump: the piece on `start` takes `over` and lands on `landing`."""
    start: Coord
    over: Coord
    landing: Coord


CaptureChain = Tuple[CaptureStep, ...]


class Slide(NamedTuple):
    start: Coord
    landing: Coord


@dataclass(frozen=True)
class MoveSet:
    moves: tuple = ()
    is_capture: ClassVar[bool] = False

    def __len__(self):
        return len(self.moves)

    def __iter__(self):
        return iter(self.moves)

    def origins(self) -> List[Coord]:
        """Distinct origin squares, in enumeration order."""
        seen = []
        for move in self.moves:
            origin = self._origin(move)
            if origin not in seen:
                seen.append(origin)
        return seen

    @staticmethod
    def _origin(move) -> Coord:
        raise NotImplementedError


@dataclass(frozen=True)
class Captures(MoveSet):
    """Entries are (origin, chain); every chain has the same, maximal length."""
    moves: Tuple[Tuple[Coord, CaptureChain], ...] = ()
    is_capture: ClassVar[bool] = True

    @property
    def chain_length(self) -> int:
        return len(self.moves[0][1]) if self.moves else 0

    def chains_from(self, origin: Coord) -> List[CaptureChain]:
        return [chain for o, chain in self.moves if o == origin]

    @staticmethod
    def _origin(move) -> Coord:
        return move[0]


@dataclass(frozen=True)
class Slides(MoveSet):
    moves: Tuple[Slide, ...] = ()

    @staticmethod
    def _origin(move) -> Coord:
        return move.start


class DamaRules:
    @staticmethod
    def _is_opponent(val, player):
        return val != 0 and np.sign(val) == -player

    @staticmethod
    def simple_moves(board: Board, player) -> List[Slide]:
        """Non-capturing one-step moves. Men slide forward, kings in any diagonal."""
        moves = []
        for (r, c), piece in board.pieces(player):
            directions = DIRECTIONS if piece.promoted else forward_directions(player)
            for dr, dc in directions:
                nr, nc = r + dr, c + dc
                if in_bounds(nr, nc) and board.code_at(nr, nc) == EMPTY:
                    moves.append(Slide((r, c), (nr, nc)))
        return moves

    @staticmethod
    def _capture_steps_from(board: Board, pos: Coord, player, king: bool,
                            visited: FrozenSet[Coord]) -> List[CaptureStep]:
        """
        Return all immediate capture steps for the piece on `pos`.
        Pieces in `visited` were already jumped in this chain: they still stand
        on the board and block any ray that reaches them.
        """
        steps = []
        r, c = pos

        if not king:
            # Men capture forward only.
            for dr, dc in forward_directions(player):
                mid = (r + dr, c + dc)
                land = (r + 2 * dr, c + 2 * dc)

                if not (in_bounds(*mid) and in_bounds(*land)):
                    continue
                if mid in visited:
                    continue

                if DamaRules._is_opponent(board.code_at(*mid), player) and board.is_empty(land):
                    steps.append(CaptureStep(pos, mid, land))
            return steps

        # Flying king: skip empties, take the first opponent piece on the ray,
        # then land on any empty cell beyond it up to the next piece.
        for direction in DIRECTIONS:
            over = None
            for cell in ray(r, c, direction):
                val = board.code_at(*cell)
                if val == EMPTY:
                    if over is not None:
                        steps.append(CaptureStep(pos, over, cell))
                    continue
                if over is not None:
                    break
                if cell in visited or not DamaRules._is_opponent(val, player):
                    break
                over = cell
        return steps

    @staticmethod
    def _capture_chains_from(board: Board, pos: Coord, player, king: bool,
                             visited: FrozenSet[Coord], config: RulesConfig) -> List[CaptureChain]:
        """
        Depth-first search for all capture chains starting from `pos`.
        Each branch gets its own board copy and its own visited set.
        """
        chains = []
        for step in DamaRules._capture_steps_from(board, pos, player, king, visited):
            # simulate jump: relocate the piece, leave the jumped piece in place
            new_board = board.with_piece_moved(step.start, step.landing)
            crowned = step.landing[0] == promotion_row(player)
            next_king = king or (crowned and config.king_moves_after_midchain_promotion)

            subsequent = DamaRules._capture_chains_from(
                new_board, step.landing, player, next_king, visited | {step.over}, config
            )

            if subsequent:
                for seq in subsequent:
                    chains.append((step,) + seq)
            else:
                chains.append((step,))
        return chains

    @staticmethod
    def capture_chains(board: Board, coord: Coord, config: RulesConfig = DEFAULT_RULES) -> List[CaptureChain]:
        """
        Return every capture chain for the piece on `coord`, each one run to
        exhaustion. An empty list means the piece has no capture.
        """
        piece = board.piece_at(coord)
        if piece is None:
            raise InvalidPosition("No piece on the given square", context={"coord": coord})
        return DamaRules._capture_chains_from(
            board, tuple(coord), piece.owner, piece.promoted, frozenset(), config
        )

    @staticmethod
    def legal_moves(board: Board, player, config: RulesConfig = DEFAULT_RULES) -> MoveSet:
        """
        Majority-capture rule: if any piece can capture, only the chains whose
        length equals the longest chain available anywhere on the board are
        legal. Otherwise every simple slide is legal.
        """
        player = parse_player(player)
        best = 0
        captures = []

        for coord, piece in board.pieces(player):
            chains = DamaRules._capture_chains_from(
                board, coord, player, piece.promoted, frozenset(), config
            )
            if not chains:
                continue

            longest = max(len(chain) for chain in chains)
            if longest > best:
                best = longest
                captures = []
            if longest == best:
                captures.extend((coord, chain) for chain in chains if len(chain) == best)

        if best > 0:
            return Captures(tuple(captures))
        return Slides(tuple(DamaRules.simple_moves(board, player)))


def capture_chains(board: Board, coord: Coord, config: RulesConfig = DEFAULT_RULES) -> List[CaptureChain]:
    return DamaRules.capture_chains(board, coord, config)


def legal_moves(board: Board, player, config: RulesConfig = DEFAULT_RULES) -> MoveSet:
    return DamaRules.legal_moves(board, player, config)
