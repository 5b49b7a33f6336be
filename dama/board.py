from dataclasses import dataclass
from enum import IntEnum
from typing import Dict, Iterable, List, Optional, Tuple

import numpy as np

from .errors import InvalidPosition, NotYourTurn
from .geometry import BOARD_SIZE, Coord, in_bounds, is_playable, promotion_row

MAX_PIECES_PER_PLAYER = 12

# Cell codes: 0 empty, +-1 man, +-2 king. The sign is the owner.
EMPTY = 0
MAN = 1
KING = 2


class Player(IntEnum):
    PLAYER1 = 1
    PLAYER2 = -1

    @property
    def opponent(self) -> "Player":
        return Player(-self.value)


def parse_player(player) -> Player:
    """Map a claimed player id onto Player; unknown ids are NotYourTurn."""
    try:
        return Player(player)
    except ValueError:
        raise NotYourTurn("Unknown player", context={"player": player})


@dataclass(frozen=True)
class Piece:
    owner: Player
    promoted: bool = False

    @property
    def code(self) -> int:
        return int(self.owner) * (KING if self.promoted else MAN)

    @classmethod
    def from_code(cls, value: int) -> Optional["Piece"]:
        if value == EMPTY:
            return None
        return cls(Player(1 if value > 0 else -1), abs(value) == KING)


class Board:
    """
    Immutable 8x8 draughts position backed by a read-only numpy array.

    Every helper that changes the position returns a new Board, so the
    capture search can branch on hypothetical positions without touching
    the caller's board.
    """

    __slots__ = ("_cells",)

    def __init__(self, cells=None):
        if cells is None:
            arr = np.zeros((BOARD_SIZE, BOARD_SIZE), dtype=np.int8)
        else:
            try:
                raw = np.array(cells)
            except (TypeError, ValueError) as e:
                raise InvalidPosition(f"Board cells are not integer codes: {e}")
            # Reject floats, bools and objects instead of truncating them.
            if not np.issubdtype(raw.dtype, np.integer):
                raise InvalidPosition("Board cells are not integer codes", context={"dtype": str(raw.dtype)})
            if raw.size and np.any(np.abs(raw) > KING):
                raise InvalidPosition("Unknown cell code on board")
            arr = raw.astype(np.int8)
        self._cells = self._check_cells(arr)
        self._cells.flags.writeable = False

    @classmethod
    def _trusted(cls, arr: np.ndarray) -> "Board":
        # Skips validation; only for arrays derived from an already valid board.
        board = cls.__new__(cls)
        arr.flags.writeable = False
        board._cells = arr
        return board

    @classmethod
    def initial(cls) -> "Board":
        """Player 1 on rows 0-2, Player 2 on rows 5-7, dark squares only."""
        arr = np.zeros((BOARD_SIZE, BOARD_SIZE), dtype=np.int8)
        for r in range(3):
            for c in range(BOARD_SIZE):
                if is_playable(r, c):
                    arr[r, c] = Player.PLAYER1 * MAN
        for r in range(5, BOARD_SIZE):
            for c in range(BOARD_SIZE):
                if is_playable(r, c):
                    arr[r, c] = Player.PLAYER2 * MAN
        return cls._trusted(arr)

    @classmethod
    def from_pieces(cls, pieces: Dict[Coord, Piece]) -> "Board":
        """Build a validated position from a {coord: Piece} mapping."""
        arr = np.zeros((BOARD_SIZE, BOARD_SIZE), dtype=np.int8)
        for (r, c), piece in pieces.items():
            if not in_bounds(r, c):
                raise InvalidPosition("Coordinate off the board", context={"coord": (r, c)})
            arr[r, c] = piece.code
        return cls(arr)

    # ------------------------------------------------------------------
    # Validation
    # ------------------------------------------------------------------
    @staticmethod
    def _check_cells(arr: np.ndarray) -> np.ndarray:
        if arr.shape != (BOARD_SIZE, BOARD_SIZE):
            raise InvalidPosition("Board must be 8x8", context={"shape": arr.shape})
        if np.any(np.abs(arr) > KING):
            raise InvalidPosition("Unknown cell code on board")

        rows, cols = np.nonzero(arr)
        for r, c in zip(rows.tolist(), cols.tolist()):
            if not is_playable(r, c):
                raise InvalidPosition("Piece on a non-playable cell", context={"coord": (r, c)})

        for player in Player:
            count = int(np.sum(np.sign(arr) == player))
            if count > MAX_PIECES_PER_PLAYER:
                raise InvalidPosition(
                    "Too many pieces for one side",
                    context={"player": int(player), "count": count},
                )
        return arr

    def validate(self) -> "Board":
        """Re-run the position checks on this board. Raises InvalidPosition."""
        self._check_cells(self._cells)
        return self

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    @property
    def array(self) -> np.ndarray:
        """Read-only view of the signed cell codes."""
        return self._cells

    def code_at(self, r: int, c: int) -> int:
        return int(self._cells[r, c])

    def piece_at(self, coord: Coord) -> Optional[Piece]:
        r, c = coord
        if not in_bounds(r, c):
            raise InvalidPosition("Coordinate off the board", context={"coord": coord})
        return Piece.from_code(int(self._cells[r, c]))

    def is_empty(self, coord: Coord) -> bool:
        r, c = coord
        return self._cells[r, c] == EMPTY

    def pieces(self, player: Optional[int] = None) -> List[Tuple[Coord, Piece]]:
        """All occupied cells in row-major order, optionally for one player."""
        found = []
        rows, cols = np.nonzero(self._cells)
        for r, c in zip(rows.tolist(), cols.tolist()):
            piece = Piece.from_code(int(self._cells[r, c]))
            if player is None or piece.owner == player:
                found.append(((r, c), piece))
        return found

    def count(self, player: Optional[int] = None) -> int:
        if player is None:
            return int(np.count_nonzero(self._cells))
        return int(np.sum(np.sign(self._cells) == player))

    def piece_counts(self) -> Dict[Player, Dict[str, int]]:
        """
        Count men and kings for each player.
        Returns: {Player.PLAYER1: {'pieces': .., 'kings': ..}, Player.PLAYER2: {...}}
        """
        b = self._cells
        return {
            player: {
                "pieces": int(np.sum(b == player * MAN)),
                "kings": int(np.sum(b == player * KING)),
            }
            for player in Player
        }

    # ------------------------------------------------------------------
    # Derived positions
    # ------------------------------------------------------------------
    def with_piece_moved(self, start: Coord, landing: Coord) -> "Board":
        """
        Relocate the piece on `start` to the empty playable cell `landing`.
        A man that lands on the opponent's back rank is crowned.
        """
        sr, sc = start
        lr, lc = landing
        if not in_bounds(sr, sc) or self._cells[sr, sc] == EMPTY:
            raise InvalidPosition("No piece to move", context={"coord": start})
        if not is_playable(lr, lc) or self._cells[lr, lc] != EMPTY:
            raise InvalidPosition("Landing cell is not an empty playable cell", context={"coord": landing})

        arr = self._cells.copy()
        piece = arr[sr, sc]
        arr[sr, sc] = EMPTY
        arr[lr, lc] = piece

        # Promotion
        if piece == MAN and lr == promotion_row(1):
            arr[lr, lc] = KING
        elif piece == -MAN and lr == promotion_row(-1):
            arr[lr, lc] = -KING
        return Board._trusted(arr)

    def with_pieces_removed(self, coords: Iterable[Coord]) -> "Board":
        arr = self._cells.copy()
        for r, c in coords:
            if not in_bounds(r, c) or arr[r, c] == EMPTY:
                raise InvalidPosition("No piece to remove", context={"coord": (r, c)})
            arr[r, c] = EMPTY
        return Board._trusted(arr)

    def with_piece_removed(self, coord: Coord) -> "Board":
        return self.with_pieces_removed([coord])

    def with_piece(self, coord: Coord, piece: Optional[Piece]) -> "Board":
        """Place (or clear, with None) a single cell. The result is validated."""
        r, c = coord
        if not in_bounds(r, c):
            raise InvalidPosition("Coordinate off the board", context={"coord": coord})
        arr = self._cells.copy()
        arr[r, c] = EMPTY if piece is None else piece.code
        return Board(arr)

    # ------------------------------------------------------------------
    # Value semantics
    # ------------------------------------------------------------------
    def __eq__(self, other):
        if not isinstance(other, Board):
            return NotImplemented
        return bool(np.array_equal(self._cells, other._cells))

    def __hash__(self):
        return hash(self._cells.tobytes())

    def __repr__(self):
        return f"Board(p1={self.count(Player.PLAYER1)}, p2={self.count(Player.PLAYER2)})"

    def render(self) -> str:
        """Text diagram: x/X for Player 1 men/kings, o/O for Player 2, '.' for dark squares."""
        glyphs = {MAN: "x", KING: "X", -MAN: "o", -KING: "O"}
        lines = ["  " + " ".join(str(c) for c in range(BOARD_SIZE))]
        for r in range(BOARD_SIZE):
            row = []
            for c in range(BOARD_SIZE):
                v = int(self._cells[r, c])
                if v:
                    row.append(glyphs[v])
                else:
                    row.append("." if is_playable(r, c) else " ")
            lines.append(f"{r} " + " ".join(row))
        return "\n".join(lines)


def initial_board() -> Board:
    return Board.initial()
