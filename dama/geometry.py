"""Diagonal geometry shared by every move search."""

from typing import Iterator, List, Tuple

Coord = Tuple[int, int]
Direction = Tuple[int, int]

BOARD_SIZE = 8

# All four diagonals, row delta first.
DIRECTIONS: List[Direction] = [(-1, -1), (-1, 1), (1, -1), (1, 1)]


def in_bounds(r: int, c: int) -> bool:
    return 0 <= r < BOARD_SIZE and 0 <= c < BOARD_SIZE


def is_playable(r: int, c: int) -> bool:
    """Dark squares only: (row + col) odd."""
    return in_bounds(r, c) and (r + c) % 2 == 1


def forward_directions(player: int) -> List[Direction]:
    """Diagonals a man of `player` may use. Player 1 moves down the rows (+1)."""
    dr = 1 if player > 0 else -1
    return [(dr, -1), (dr, 1)]


def promotion_row(player: int) -> int:
    return BOARD_SIZE - 1 if player > 0 else 0


def ray(r: int, c: int, direction: Direction) -> Iterator[Coord]:
    """Yield cells from (r, c) outward along `direction`, excluding the start."""
    dr, dc = direction
    r, c = r + dr, c + dc
    while in_bounds(r, c):
        yield (r, c)
        r, c = r + dr, c + dc
