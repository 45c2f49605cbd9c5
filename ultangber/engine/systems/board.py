from __future__ import annotations

import math
import random

from ...models.board import BOARD_SIZES, FINISH_ICON, ICONS, START_ICON, Board, Square
from ...models.enums import SPECIAL_KINDS, SquareType

# specials per kind, keyed by board size
SPECIALS_PER_KIND = {8: 3, 10: 4, 12: 5}


def _value(kind: SquareType, size: int, rng: random.Random) -> int:
    if kind in (SquareType.LADDER, SquareType.SNAKE):
        mag = math.floor(size * 0.6 + rng.random() * size * 0.4)
        return mag if kind == SquareType.LADDER else -mag
    if kind in (SquareType.BONUS, SquareType.PENALTY):
        mag = math.floor(rng.random() * 3 + 2)
        return mag if kind == SquareType.BONUS else -mag
    return 0


def place_specials(size: int, rng: random.Random) -> dict[int, tuple[SquareType, int]]:
    """Pick disjoint special squares; 1 and size**2 are never chosen."""
    total = size * size
    used = {1, total}
    specials: dict[int, tuple[SquareType, int]] = {}

    def pick() -> int:
        while True:
            n = rng.randrange(2, total)
            if n not in used:
                used.add(n)
                return n

    for _ in range(SPECIALS_PER_KIND[size]):
        for kind in SPECIAL_KINDS:
            n = pick()
            specials[n] = (kind, _value(kind, size, rng))
    return specials


def square_number(size: int, row: int, col: int) -> int:
    """Number of the square drawn at visual (row, col); row 0 is the top."""
    row_from_bottom = size - 1 - row
    col_in_row = col if row % 2 == 0 else size - 1 - col
    return row_from_bottom * size + col_in_row + 1


def build_squares(size: int, specials: dict[int, tuple[SquareType, int]]) -> list[Square]:
    total = size * size
    out: list[Square] = []
    for row in range(size):
        for col in range(size):
            number = square_number(size, row, col)
            if number in specials:
                kind, value = specials[number]
                out.append(Square(number=number, type=kind, value=value, icon=ICONS[kind]))
            else:
                icon = START_ICON if number == 1 else FINISH_ICON if number == total else ""
                out.append(Square(number=number, icon=icon))
    return out


def generate_board(size: int, rng: random.Random) -> Board:
    if size not in BOARD_SIZES:
        raise ValueError(f"board size must be one of {BOARD_SIZES}, got {size}")
    return Board(size=size, squares=build_squares(size, place_specials(size, rng)))
