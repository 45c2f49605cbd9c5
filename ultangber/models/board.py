from __future__ import annotations

from pydantic import BaseModel, Field, PrivateAttr

from .enums import SquareType

BOARD_SIZES = (8, 10, 12)

ICONS: dict[SquareType, str] = {
    SquareType.LADDER: "🪜",
    SquareType.SNAKE: "🐍",
    SquareType.BONUS: "⬆️",
    SquareType.PENALTY: "⬇️",
    SquareType.FREEZE: "🧊",
}
START_ICON = "🚀"
FINISH_ICON = "🏁"


class Square(BaseModel):
    number: int
    type: SquareType = SquareType.NORMAL
    value: int = 0  # signed step delta; 0 for normal/freeze
    icon: str = ""

    @property
    def special(self) -> bool:
        return self.type != SquareType.NORMAL


class Board(BaseModel):
    """Squares in visual order: top row first, zigzagging down to square 1."""

    size: int
    squares: list[Square] = Field(default_factory=list)
    _by_number: dict[int, Square] = PrivateAttr(default_factory=dict)

    def model_post_init(self, __context) -> None:
        self._by_number = {sq.number: sq for sq in self.squares}

    @property
    def total(self) -> int:
        return self.size * self.size

    def square(self, number: int) -> Square | None:
        return self._by_number.get(number)
