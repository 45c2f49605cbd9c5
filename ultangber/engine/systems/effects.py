"""Square effects applied after a question is answered.

The wrong-answer table is deliberately harsher than the correct-answer
table and not its inverse:

    type     correct              wrong
    LADDER   +value               -value
    SNAKE    +value (value < 0)   no movement
    BONUS    +value               no movement
    PENALTY  +value (value < 0)   +2 * value
    FREEZE   frozen 1 turn        frozen 2 turns
"""

from __future__ import annotations

from ...models.board import Square
from ...models.enums import Side, SquareType
from ...models.game import TokenState
from .movement import clamp

FREEZE_ON_CORRECT = 1
FREEZE_ON_WRONG = 2

_WRONG_MESSAGES = {
    SquareType.SNAKE: "❌ Wrong! The snake spares you... for now.",
    SquareType.LADDER: "❌ Wrong! The ladder collapsed. Move back.",
    SquareType.BONUS: "❌ Wrong! No bonus for you.",
    SquareType.PENALTY: "❌ Wrong! Double penalty applied.",
    SquareType.FREEZE: "❌ Wrong! Frozen for 2 turns!",
}


def apply_correct(token: TokenState, square: Square, total: int) -> TokenState:
    if square.type == SquareType.FREEZE:
        return token.model_copy(update={"frozen_turns": FREEZE_ON_CORRECT})
    if square.type == SquareType.NORMAL:
        return token.model_copy()
    return token.model_copy(update={"position": clamp(token.position + square.value, total)})


def apply_wrong(token: TokenState, square: Square, total: int) -> TokenState:
    kind = square.type
    if kind == SquareType.FREEZE:
        return token.model_copy(update={"frozen_turns": FREEZE_ON_WRONG})
    if kind == SquareType.LADDER:
        return token.model_copy(update={"position": clamp(token.position - square.value, total)})
    if kind == SquareType.PENALTY:
        return token.model_copy(update={"position": clamp(token.position + square.value * 2, total)})
    # snake, bonus: nothing happens
    return token.model_copy()


def correct_message(side: Side, square: Square) -> str:
    if square.type == SquareType.FREEZE:
        return "🧊 You are frozen! Skip next turn." if side == Side.PLAYER else "🧊 Robot is frozen next turn."
    if side == Side.ROBOT:
        return "🤖 Robot answered correctly!"
    return "✅ Correct! Square effect applied."


def wrong_message(side: Side, square: Square) -> str:
    msg = _WRONG_MESSAGES.get(square.type, "❌ Wrong!")
    return msg if side == Side.PLAYER else msg.replace("Wrong!", "Robot answered wrong!", 1)
