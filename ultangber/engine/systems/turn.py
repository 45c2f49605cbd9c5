from __future__ import annotations

from ...models.board import Square
from ...models.enums import Phase, Side, UpdateKind
from ...models.game import GameState
from . import movement
from .effects import apply_correct, apply_wrong, correct_message, wrong_message

TURN_LABELS = {
    Side.PLAYER: "🎯 Your turn! Roll the dice.",
    Side.ROBOT: "🤖 Robot's turn...",
}


def turn_label(state: GameState) -> str:
    if state.phase == Phase.GAME_OVER:
        return "🏆 You win!" if state.winner == Side.PLAYER else "🤖 Robot wins!"
    if state.phase == Phase.PLAYER_AWAITING_ANSWER:
        return "❓ Answer the question!"
    return TURN_LABELS[state.current_turn]


def skip_if_frozen(state: GameState, side: Side, delay_ms: int = 0) -> bool:
    """Consume one frozen turn. Returns True when the turn is skipped."""
    tok = state.token(side)
    if not tok.frozen:
        return False
    state.set_token(side, tok.model_copy(update={"frozen_turns": tok.frozen_turns - 1}))
    msg = "🧊 You are frozen! Turn skipped." if side == Side.PLAYER else "🧊 Robot is frozen! Turn skipped."
    state.push(side, UpdateKind.SKIPPED, msg, delay_ms=delay_ms)
    return True


def advance(state: GameState, side: Side, steps: int, delay_ms: int = 0) -> Square | None:
    """Move side's token by steps and return the square it now stands on."""
    tok = state.token(side)
    before = tok.position
    after = movement.move(before, steps, state.total)
    state.set_token(side, tok.model_copy(update={"position": after}))
    need = state.total - before
    if before + steps > state.total:
        msg = (
            f"Too far! You need exactly {need} to finish."
            if side == Side.PLAYER
            else f"Too far! Robot needs exactly {need} to finish."
        )
        state.push(side, UpdateKind.BOUNCED, msg, delay_ms=delay_ms)
    else:
        who = "You" if side == Side.PLAYER else "Robot"
        state.push(side, UpdateKind.MOVED, f"{who} moved to square {after}.", delay_ms=delay_ms)
    return state.board.square(after)


def resolve_answer(state: GameState, side: Side, square: Square, correct: bool, delay_ms: int = 0) -> None:
    tok = state.token(side)
    if correct:
        state.set_token(side, apply_correct(tok, square, state.total))
        state.push(side, UpdateKind.CORRECT, correct_message(side, square), delay_ms=delay_ms)
    else:
        state.set_token(side, apply_wrong(tok, square, state.total))
        state.push(side, UpdateKind.WRONG, wrong_message(side, square), delay_ms=delay_ms)


def pass_turn(state: GameState, to: Side, delay_ms: int = 0) -> None:
    state.pending_question = None
    state.current_turn = to
    if to == Side.PLAYER:
        state.phase = Phase.PLAYER_TURN
        state.turn += 1
    else:
        state.phase = Phase.ROBOT_TURN
    state.push(to, UpdateKind.TURN, TURN_LABELS[to], delay_ms=delay_ms)
