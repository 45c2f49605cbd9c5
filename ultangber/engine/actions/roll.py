from __future__ import annotations

from ...models.api import RollIntent
from ...models.enums import ActionLogResult, Phase, Side, UpdateKind
from ...models.session import GameSession
from ..logging.logger import log_event
from ..systems import victory
from ..systems.turn import advance, pass_turn, skip_if_frozen
from .base import IntentHandler, TurnContext


def phase_error(phase: Phase) -> str:
    if phase == Phase.GAME_OVER:
        return "game is over"
    if phase == Phase.PLAYER_AWAITING_ANSWER:
        return "answer the pending question first"
    return "not your turn"


class RollHandler(IntentHandler):
    intent_type = RollIntent

    def evaluate(self, state, intent: RollIntent):
        if state.phase != Phase.PLAYER_TURN:
            return False, phase_error(state.phase)
        return True, "ok"

    def apply(self, sess: GameSession, intent: RollIntent, ctx: TurnContext):
        state = sess.state
        start = len(state.updates)
        pacing = ctx.pacing

        if skip_if_frozen(state, Side.PLAYER):
            pass_turn(state, Side.ROBOT, pacing.skip_switch_ms)
        else:
            dice = ctx.roll()
            state.last_roll = dice
            state.push(Side.PLAYER, UpdateKind.ROLLED, f"You rolled a {dice}!", dice=dice)
            square = advance(state, Side.PLAYER, dice)
            if not victory.check(state, Side.PLAYER):
                self._land(sess, square, ctx)

        log_event(sess, Side.PLAYER, intent, ActionLogResult.APPLIED, state.status, state.updates[start:])
        return sess

    def _land(self, sess: GameSession, square, ctx: TurnContext) -> None:
        state = sess.state
        if square is None or not square.special:
            pass_turn(state, Side.ROBOT, ctx.pacing.turn_switch_ms)
            return
        question = ctx.fetch_question(state, Side.PLAYER, sess.config.question_set_id)
        if question is None:
            # treat the square as normal this time
            pass_turn(state, Side.ROBOT, ctx.pacing.notice_switch_ms)
            return
        state.pending_question = question
        state.last_question = question
        state.phase = Phase.PLAYER_AWAITING_ANSWER
        state.push(
            Side.PLAYER,
            UpdateKind.QUESTION,
            f"{square.icon} You landed on a {square.type.value.lower()} square! Answer to trigger it.",
        )
