from __future__ import annotations

from ...models.api import AnswerIntent
from ...models.enums import ActionLogResult, Phase, Side
from ...models.session import GameSession
from ..logging.logger import log_event
from ..systems import victory
from ..systems.turn import pass_turn, resolve_answer
from .base import IntentHandler, TurnContext


def is_correct(given: str, expected: str) -> bool:
    return given.strip().lower() == expected.strip().lower()


class AnswerHandler(IntentHandler):
    intent_type = AnswerIntent

    def evaluate(self, state, intent: AnswerIntent):
        if state.phase != Phase.PLAYER_AWAITING_ANSWER or state.pending_question is None:
            return False, "no question is waiting for an answer"
        if not intent.text.strip():
            return False, "answer cannot be empty"
        return True, "ok"

    def apply(self, sess: GameSession, intent: AnswerIntent, ctx: TurnContext):
        state = sess.state
        start = len(state.updates)
        question = state.pending_question
        square = state.board.square(state.player.position)

        correct = is_correct(intent.text, question.correct_answer)
        resolve_answer(state, Side.PLAYER, square, correct)
        state.pending_question = None
        if not victory.check(state, Side.PLAYER, ctx.pacing.game_over_ms):
            pass_turn(state, Side.ROBOT, ctx.pacing.answer_switch_ms)

        log_event(sess, Side.PLAYER, intent, ActionLogResult.APPLIED, state.status, state.updates[start:])
        return sess
