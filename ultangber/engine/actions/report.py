from __future__ import annotations

import logging

from quizbank.errors import QuizError

from ...models.api import ReportIntent
from ...models.enums import ActionLogResult, Phase, Side, UpdateKind
from ...models.session import GameSession
from ..logging.logger import log_event
from .base import IntentHandler, TurnContext

MIN_REASON = 3

logger = logging.getLogger(__name__)


class ReportHandler(IntentHandler):
    """Flag the current (or most recently asked) question as wrong or unclear."""

    intent_type = ReportIntent

    def evaluate(self, state, intent: ReportIntent):
        if state.phase == Phase.GAME_OVER:
            return False, "game is over"
        if state.last_question is None:
            return False, "no question to report"
        if len(intent.reason.strip()) < MIN_REASON:
            return False, f"Please write a reason (min {MIN_REASON} characters)."
        return True, "ok"

    def apply(self, sess: GameSession, intent: ReportIntent, ctx: TurnContext):
        state = sess.state
        start = len(state.updates)
        q = state.last_question
        try:
            ctx.provider.submit_report(q.question_set_id, q.question_index, intent.reason.strip())
            state.push(Side.PLAYER, UpdateKind.REPORTED, "✅ Report submitted. Thank you!")
            result = ActionLogResult.APPLIED
        except QuizError as e:
            logger.warning("report on %s[%d] failed: %s", q.question_set_id, q.question_index, e)
            state.push(Side.PLAYER, UpdateKind.NOTICE, "❌ Failed to submit report.")
            result = ActionLogResult.ERROR

        log_event(sess, Side.PLAYER, intent, result, state.status, state.updates[start:])
        return sess
