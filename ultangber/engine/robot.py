from __future__ import annotations

import random
from dataclasses import dataclass
from typing import TYPE_CHECKING

from ..models.enums import ActionLogResult, Phase, Side, UpdateKind
from .logging.logger import log_event
from .systems import victory
from .systems.turn import advance, pass_turn, resolve_answer, skip_if_frozen

if TYPE_CHECKING:
    from ..models.session import GameSession
    from .actions.base import TurnContext


@dataclass(frozen=True)
class RobotPolicy:
    """The robot never reads the question; it is right with a fixed probability."""

    accuracy: float = 0.7

    def answers_correctly(self, rng: random.Random) -> bool:
        return rng.random() < self.accuracy


DEFAULT_ROBOT = RobotPolicy()


def play_robot_turn(sess: GameSession, ctx: TurnContext) -> GameSession:
    """Run one full robot turn; ends in PLAYER_TURN or GAME_OVER."""
    state = sess.state
    start = len(state.updates)
    pacing = ctx.pacing

    if skip_if_frozen(state, Side.ROBOT, pacing.robot_think_ms):
        pass_turn(state, Side.PLAYER, pacing.skip_switch_ms)
    else:
        dice = ctx.roll()
        state.last_roll = dice
        state.push(Side.ROBOT, UpdateKind.ROLLED, f"Robot rolled a {dice}!", dice=dice, delay_ms=pacing.robot_think_ms)
        square = advance(state, Side.ROBOT, dice, pacing.robot_move_ms)
        if not victory.check(state, Side.ROBOT):
            if square is not None and square.special:
                _answer_question(sess, square, ctx)
            if state.phase != Phase.GAME_OVER:
                pass_turn(state, Side.PLAYER, pacing.robot_end_ms)

    log_event(sess, Side.ROBOT, None, ActionLogResult.APPLIED, state.status, state.updates[start:])
    return sess


def _answer_question(sess: GameSession, square, ctx: TurnContext) -> None:
    state = sess.state
    pacing = ctx.pacing
    state.phase = Phase.ROBOT_ANSWERING
    state.push(
        Side.ROBOT,
        UpdateKind.QUESTION,
        f"🤖 Robot landed on a {square.type.value.lower()} square!",
        delay_ms=pacing.robot_question_ms,
    )
    question = ctx.fetch_question(state, Side.ROBOT, sess.config.question_set_id)
    if question is None:
        return
    state.push(Side.ROBOT, UpdateKind.QUESTION, f'🤖 Robot is answering: "{question.prompt[:40]}..."')
    correct = ctx.robot.answers_correctly(ctx.rng)
    resolve_answer(state, Side.ROBOT, square, correct, pacing.robot_answer_ms)
    victory.check(state, Side.ROBOT, pacing.game_over_ms)
