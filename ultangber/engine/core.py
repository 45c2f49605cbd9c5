from __future__ import annotations

import random
from typing import TYPE_CHECKING
from uuid import uuid4

from ..models.api import AnswerIntent, EvaluateResponse, Intent, ReportIntent, RollIntent
from ..models.enums import Phase, Side, UpdateKind
from ..models.game import GameState, TokenState
from ..models.session import GameConfig, GameSession
from .actions.answer import AnswerHandler
from .actions.base import TurnContext
from .actions.report import ReportHandler
from .actions.roll import RollHandler
from .dice import SixSidedDie
from .logging.logger import log_error, log_illegal
from .pacing import DEFAULT_PACING
from .robot import DEFAULT_ROBOT, play_robot_turn
from .systems.board import generate_board
from .systems.turn import TURN_LABELS

if TYPE_CHECKING:
    from ..providers import QuestionProvider
    from .actions.base import Registry
    from .dice import Dice
    from .pacing import Pacing
    from .robot import RobotPolicy

default_handlers: Registry = {
    RollHandler.intent_type: RollHandler(),
    AnswerHandler.intent_type: AnswerHandler(),
    ReportHandler.intent_type: ReportHandler(),
}


class IllegalIntent(Exception):
    pass


class TurnController:
    """Owns the game state machine; every operation takes and returns a GameSession."""

    def __init__(
        self,
        provider: QuestionProvider,
        handlers: Registry | None = None,
        *,
        dice: Dice | None = None,
        robot: RobotPolicy | None = None,
        pacing: Pacing | None = None,
    ):
        self.provider = provider
        self.handlers: Registry = handlers or default_handlers
        self.dice = dice or SixSidedDie()
        self.robot = robot or DEFAULT_ROBOT
        self.pacing = pacing or DEFAULT_PACING

    def new_game(self, config: GameConfig, session_id: str | None = None) -> GameSession:
        seed = config.seed if config.seed is not None else random.SystemRandom().randrange(2**32)
        board = generate_board(config.size, random.Random(f"{seed}:board"))
        state = GameState(
            board=board,
            player=TokenState(position=1),
            robot=TokenState(position=1),
            seed=seed,
        )
        state.push(Side.PLAYER, UpdateKind.TURN, TURN_LABELS[Side.PLAYER])
        return GameSession(id=session_id or uuid4().hex, config=config, state=state)

    def context(self, sess: GameSession) -> TurnContext:
        # a fresh, reproducible random source for every step of the game
        state = sess.state
        rng = random.Random(f"{state.seed}:{state.tick}")
        state.tick += 1
        return TurnContext(
            provider=self.provider,
            dice=self.dice,
            robot=self.robot,
            pacing=self.pacing,
            rng=rng,
        )

    def evaluate(self, sess: GameSession, intent: Intent) -> EvaluateResponse:
        h = self.handlers.get(type(intent))
        if not h:
            return EvaluateResponse(legal=False, explanation="unknown intent")
        ok, why = h.evaluate(sess.state, intent)
        return EvaluateResponse(legal=ok, explanation=why)

    def process_intent(self, sess: GameSession, intent: Intent) -> tuple[EvaluateResponse, GameSession | None]:
        ev = self.evaluate(sess, intent)
        if not ev.legal:
            log_illegal(sess, intent, ev.explanation)
            return ev, None
        sess.state.updates = []
        try:
            new_sess = self.handlers[type(intent)].apply(sess, intent, self.context(sess))
            return ev, new_sess
        except Exception as e:
            log_error(sess, Side.PLAYER, intent, e)
            raise

    def run_robot_turn(self, sess: GameSession) -> GameSession:
        if sess.state.phase != Phase.ROBOT_TURN:
            return sess
        try:
            return play_robot_turn(sess, self.context(sess))
        except Exception as e:
            log_error(sess, Side.ROBOT, None, e)
            raise

    def winner(self, sess: GameSession) -> Side | None:
        return sess.state.winner if sess.state.phase == Phase.GAME_OVER else None

    # ----- convenience wrappers used by scripts and tests -----

    def _must(self, sess: GameSession, intent: Intent) -> GameSession:
        ev, new_sess = self.process_intent(sess, intent)
        if new_sess is None:
            raise IllegalIntent(ev.explanation)
        return new_sess

    def roll(self, sess: GameSession) -> GameSession:
        return self._must(sess, RollIntent())

    def answer(self, sess: GameSession, text: str) -> GameSession:
        return self._must(sess, AnswerIntent(text=text))

    def report(self, sess: GameSession, reason: str) -> GameSession:
        return self._must(sess, ReportIntent(reason=reason))
