from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol

from quizbank.errors import QuizError

from ...models.enums import Side, UpdateKind

if TYPE_CHECKING:
    from ...models.api import Intent
    from ...models.game import GameState, PendingQuestion
    from ...models.session import GameSession
    from ...providers import QuestionProvider
    from ..dice import Dice
    from ..pacing import Pacing
    from ..robot import RobotPolicy

logger = logging.getLogger(__name__)

QUESTION_FAILED = {
    Side.PLAYER: "⚠️ Could not load question. Skip.",
    Side.ROBOT: "⚠️ Robot skipped due to error.",
}


@dataclass
class TurnContext:
    """Collaborators and the step-local random source for one controller call."""

    provider: QuestionProvider
    dice: Dice
    robot: RobotPolicy
    pacing: Pacing
    rng: random.Random

    def roll(self) -> int:
        return self.dice.roll(self.rng)

    def fetch_question(self, state: GameState, side: Side, question_set_id: str) -> PendingQuestion | None:
        """Ask the provider for a question; on failure post a notice and return None."""
        try:
            return self.provider.get_random_question(question_set_id)
        except QuizError as e:
            logger.warning("question for %s unavailable (%s): %s", question_set_id, type(e).__name__, e)
            state.push(side, UpdateKind.NOTICE, QUESTION_FAILED[side])
            return None


class IntentHandler(Protocol):
    intent_type: type

    def evaluate(self, state: GameState, intent: Intent) -> tuple[bool, str]: ...

    def apply(self, sess: GameSession, intent: Intent, ctx: TurnContext) -> GameSession: ...


Registry = dict[type, IntentHandler]
