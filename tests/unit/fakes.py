# Test doubles for engine-level tests: a scripted question provider,
# loaded dice and a hand-built board so positions can be set up exactly.

from __future__ import annotations

import random
from collections.abc import Iterable

from quizbank.errors import QuizError
from ultangber.engine.core import TurnController
from ultangber.engine.pacing import Pacing
from ultangber.engine.robot import RobotPolicy
from ultangber.engine.systems.board import build_squares
from ultangber.models.board import Board
from ultangber.models.enums import SquareType
from ultangber.models.game import GameState, PendingQuestion, TokenState
from ultangber.models.session import GameConfig, GameSession

SET_ID = "set-1"


class FakeProvider:
    def __init__(self, answer: str = "Paris", error: QuizError | None = None):
        self.answer = answer
        self.error = error
        self.asked = 0
        self.reports: list[tuple[str, int, str]] = []
        self.report_error: QuizError | None = None

    def get_random_question(self, question_set_id: str) -> PendingQuestion:
        self.asked += 1
        if self.error is not None:
            raise self.error
        return PendingQuestion(
            question_set_id=question_set_id,
            question_index=0,
            prompt="What is the capital of France?",
            correct_answer=self.answer,
        )

    def submit_report(self, question_set_id: str, question_index: int, reason: str) -> str:
        if self.report_error is not None:
            raise self.report_error
        self.reports.append((question_set_id, question_index, reason))
        return "Report submitted. Thank you!"


class LoadedDice:
    """Returns the scripted rolls in order, then repeats the last one."""

    def __init__(self, *rolls: int):
        self.rolls = list(rolls)

    def roll(self, rng: random.Random) -> int:
        if len(self.rolls) > 1:
            return self.rolls.pop(0)
        return self.rolls[0]


ALWAYS_RIGHT = RobotPolicy(accuracy=1.0)
ALWAYS_WRONG = RobotPolicy(accuracy=0.0)
NO_PACING = Pacing(*([0] * 10))


def make_board(size: int = 10, specials: dict[int, tuple[SquareType, int]] | None = None) -> Board:
    return Board(size=size, squares=build_squares(size, specials or {}))


def make_session(
    size: int = 10,
    specials: dict[int, tuple[SquareType, int]] | None = None,
    player: int = 1,
    robot: int = 1,
    **state_kw,
) -> GameSession:
    state = GameState(
        board=make_board(size, specials),
        player=TokenState(position=player),
        robot=TokenState(position=robot),
        seed=7,
        **state_kw,
    )
    return GameSession(id="g-1", config=GameConfig(size=size, question_set_id=SET_ID), state=state)


def make_controller(
    provider: FakeProvider | None = None,
    rolls: Iterable[int] = (1,),
    robot: RobotPolicy = ALWAYS_RIGHT,
) -> TurnController:
    return TurnController(provider or FakeProvider(), dice=LoadedDice(*rolls), robot=robot, pacing=NO_PACING)
