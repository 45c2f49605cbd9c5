from __future__ import annotations

from datetime import datetime
from typing import Annotated, Literal, Union

from pydantic import BaseModel, Field

from .board import Board
from .enums import ActionLogResult, Phase, Side
from .game import StatusUpdate, TokenState
from .session import GameConfig

# ----- Intents raised by the render surface (discriminated union) -----


class RollIntent(BaseModel):
    kind: Literal["ROLL"] = "ROLL"


class AnswerIntent(BaseModel):
    kind: Literal["ANSWER"] = "ANSWER"
    text: str


class ReportIntent(BaseModel):
    kind: Literal["REPORT"] = "REPORT"
    reason: str


Intent = Annotated[Union[RollIntent, AnswerIntent, ReportIntent], Field(discriminator="kind")]


# ----- API IO -----
class CreateGameRequest(GameConfig):
    pass


class QuestionPrompt(BaseModel):
    """Pending question as shown to the player (no answer)."""

    question_set_id: str
    question_index: int
    prompt: str
    difficulty: str


class GameView(BaseModel):
    id: str
    config: GameConfig
    board: Board
    player: TokenState
    robot: TokenState
    current_turn: Side
    phase: Phase
    turn_label: str
    turn: int
    last_roll: int | None = None
    status: str = ""
    awaiting_answer: bool = False
    pending_question: QuestionPrompt | None = None
    winner: Side | None = None


class EvaluateResponse(BaseModel):
    legal: bool
    explanation: str


class ApplyIntentRequest(BaseModel):
    intent: Intent


class ApplyIntentResponse(BaseModel):
    applied: bool
    explanation: str
    updates: list[StatusUpdate] = Field(default_factory=list)
    game: GameView


# ----- Action Log -----


class ActionLogEntry(BaseModel):
    ts: datetime = Field(default_factory=datetime.now)
    session_id: str
    turn: int
    actor: Side
    intent: Intent | None = None  # None for autonomous robot turns
    result: ActionLogResult = ActionLogResult.APPLIED
    message: str | None = None
    updates: list[StatusUpdate] = Field(default_factory=list)


class ActionLogResponse(BaseModel):
    entries: list[ActionLogEntry]
