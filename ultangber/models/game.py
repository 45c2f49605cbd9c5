from __future__ import annotations

from pydantic import BaseModel, Field, computed_field

from .board import Board
from .enums import Phase, Side, UpdateKind


class TokenState(BaseModel):
    position: int = 0  # 0 = not yet placed on the board
    frozen_turns: int = 0

    @property
    def frozen(self) -> bool:
        return self.frozen_turns > 0


class PendingQuestion(BaseModel):
    question_set_id: str
    question_index: int
    prompt: str
    correct_answer: str
    difficulty: str = "Easy"


class StatusUpdate(BaseModel):
    """One line of feedback for the render surface.

    delay_ms is the pacing interval the surface waits before showing this
    update; it never affects the game outcome.
    """

    actor: Side
    kind: UpdateKind
    message: str
    dice: int | None = None
    position: int | None = None
    delay_ms: int = 0


class GameState(BaseModel):
    board: Board
    player: TokenState = Field(default_factory=TokenState)
    robot: TokenState = Field(default_factory=TokenState)
    current_turn: Side = Side.PLAYER
    phase: Phase = Phase.PLAYER_TURN
    pending_question: PendingQuestion | None = None
    # most recent question asked of the player, kept for reports
    last_question: PendingQuestion | None = None
    last_roll: int | None = None
    status: str = ""
    winner: Side | None = None
    turn: int = 1
    seed: int = 0
    tick: int = 0
    updates: list[StatusUpdate] = Field(default_factory=list)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def awaiting_answer(self) -> bool:
        return self.phase == Phase.PLAYER_AWAITING_ANSWER

    @property
    def total(self) -> int:
        return self.board.total

    def token(self, side: Side) -> TokenState:
        return self.player if side == Side.PLAYER else self.robot

    def set_token(self, side: Side, token: TokenState) -> None:
        if side == Side.PLAYER:
            self.player = token
        else:
            self.robot = token

    def push(
        self,
        actor: Side,
        kind: UpdateKind,
        message: str,
        *,
        dice: int | None = None,
        delay_ms: int = 0,
    ) -> StatusUpdate:
        upd = StatusUpdate(
            actor=actor,
            kind=kind,
            message=message,
            dice=dice,
            position=self.token(actor).position,
            delay_ms=delay_ms,
        )
        self.updates.append(upd)
        self.status = message
        return upd
