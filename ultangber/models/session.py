from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

from .game import GameState


class GameConfig(BaseModel):
    """Settings chosen on the setup screen."""

    size: Literal[8, 10, 12] = 10
    question_set_id: str = Field(min_length=1)
    player_color: str = "#e74c3c"
    seed: int | None = None


class GameSession(BaseModel):
    id: str
    config: GameConfig
    state: GameState
