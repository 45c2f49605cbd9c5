from __future__ import annotations

from ...models.enums import Phase, Side, UpdateKind
from ...models.game import GameState, TokenState

WIN_MESSAGES = {
    Side.PLAYER: "🏆 You reached the finish! You win!",
    Side.ROBOT: "🤖 Robot reached the finish first. Robot wins!",
}


def has_won(token: TokenState, total: int) -> bool:
    return token.position >= total


def check(state: GameState, side: Side, delay_ms: int = 0) -> bool:
    """End the game in favour of side if its token reached the last square."""
    if state.phase == Phase.GAME_OVER:
        return True
    if not has_won(state.token(side), state.total):
        return False
    state.phase = Phase.GAME_OVER
    state.winner = side
    state.pending_question = None
    state.push(side, UpdateKind.WIN, WIN_MESSAGES[side], delay_ms=delay_ms)
    return True
