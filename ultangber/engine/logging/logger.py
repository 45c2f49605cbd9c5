from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ...models.api import Intent
    from ...models.game import StatusUpdate
    from ...models.session import GameSession

from ...events import ActionEvent, event_bus
from ...models.enums import ActionLogResult, Side


def log_event(
    sess: GameSession,
    actor: Side,
    intent: Intent | None,
    result: ActionLogResult,
    message: str | None = None,
    updates: list[StatusUpdate] | None = None,
) -> None:
    event_bus.emit(
        ActionEvent(
            session_id=sess.id,
            turn=sess.state.turn,
            actor=actor,
            intent=intent,
            result=result,
            message=message,
            updates=list(updates or []),
        )
    )


def log_illegal(sess: GameSession, intent: Intent, explanation: str) -> None:
    log_event(sess, Side.PLAYER, intent, ActionLogResult.ILLEGAL, explanation)


def log_error(sess: GameSession, actor: Side, intent: Intent | None, error: Exception) -> None:
    log_event(sess, actor, intent, ActionLogResult.ERROR, str(error))
