from __future__ import annotations

import logging

from . import storage
from .events import ActionEvent, event_bus
from .models.api import ActionLogEntry
from .models.enums import ActionLogResult

logger = logging.getLogger("ultangber.actions")


def _on_action_event(ev: ActionEvent) -> None:
    # Convert event to ActionLogEntry JSON for persistence
    entry = ActionLogEntry(
        session_id=ev.session_id,
        turn=ev.turn,
        actor=ev.actor,
        intent=ev.intent,
        result=ev.result,
        message=ev.message,
        updates=ev.updates,
    )
    storage.logs.append(ev.session_id, entry.model_dump_json())
    level = logging.INFO if ev.result == ActionLogResult.APPLIED else logging.WARNING
    logger.log(
        level,
        "game=%s turn=%d actor=%s intent=%s result=%s %s",
        ev.session_id,
        ev.turn,
        ev.actor.value,
        ev.intent.kind if ev.intent is not None else "-",
        ev.result.value,
        ev.message or "",
    )


def register_listeners() -> None:
    event_bus.subscribe(ActionEvent, _on_action_event)
