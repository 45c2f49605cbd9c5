import threading

import pytest
from fakes import make_controller, make_session
from fastapi import HTTPException

from ultangber import app as game_app
from ultangber import storage
from ultangber.models.api import ApplyIntentRequest, RollIntent
from ultangber.storage import MemoryGameStore, MemoryLocks, MemoryLogStore

ROLL = ApplyIntentRequest(intent=RollIntent())


@pytest.fixture()
def stored_game(monkeypatch):
    monkeypatch.setattr(storage, "store", MemoryGameStore())
    monkeypatch.setattr(storage, "logs", MemoryLogStore())
    monkeypatch.setattr(storage, "locks", MemoryLocks())
    ctl = make_controller(rolls=(2,))
    monkeypatch.setattr(game_app, "controller", ctl)
    sess = make_session()
    storage.save(sess)
    return ctl, sess.id


def test_concurrent_intents_on_one_game(stored_game, monkeypatch):
    ctl, sid = stored_game
    entered, release = threading.Event(), threading.Event()
    process = ctl.process_intent

    def slow_process(sess, intent):
        entered.set()
        assert release.wait(5)
        return process(sess, intent)

    monkeypatch.setattr(ctl, "process_intent", slow_process)

    results = {}

    def first():
        results["first"] = game_app.apply_intent(sid, ROLL)

    t = threading.Thread(target=first)
    t.start()
    try:
        assert entered.wait(5)
        with pytest.raises(HTTPException) as exc:
            game_app.apply_intent(sid, ROLL)
        assert exc.value.status_code == 400
        assert exc.value.detail == "game is busy with another request"
    finally:
        release.set()
        t.join(5)

    body = results["first"]
    assert body.applied is True
    assert body.game.turn == 2
    # the robot played too, so both tokens moved exactly once
    assert body.game.player.position == 3 and body.game.robot.position == 3
    assert storage.get(sid).state.turn == 2

    # lock is free again
    assert game_app.apply_intent(sid, ROLL).game.turn == 3


def test_lock_released_after_illegal_intent(stored_game):
    _, sid = stored_game
    bad = ApplyIntentRequest.model_validate({"intent": {"kind": "ANSWER", "text": "4"}})
    with pytest.raises(HTTPException) as exc:
        game_app.apply_intent(sid, bad)
    assert exc.value.status_code == 400
    assert game_app.apply_intent(sid, ROLL).applied is True


def test_delete_is_rejected_while_an_intent_runs(stored_game):
    _, sid = stored_game
    with storage.session_lock(sid):
        with pytest.raises(HTTPException) as exc:
            game_app.delete_game(sid)
        assert exc.value.status_code == 400
    game_app.delete_game(sid)
    with pytest.raises(HTTPException) as exc:
        game_app.apply_intent(sid, ROLL)
    assert exc.value.status_code == 404
