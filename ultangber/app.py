from __future__ import annotations

import logging
import os
from contextlib import asynccontextmanager, contextmanager
from typing import Any, Iterator

from fastapi import FastAPI, HTTPException, Query
from fastapi.middleware.cors import CORSMiddleware
from pydantic import TypeAdapter
from pydantic import ValidationError as SchemaError
from redis.exceptions import RedisError

from quizbank.db import init_db
from quizbank.routes import router as quiz_router

from . import storage
from .engine.auto_robot import robot_autoplay
from .engine.core import TurnController
from .engine.systems.board import SPECIALS_PER_KIND
from .engine.systems.turn import turn_label
from .logging_listeners import register_listeners
from .models.api import (
    ActionLogEntry,
    ActionLogResponse,
    AnswerIntent,
    ApplyIntentRequest,
    ApplyIntentResponse,
    CreateGameRequest,
    GameView,
    QuestionPrompt,
    ReportIntent,
    RollIntent,
)
from .models.board import BOARD_SIZES
from .models.enums import Phase
from .models.session import GameConfig, GameSession
from .providers import QUIZ_SERVICE_URL, HttpQuestionProvider, default_provider

ALLOWED_ORIGINS = [o.strip() for o in os.getenv("ALLOWED_ORIGINS", "*").split(",") if o.strip()]

logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # the in-process provider reads the quiz tables directly
    if not QUIZ_SERVICE_URL:
        init_db()
    yield
    if isinstance(controller.provider, HttpQuestionProvider):
        controller.provider.close()


app = FastAPI(title="ULTANGBER", version="0.1.0", lifespan=lifespan)
controller = TurnController(default_provider())
register_listeners()

app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(quiz_router, prefix="/api")


def _view(sess: GameSession) -> GameView:
    state = sess.state
    pending = None
    if state.pending_question is not None:
        q = state.pending_question
        pending = QuestionPrompt(
            question_set_id=q.question_set_id,
            question_index=q.question_index,
            prompt=q.prompt,
            difficulty=q.difficulty,
        )
    return GameView(
        id=sess.id,
        config=sess.config,
        board=state.board,
        player=state.player,
        robot=state.robot,
        current_turn=state.current_turn,
        phase=state.phase,
        turn_label=turn_label(state),
        turn=state.turn,
        last_roll=state.last_roll,
        status=state.status,
        awaiting_answer=state.awaiting_answer,
        pending_question=pending,
        winner=state.winner,
    )


def _load(sid: str) -> GameSession:
    sess = storage.get(sid)
    if not sess:
        raise HTTPException(404, "game not found")
    return sess


@contextmanager
def _locked(sid: str) -> Iterator[None]:
    # one intent at a time per game; a concurrent one is rejected, not queued
    try:
        with storage.session_lock(sid):
            yield
    except storage.SessionBusy:
        logger.info("game %s busy, rejecting concurrent request", sid)
        raise HTTPException(400, "game is busy with another request")


@app.get("/health")
def health() -> dict[str, Any]:
    try:
        store_ok = storage.ping()
    except RedisError as e:
        logger.error("session store ping failed: %s", e)
        store_ok = False
    return {"ok": store_ok, "storage": storage.backend_name(), "store_connected": store_ok}


@app.get("/info")
def defaults_info():
    """Board sizes plus request and intent schemas with examples, for clients building their own UI."""
    return {
        "board_sizes": list(BOARD_SIZES),
        "specials_per_kind": {str(k): v for k, v in SPECIALS_PER_KIND.items()},
        "intents": {
            "roll": {
                "schema": RollIntent.model_json_schema(),
                "example": RollIntent().model_dump(mode="json"),
            },
            "answer": {
                "schema": AnswerIntent.model_json_schema(),
                "example": AnswerIntent(text="Paris").model_dump(mode="json"),
            },
            "report": {
                "schema": ReportIntent.model_json_schema(),
                "example": ReportIntent(reason="The answer is wrong").model_dump(mode="json"),
            },
        },
        "requests": {
            "create_game": {
                "schema": CreateGameRequest.model_json_schema(),
                "example": GameConfig(question_set_id="<question-set-id>").model_dump(
                    mode="json", exclude_none=True
                ),
            }
        },
    }


@app.get("/games", response_model=list[GameView])
def list_games():
    return [_view(s) for s in storage.list_all()]


@app.post("/games", response_model=GameView, status_code=201)
def create_game(req: CreateGameRequest):
    config = GameConfig.model_validate(req.model_dump())
    sess = controller.new_game(config)
    storage.save(sess)
    logger.info("game %s created (size=%d, set=%s)", sess.id, config.size, config.question_set_id)
    return _view(sess)


@app.get("/games/{sid}", response_model=GameView)
def get_game(sid: str):
    return _view(_load(sid))


@app.delete("/games/{sid}", status_code=204)
def delete_game(sid: str):
    with _locked(sid):
        if not storage.delete(sid):
            raise HTTPException(404, "game not found")


@app.post("/games/{sid}/intents", response_model=ApplyIntentResponse)
def apply_intent(sid: str, req: ApplyIntentRequest):
    with _locked(sid):
        sess = _load(sid)
        ev, new_sess = controller.process_intent(sess, req.intent)
        if new_sess is None:
            raise HTTPException(400, ev.explanation)
        updates = list(new_sess.state.updates)
        # the robot answers immediately once the player hands over the turn
        if new_sess.state.phase == Phase.ROBOT_TURN:
            _, new_sess = robot_autoplay(controller, new_sess)
            updates.extend(new_sess.state.updates[len(updates):])

        if new_sess.state.phase == Phase.GAME_OVER:
            storage.delete(new_sess.id)
            logger.info("game %s over, winner=%s", new_sess.id, new_sess.state.winner.value)
        else:
            storage.save(new_sess)
    return ApplyIntentResponse(
        applied=True,
        explanation=ev.explanation,
        updates=updates,
        game=_view(new_sess),
    )


@app.get("/games/{sid}/log", response_model=ActionLogResponse)
def get_action_log(sid: str, limit: int = Query(50, ge=1, le=1000)):
    _load(sid)
    raw = storage.logs.list(sid, limit)
    ta = TypeAdapter(ActionLogEntry)
    entries: list[ActionLogEntry] = []
    for s in raw:
        try:
            entries.append(ta.validate_json(s))
        except SchemaError:
            # Skip malformed entries rather than failing the whole response
            logger.warning("dropping malformed log entry for game %s", sid)
    return ActionLogResponse(entries=entries)
