"""Question providers the turn controller asks for quiz questions.

Two implementations: an in-process one backed by the quizbank SQLAlchemy
store, and an HTTP one that talks to a separately deployed quiz service.
Both raise the quizbank error taxonomy so the controller can degrade the
same way whichever is configured.
"""

from __future__ import annotations

import logging
import os
import random
from typing import Callable, Optional, Protocol

import httpx
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.orm import Session

from quizbank import storage as quiz_storage
from quizbank.errors import EmptySet, NotFound, QuizError, Unavailable, ValidationError, describe
from quizbank.schemas import RandomQuestion

from .models.game import PendingQuestion

QUIZ_SERVICE_URL = os.getenv("QUIZ_SERVICE_URL")
QUIZ_TIMEOUT = float(os.getenv("QUIZ_TIMEOUT", "5"))
UA = os.getenv("QUIZ_USER_AGENT", "ULTANGBER/0.1")

logger = logging.getLogger(__name__)


class QuestionProvider(Protocol):
    def get_random_question(self, question_set_id: str) -> PendingQuestion: ...

    def submit_report(self, question_set_id: str, question_index: int, reason: str) -> str: ...


def _pending(q: RandomQuestion) -> PendingQuestion:
    return PendingQuestion(
        question_set_id=q.question_set_id,
        question_index=q.question_index,
        prompt=q.question,
        correct_answer=q.answer,
        difficulty=q.difficulty.value,
    )


class LocalQuestionProvider:
    """Reads questions straight from the quiz database."""

    def __init__(self, session_factory: Callable[[], Session], rng: Optional[random.Random] = None) -> None:
        self._session_factory = session_factory
        self._rng = rng or random.Random()

    def get_random_question(self, question_set_id: str) -> PendingQuestion:
        with self._session_factory() as db:
            return _pending(quiz_storage.get_random_question(db, question_set_id, self._rng))

    def submit_report(self, question_set_id: str, question_index: int, reason: str) -> str:
        with self._session_factory() as db:
            ack = quiz_storage.submit_report(
                db,
                {"question_set_id": question_set_id, "question_index": question_index, "reason": reason},
            )
        return ack.message


_STATUS_ERRORS: dict[int, type[QuizError]] = {
    400: ValidationError,
    404: NotFound,
    409: EmptySet,
    422: ValidationError,
}


class HttpQuestionProvider:
    """Talks to the quiz service's /api routes over HTTP."""

    def __init__(self, base_url: str, *, timeout: float = QUIZ_TIMEOUT, transport: httpx.BaseTransport | None = None) -> None:
        self._client = httpx.Client(
            base_url=base_url.rstrip("/"),
            timeout=timeout,
            headers={"Accept": "application/json", "User-Agent": UA},
            transport=transport,
        )

    def _request(self, method: str, url: str, **kw) -> dict:
        try:
            r = self._client.request(method, url, **kw)
        except httpx.HTTPError as e:
            logger.warning("quiz service unreachable: %s", e)
            raise Unavailable("Question service is unavailable") from e
        if r.status_code >= 400:
            try:
                payload = r.json()
            except ValueError:
                payload = None
            detail = payload.get("detail", r.text) if isinstance(payload, dict) else r.text
            err = _STATUS_ERRORS.get(r.status_code, Unavailable)
            raise err(str(detail))
        try:
            body = r.json()
        except ValueError as e:
            logger.warning("quiz service sent a non-JSON body for %s: %s", url, e)
            raise Unavailable("Question service sent an unreadable response") from e
        if not isinstance(body, dict):
            logger.warning("quiz service sent a %s body for %s", type(body).__name__, url)
            raise Unavailable("Question service sent an unexpected response")
        return body

    def get_random_question(self, question_set_id: str) -> PendingQuestion:
        body = self._request("GET", f"/api/question-sets/{question_set_id}/random-question")
        try:
            question = RandomQuestion.model_validate(body)
        except PydanticValidationError as e:
            logger.warning("quiz service sent a malformed question: %s", describe(e))
            raise Unavailable("Question service sent an unexpected response") from e
        return _pending(question)

    def submit_report(self, question_set_id: str, question_index: int, reason: str) -> str:
        body = self._request(
            "POST",
            "/api/report",
            json={"question_set_id": question_set_id, "question_index": question_index, "reason": reason},
        )
        return body.get("message", "Report submitted. Thank you!")

    def close(self) -> None:
        self._client.close()


def default_provider() -> QuestionProvider:
    if QUIZ_SERVICE_URL:
        return HttpQuestionProvider(QUIZ_SERVICE_URL)
    from quizbank.db import SessionLocal

    return LocalQuestionProvider(SessionLocal)
