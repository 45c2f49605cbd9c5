from __future__ import annotations
import logging
import random
from contextlib import contextmanager
from typing import Any, Iterator, List, Mapping, Optional, Type, TypeVar, Union

from pydantic import BaseModel, ValidationError as PydanticValidationError
from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from .errors import EmptySet, NotFound, Unavailable, ValidationError, describe
from .models import Question, QuestionSet, Report
from .schemas import (
    QuestionIn,
    QuestionSetCreate,
    QuestionSetOut,
    QuestionSetSummary,
    RandomQuestion,
    ReportAck,
    ReportCreate,
    ReportOut,
)

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)


def _coerce(model: Type[M], payload: Union[M, Mapping[str, Any]]) -> M:
    """Accept either a validated schema or a raw mapping from an in-process caller."""
    if isinstance(payload, model):
        return payload
    try:
        return model.model_validate(payload)
    except PydanticValidationError as e:
        raise ValidationError(describe(e)) from e


@contextmanager
def _store(db: Session, action: str) -> Iterator[None]:
    """Turn any database failure inside the block into Unavailable."""
    try:
        yield
    except SQLAlchemyError as e:
        db.rollback()
        logger.error("question store failed to %s: %s", action, e)
        raise Unavailable("Question store is unavailable") from e


def _load_set(db: Session, set_id: str) -> QuestionSet:
    qs = db.get(QuestionSet, set_id)
    if qs is None:
        raise NotFound("Question set not found")
    return qs


def _to_out(qs: QuestionSet) -> QuestionSetOut:
    return QuestionSetOut(
        id=qs.id,
        title=qs.title,
        subject=qs.subject,
        created_at=qs.created_at,
        updated_at=qs.updated_at,
        question_count=len(qs.questions),
        questions=[QuestionIn(question=q.question, answer=q.answer, difficulty=q.difficulty) for q in qs.questions],
    )


def list_question_sets(db: Session) -> List[QuestionSetSummary]:
    counts = (
        select(Question.question_set_id, func.count(Question.id).label("n"))
        .group_by(Question.question_set_id)
        .subquery()
    )
    stmt = (
        select(QuestionSet, func.coalesce(counts.c.n, 0))
        .outerjoin(counts, counts.c.question_set_id == QuestionSet.id)
        .order_by(QuestionSet.created_at.desc())
    )
    with _store(db, "list question sets"):
        rows = db.execute(stmt).all()
    return [
        QuestionSetSummary(
            id=qs.id,
            title=qs.title,
            subject=qs.subject,
            created_at=qs.created_at,
            question_count=n,
        )
        for qs, n in rows
    ]


def create_question_set(db: Session, payload: Union[QuestionSetCreate, Mapping[str, Any]]) -> QuestionSetOut:
    body = _coerce(QuestionSetCreate, payload)
    qs = QuestionSet(title=body.title, subject=body.subject)
    qs.questions = [
        Question(position=i, question=q.question, answer=q.answer, difficulty=q.difficulty.value)
        for i, q in enumerate(body.questions)
    ]
    with _store(db, "save a question set"):
        db.add(qs)
        db.commit()
        db.refresh(qs)
        out = _to_out(qs)
    logger.info("created question set %s (%d questions)", out.id, out.question_count)
    return out


def get_question_set(db: Session, set_id: str) -> QuestionSetOut:
    with _store(db, "read a question set"):
        return _to_out(_load_set(db, set_id))


def get_random_question(db: Session, set_id: str, rng: Optional[random.Random] = None) -> RandomQuestion:
    with _store(db, "read questions"):
        qs = _load_set(db, set_id)
        questions = list(qs.questions)
    if not questions:
        raise EmptySet("This set has no questions")
    index = (rng or random).randrange(len(questions))
    q = questions[index]
    return RandomQuestion(
        question_set_id=qs.id,
        question_index=index,
        question=q.question,
        answer=q.answer,
        difficulty=q.difficulty,
    )


def submit_report(db: Session, payload: Union[ReportCreate, Mapping[str, Any]]) -> ReportAck:
    body = _coerce(ReportCreate, payload)
    with _store(db, "save a report"):
        qs = _load_set(db, body.question_set_id)
        if body.question_index >= len(qs.questions):
            raise NotFound(f"Question {body.question_index} does not exist in this set")
        report = Report(question_set_id=qs.id, question_index=body.question_index, reason=body.reason)
        db.add(report)
        db.commit()
    logger.info("report %s filed against %s[%d]", report.id, qs.id, body.question_index)
    return ReportAck(id=report.id)


def list_reports(db: Session, set_id: str) -> List[ReportOut]:
    with _store(db, "list reports"):
        qs = _load_set(db, set_id)
        rows = db.scalars(select(Report).where(Report.question_set_id == qs.id).order_by(Report.created_at)).all()
    return [
        ReportOut(
            id=r.id,
            question_set_id=r.question_set_id,
            question_index=r.question_index,
            reason=r.reason,
            created_at=r.created_at,
        )
        for r in rows
    ]
