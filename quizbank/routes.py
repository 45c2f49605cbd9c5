from __future__ import annotations
from typing import List

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from . import storage
from .db import get_db
from .errors import QuizError
from .schemas import (
    QuestionSetCreate,
    QuestionSetOut,
    QuestionSetSummary,
    RandomQuestion,
    ReportAck,
    ReportCreate,
    ReportOut,
)


router = APIRouter(tags=["question-sets"])


def _http(e: QuizError) -> HTTPException:
    return HTTPException(status_code=e.status_code, detail=str(e))


@router.get("/question-sets", response_model=List[QuestionSetSummary])
def list_question_sets(db: Session = Depends(get_db)):
    try:
        return storage.list_question_sets(db)
    except QuizError as e:
        raise _http(e)


@router.post("/question-sets", response_model=QuestionSetOut, status_code=201)
def create_question_set(body: QuestionSetCreate, db: Session = Depends(get_db)):
    try:
        return storage.create_question_set(db, body)
    except QuizError as e:
        raise _http(e)


@router.get("/question-sets/{set_id}", response_model=QuestionSetOut)
def get_question_set(set_id: str, db: Session = Depends(get_db)):
    try:
        return storage.get_question_set(db, set_id)
    except QuizError as e:
        raise _http(e)


@router.get("/question-sets/{set_id}/random-question", response_model=RandomQuestion)
def random_question(set_id: str, db: Session = Depends(get_db)):
    try:
        return storage.get_random_question(db, set_id)
    except QuizError as e:
        raise _http(e)


@router.get("/question-sets/{set_id}/reports", response_model=List[ReportOut])
def list_reports(set_id: str, db: Session = Depends(get_db)):
    try:
        return storage.list_reports(db, set_id)
    except QuizError as e:
        raise _http(e)


@router.post("/report", response_model=ReportAck, status_code=201)
def submit_report(body: ReportCreate, db: Session = Depends(get_db)):
    try:
        return storage.submit_report(db, body)
    except QuizError as e:
        raise _http(e)
