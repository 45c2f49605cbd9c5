from __future__ import annotations
from datetime import datetime, timezone
from typing import List
import uuid

from sqlalchemy import DateTime, ForeignKey, Integer, String, Text, Index
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .db import Base


def _now() -> datetime:
    return datetime.now(timezone.utc)


class QuestionSet(Base):
    __tablename__ = "question_sets"

    id: Mapped[str] = mapped_column(String(32), primary_key=True, default=lambda: uuid.uuid4().hex)
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    subject: Mapped[str] = mapped_column(String(200), nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_now, nullable=False, index=True)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_now, onupdate=_now, nullable=False)

    questions: Mapped[List["Question"]] = relationship(
        "Question",
        back_populates="question_set",
        cascade="all, delete-orphan",
        order_by="Question.position",
    )
    reports: Mapped[List["Report"]] = relationship("Report", back_populates="question_set", cascade="all, delete-orphan")


class Question(Base):
    __tablename__ = "questions"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    question_set_id: Mapped[str] = mapped_column(String(32), ForeignKey("question_sets.id", ondelete="CASCADE"), index=True)
    # index inside the set, used by reports
    position: Mapped[int] = mapped_column(Integer, nullable=False)
    question: Mapped[str] = mapped_column(Text, nullable=False)
    answer: Mapped[str] = mapped_column(Text, nullable=False)
    difficulty: Mapped[str] = mapped_column(String(10), nullable=False, default="Easy")

    question_set: Mapped[QuestionSet] = relationship("QuestionSet", back_populates="questions")


class Report(Base):
    __tablename__ = "reports"

    id: Mapped[str] = mapped_column(String(32), primary_key=True, default=lambda: uuid.uuid4().hex)
    question_set_id: Mapped[str] = mapped_column(String(32), ForeignKey("question_sets.id", ondelete="CASCADE"), index=True)
    question_index: Mapped[int] = mapped_column(Integer, nullable=False)
    reason: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_now, nullable=False)

    question_set: Mapped[QuestionSet] = relationship("QuestionSet", back_populates="reports")

Index("ix_questions_set_position", Question.question_set_id, Question.position, unique=True)
