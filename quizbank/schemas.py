from enum import Enum
from typing import List
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class Difficulty(str, Enum):
    EASY = "Easy"
    MEDIUM = "Medium"
    HARD = "Hard"


class _Stripped(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)


class QuestionIn(_Stripped):
    question: str = Field(min_length=6)
    answer: str = Field(min_length=1)
    difficulty: Difficulty = Difficulty.EASY


class QuestionSetCreate(_Stripped):
    title: str = Field(min_length=1, max_length=200)
    subject: str = Field(min_length=1, max_length=200)
    questions: List[QuestionIn] = Field(min_length=1)


class QuestionSetSummary(BaseModel):
    id: str
    title: str
    subject: str
    created_at: datetime
    question_count: int


class QuestionSetOut(QuestionSetSummary):
    updated_at: datetime
    questions: List[QuestionIn]


class RandomQuestion(BaseModel):
    question_set_id: str
    question_index: int
    question: str
    answer: str
    difficulty: Difficulty


class ReportCreate(_Stripped):
    question_set_id: str = Field(min_length=1)
    question_index: int = Field(ge=0)
    reason: str = Field(min_length=3, max_length=1000)


class ReportOut(BaseModel):
    id: str
    question_set_id: str
    question_index: int
    reason: str
    created_at: datetime


class ReportAck(BaseModel):
    id: str
    message: str = "Report submitted. Thank you!"
