import random

import pytest

from quizbank import storage
from quizbank.errors import EmptySet, NotFound, ValidationError
from quizbank.models import QuestionSet

SAMPLE = {
    "title": "Capitals",
    "subject": "Geography",
    "questions": [
        {"question": "Capital of France?", "answer": "Paris", "difficulty": "Easy"},
        {"question": "Capital of Peru?", "answer": "Lima", "difficulty": "Hard"},
    ],
}


@pytest.fixture()
def db(session_factory):
    with session_factory() as s:
        yield s


def test_create_and_list(db):
    created = storage.create_question_set(db, SAMPLE)
    assert created.question_count == 2
    assert [q.answer for q in created.questions] == ["Paris", "Lima"]

    sets = storage.list_question_sets(db)
    assert [(s.id, s.title, s.question_count) for s in sets] == [(created.id, "Capitals", 2)]


def test_create_rejects_invalid_payloads(db):
    with pytest.raises(ValidationError, match="questions"):
        storage.create_question_set(db, {**SAMPLE, "questions": []})
    with pytest.raises(ValidationError, match="title"):
        storage.create_question_set(db, {**SAMPLE, "title": "   "})
    with pytest.raises(ValidationError):
        storage.create_question_set(db, {**SAMPLE, "questions": [{"question": "Short", "answer": "x"}]})
    assert storage.list_question_sets(db) == []


def test_random_question_is_from_the_set(db):
    created = storage.create_question_set(db, SAMPLE)
    rng = random.Random(0)
    seen = set()
    for _ in range(30):
        q = storage.get_random_question(db, created.id, rng)
        assert q.question_set_id == created.id
        assert (q.question, q.answer) == (
            SAMPLE["questions"][q.question_index]["question"],
            SAMPLE["questions"][q.question_index]["answer"],
        )
        seen.add(q.question_index)
    assert seen == {0, 1}


def test_random_question_errors(db):
    with pytest.raises(NotFound):
        storage.get_random_question(db, "missing")

    empty = QuestionSet(title="Empty", subject="None")
    db.add(empty)
    db.commit()
    with pytest.raises(EmptySet):
        storage.get_random_question(db, empty.id)


def test_reports(db):
    created = storage.create_question_set(db, SAMPLE)
    ack = storage.submit_report(db, {"question_set_id": created.id, "question_index": 1, "reason": "Lima is fine"})
    assert ack.message == "Report submitted. Thank you!"

    reports = storage.list_reports(db, created.id)
    assert [(r.id, r.question_index, r.reason) for r in reports] == [(ack.id, 1, "Lima is fine")]


@pytest.mark.parametrize(
    "index,reason,error",
    [
        (5, "out of range", NotFound),
        (-1, "negative", ValidationError),
        (0, "no", ValidationError),
    ],
)
def test_report_validation(db, index, reason, error):
    created = storage.create_question_set(db, SAMPLE)
    with pytest.raises(error):
        storage.submit_report(db, {"question_set_id": created.id, "question_index": index, "reason": reason})
    assert storage.list_reports(db, created.id) == []


def test_report_unknown_set(db):
    with pytest.raises(NotFound):
        storage.submit_report(db, {"question_set_id": "nope", "question_index": 0, "reason": "missing set"})
