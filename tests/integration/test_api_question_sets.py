import requests

SET = {
    "title": "World Capitals",
    "subject": "Geography",
    "questions": [
        {"question": "Capital of Japan?", "answer": "Tokyo", "difficulty": "Easy"},
        {"question": "Capital of Canada?", "answer": "Ottawa", "difficulty": "Medium"},
    ],
}


def test_question_set_lifecycle(quiz_url):
    r = requests.post(quiz_url + "/api/question-sets", json=SET, timeout=5)
    assert r.status_code == 201, r.text
    created = r.json()
    sid = created["id"]
    assert created["question_count"] == 2

    listed = requests.get(quiz_url + "/api/question-sets", timeout=5).json()
    assert sid in [s["id"] for s in listed]

    full = requests.get(quiz_url + f"/api/question-sets/{sid}", timeout=5).json()
    assert [q["answer"] for q in full["questions"]] == ["Tokyo", "Ottawa"]

    q = requests.get(quiz_url + f"/api/question-sets/{sid}/random-question", timeout=5).json()
    assert q["question_set_id"] == sid
    assert q["answer"] == SET["questions"][q["question_index"]]["answer"]


def test_question_set_validation(quiz_url):
    r = requests.post(quiz_url + "/api/question-sets", json={**SET, "questions": []}, timeout=5)
    assert r.status_code == 422
    r = requests.post(quiz_url + "/api/question-sets", json={**SET, "subject": ""}, timeout=5)
    assert r.status_code == 422


def test_unknown_set_is_404(quiz_url):
    r = requests.get(quiz_url + "/api/question-sets/does-not-exist/random-question", timeout=5)
    assert r.status_code == 404
    assert r.json()["detail"] == "Question set not found"


def test_reports(quiz_url):
    sid = requests.post(quiz_url + "/api/question-sets", json=SET, timeout=5).json()["id"]

    r = requests.post(
        quiz_url + "/api/report",
        json={"question_set_id": sid, "question_index": 1, "reason": "Ottawa is right, wording unclear"},
        timeout=5,
    )
    assert r.status_code == 201
    assert r.json()["message"] == "Report submitted. Thank you!"

    r = requests.post(
        quiz_url + "/api/report",
        json={"question_set_id": sid, "question_index": 9, "reason": "no such question"},
        timeout=5,
    )
    assert r.status_code == 404

    reports = requests.get(quiz_url + f"/api/question-sets/{sid}/reports", timeout=5).json()
    assert [rep["question_index"] for rep in reports] == [1]


def test_browser_clients_may_call_the_quiz_service(quiz_url):
    origin = "http://localhost:5173"
    r = requests.options(
        quiz_url + "/api/question-sets",
        headers={"Origin": origin, "Access-Control-Request-Method": "POST"},
        timeout=5,
    )
    assert r.status_code == 200
    assert r.headers["access-control-allow-origin"] in (origin, "*")

    r = requests.get(quiz_url + "/api/question-sets", headers={"Origin": origin}, timeout=5)
    assert r.headers["access-control-allow-origin"] in (origin, "*")
