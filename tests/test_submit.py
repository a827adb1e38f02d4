import pytest
from fastapi.testclient import TestClient

from db import SessionLocal
from errors import ModelError, NotFoundError
from main import app
from models import Submission

client = TestClient(app)

PROBLEM = "Sarah has 24 stickers. She gives 8 away and buys 12 more. How many now?"


def _new_session(correct_answer=28.0):
    return app.state.store.create_session(PROBLEM, correct_answer)


def _submissions():
    with SessionLocal() as db:
        return db.query(Submission).all()


def test_submit_correct(fake_model):
    sid = _new_session()
    fake_model.queue("  Brilliant work! You subtracted and then added.  \n")
    r = client.post("/api/math-problem/submit", json={"session_id": sid, "user_answer": 28})
    assert r.status_code == 200
    body = r.json()
    assert body["success"] is True
    assert body["is_correct"] is True
    assert body["feedback"] == "Brilliant work! You subtracted and then added."

    rows = _submissions()
    assert len(rows) == 1
    assert rows[0].id == body["submission_id"]
    assert rows[0].session_id == sid
    assert rows[0].user_answer == 28
    assert rows[0].is_correct is True
    assert "Is Correct: true" in fake_model.prompts[0]


def test_submit_numeric_string_with_trailing_zeros(fake_model):
    sid = _new_session()
    fake_model.queue("Well done!")
    r = client.post("/api/math-problem/submit", json={"session_id": sid, "user_answer": "28.00"})
    assert r.json()["is_correct"] is True


def test_submit_no_tolerance(fake_model):
    sid = _new_session()
    fake_model.queue("Close! Check your last step again.")
    r = client.post("/api/math-problem/submit", json={"session_id": sid, "user_answer": 27.9999})
    assert r.status_code == 200
    assert r.json()["is_correct"] is False
    prompt = fake_model.prompts[0]
    assert "Is Correct: false" in prompt
    assert "without giving away the answer" in prompt
    assert _submissions()[0].is_correct is False


def test_submit_unknown_session(fake_model):
    r = client.post(
        "/api/math-problem/submit", json={"session_id": "does-not-exist", "user_answer": 28}
    )
    assert r.status_code == 404
    assert r.json() == {"success": False, "error": "Problem session not found"}
    assert _submissions() == []
    assert fake_model.prompts == []


def test_submit_missing_fields(fake_model):
    r = client.post("/api/math-problem/submit", json={"user_answer": 28})
    assert r.status_code == 400
    assert r.json() == {"success": False, "error": "Missing session_id or user_answer"}

    r = client.post("/api/math-problem/submit", json={"session_id": _new_session()})
    assert r.status_code == 400
    assert _submissions() == []


def test_submit_non_numeric_answer(fake_model):
    sid = _new_session()
    r = client.post("/api/math-problem/submit", json={"session_id": sid, "user_answer": "abc"})
    assert r.status_code == 400
    assert r.json()["success"] is False
    assert _submissions() == []


def test_submit_malformed_body():
    r = client.post(
        "/api/math-problem/submit",
        content="not json",
        headers={"content-type": "application/json"},
    )
    assert r.status_code == 400
    assert r.json()["success"] is False


def test_submit_feedback_failure_records_nothing(fake_model):
    sid = _new_session()
    fake_model.queue(ModelError("AI model request failed with HTTP 503"))
    r = client.post("/api/math-problem/submit", json={"session_id": sid, "user_answer": 28})
    assert r.status_code == 500
    assert r.json()["success"] is False
    assert _submissions() == []


def test_store_rejects_submission_for_missing_session():
    with pytest.raises(NotFoundError):
        app.state.store.create_submission("missing", 1.0, False, "")


def test_submit_huge_integer_answer(fake_model):
    sid = _new_session()
    r = client.post(
        "/api/math-problem/submit",
        content='{"session_id": "%s", "user_answer": %s}' % (sid, "9" * 400),
        headers={"content-type": "application/json"},
    )
    assert r.status_code == 400
    assert r.json() == {"success": False, "error": "user_answer must be a number"}
    assert _submissions() == []
    assert fake_model.prompts == []


def test_submit_whole_number_answers_serialize_as_ints(fake_model):
    sid = _new_session(28.0)
    fake_model.queue("Nice!")
    client.post("/api/math-problem/submit", json={"session_id": sid, "user_answer": "28.0"})
    session = client.get("/api/problem-history").json()["sessions"][0]
    assert session["correct_answer"] == 28 and isinstance(session["correct_answer"], int)
    assert isinstance(session["submissions"][0]["user_answer"], int)
