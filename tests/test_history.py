from fastapi.testclient import TestClient

from main import app
from store import score_percent

client = TestClient(app)


def _seed():
    store = app.state.store
    first = store.create_session("First problem", 10)
    store.create_submission(first, 9, False, "Try again.")
    store.create_submission(first, 10, True, "Great!")
    store.create_submission(first, 10, True, "Great again!")
    second = store.create_session("Second problem", 5)
    third = store.create_session("Third problem", 7)
    store.create_submission(third, 7, True, "Perfect!")
    return first, second, third


def test_score_percent():
    assert score_percent(0, 0) == 0
    assert score_percent(2, 3) == 67
    assert score_percent(1, 8) == 13
    assert score_percent(3, 3) == 100


def test_history_newest_first_with_scores():
    first, second, third = _seed()
    r = client.get("/api/problem-history")
    assert r.status_code == 200
    body = r.json()
    assert body["success"] is True
    assert [s["id"] for s in body["sessions"]] == [third, second, first]

    by_id = {s["id"]: s for s in body["sessions"]}
    assert by_id[first]["score"] == 67
    assert by_id[first]["correct_attempts"] == 2
    assert by_id[first]["total_attempts"] == 3
    assert [s["feedback_text"] for s in by_id[first]["submissions"]] == [
        "Great again!",
        "Great!",
        "Try again.",
    ]
    assert by_id[second]["score"] == 0 and by_id[second]["submissions"] == []
    assert by_id[third]["score"] == 100
    assert by_id[third]["correct_answer"] == 7
    assert body["pagination"] == {"limit": 10, "offset": 0, "has_more": False}


def test_history_pagination():
    first, second, third = _seed()
    r = client.get("/api/problem-history", params={"limit": 2, "offset": 0})
    body = r.json()
    assert [s["id"] for s in body["sessions"]] == [third, second]
    assert body["pagination"]["has_more"] is True

    r = client.get("/api/problem-history", params={"limit": 2, "offset": 2})
    body = r.json()
    assert [s["id"] for s in body["sessions"]] == [first]
    assert body["pagination"] == {"limit": 2, "offset": 2, "has_more": False}


def test_history_limit_clamped():
    _seed()
    body = client.get("/api/problem-history", params={"limit": 0, "offset": -5}).json()
    assert body["pagination"]["limit"] == 1
    assert body["pagination"]["offset"] == 0
    assert len(body["sessions"]) == 1


def test_history_empty():
    body = client.get("/api/problem-history").json()
    assert body["sessions"] == []
    assert body["pagination"]["has_more"] is False
