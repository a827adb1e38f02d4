from fastapi.testclient import TestClient

from curriculum import CurriculumCatalog
from deps.services import get_catalog
from main import app

client = TestClient(app)


def test_health():
    r = client.get("/")
    assert r.status_code == 200
    assert r.json().get("ok") is True


def test_health_db():
    r = client.get("/health/db")
    assert r.status_code == 200
    assert r.json() == {"ok": True, "dialect": "sqlite"}


def test_health_curriculum():
    r = client.get("/health/curriculum")
    assert r.status_code == 200
    body = r.json()
    assert body["ok"] is True and body["topics"] > 10


def test_health_curriculum_missing_file(tmp_path):
    app.dependency_overrides[get_catalog] = lambda: CurriculumCatalog(tmp_path / "gone.md")
    try:
        r = client.get("/health/curriculum")
    finally:
        app.dependency_overrides.pop(get_catalog, None)
    assert r.status_code == 500
    assert r.json()["success"] is False


def test_unknown_route_uses_failure_envelope():
    r = client.get("/api/nope")
    assert r.status_code == 404
    assert r.json()["success"] is False
