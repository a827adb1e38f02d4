import json
import os
import tempfile
from pathlib import Path

# Must be set before main/db are imported by any test module.
_TMP = Path(tempfile.mkdtemp(prefix="math-practice-tests-"))
os.environ["DATABASE_URL"] = f"sqlite:///{_TMP / 'test.db'}"
os.environ["GEMINI_API_KEY"] = "test-key"

import pytest  # noqa: E402

from db import SessionLocal  # noqa: E402
from deps.services import get_model_client  # noqa: E402
from errors import ModelError  # noqa: E402
from main import app  # noqa: E402
from models import ProblemSession, Submission  # noqa: E402


class FakeModel:
    """Replays queued replies; an Exception in the queue is raised instead."""

    def __init__(self):
        self.replies = []
        self.prompts = []

    def queue(self, *replies):
        self.replies.extend(replies)
        return self

    def generate(self, prompt):
        self.prompts.append(prompt)
        if not self.replies:
            raise ModelError("no reply queued")
        reply = self.replies.pop(0)
        if isinstance(reply, Exception):
            raise reply
        return reply


@pytest.fixture(autouse=True)
def clean_db():
    with SessionLocal() as db:
        db.query(Submission).delete()
        db.query(ProblemSession).delete()
        db.commit()
    yield


@pytest.fixture
def fake_model():
    model = FakeModel()
    app.dependency_overrides[get_model_client] = lambda: model
    yield model
    app.dependency_overrides.pop(get_model_client, None)


@pytest.fixture
def problem_dict():
    return {
        "problem_text": "Sarah has 24 stickers. She gives 8 away and buys 12 more. How many now?",
        "final_answer": 28,
        "hint": "Subtract first, then add.",
        "step_by_step": ["Step 1: 24 - 8 = 16", "Step 2: 16 + 12 = 28"],
    }


@pytest.fixture
def problem_json(problem_dict):
    return json.dumps(problem_dict)
