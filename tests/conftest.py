import os
import sys
from pathlib import Path

import pytest

os.environ.setdefault("ENABLE_FILE_LOGS", "0")

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from config.registry import FEEDBACK_KEY, QUESTIONS_KEY, bind_model, unbind_model
from config.settings import settings
from feedback.models import CATEGORY_NAMES
from feedback.store import FeedbackStore
from interviews import InterviewStore
from storage.migrate import migrate
from storage.sqlite import Database


FAKE_FEEDBACK = {
    "totalScore": 74,
    "categoryScores": [
        {"name": name, "score": 70 + index, "comment": f"{name} was fine"}
        for index, name in enumerate(CATEGORY_NAMES)
    ],
    "strengths": ["Clear structure"],
    "areasForImprovement": ["Go deeper on trade-offs"],
    "finalAssessment": "Solid mid-level performance.",
}


@pytest.fixture(autouse=True)
def tmp_db(monkeypatch, tmp_path):
    db_path = str(tmp_path / "test.db")
    monkeypatch.setattr(settings, "DB_PATH", db_path, raising=False)
    migrate(db_path)
    yield db_path


@pytest.fixture
def db(tmp_db):
    return Database(tmp_db)


@pytest.fixture
def interview_store(db):
    return InterviewStore(db)


@pytest.fixture
def feedback_store(db):
    return FeedbackStore(db)


@pytest.fixture
def make_interview(interview_store):
    """Factory creating interviews with sensible defaults."""

    def _make(user_id="u1", **overrides):
        fields = {
            "user_id": user_id,
            "role": "Backend Engineer",
            "level": "Senior",
            "interview_type": "Technical",
            "techstack": ["Python", "PostgreSQL"],
            "questions": ["Explain the GIL.", "How do indexes work?"],
            "finalized": True,
        }
        fields.update(overrides)
        return interview_store.create(**fields)

    return _make


@pytest.fixture
def fake_models():
    calls = {"feedback": [], "questions": []}

    def fake_feedback(**kwargs):
        calls["feedback"].append(kwargs)
        return dict(FAKE_FEEDBACK)

    def fake_questions(**kwargs):
        calls["questions"].append(kwargs)
        return {"questions": [f"Question {n}?" for n in range(1, 11)]}

    bind_model(FEEDBACK_KEY, fake_feedback)
    bind_model(QUESTIONS_KEY, fake_questions)
    try:
        yield calls
    finally:
        unbind_model(FEEDBACK_KEY)
        unbind_model(QUESTIONS_KEY)
