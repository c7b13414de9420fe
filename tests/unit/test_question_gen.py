from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest
from pydantic import ValidationError

from config.registry import QUESTIONS_KEY, bind_model, unbind_model
from interviews import IN_PROGRESS, SCHEDULED
from question_gen import COVER_IMAGES, InterviewRequest, generate_interview, generate_questions

NOW = datetime(2025, 3, 14, 15, 0, tzinfo=timezone.utc)


def _request(**overrides):
    payload = {
        "userid": "u1",
        "role": "  Frontend Developer ",
        "level": "Mid-Level",
        "type": "Technical",
        "techstack": "React, TypeScript, React",
        "amount": 3,
    }
    payload.update(overrides)
    return InterviewRequest.model_validate(payload)


def test_request_normalises_input():
    request = _request()

    assert request.user_id == "u1"
    assert request.role == "Frontend Developer"
    assert request.tech_list() == ["React", "TypeScript"]
    assert request.schedule_type == "now"


@pytest.mark.parametrize(
    "overrides",
    [
        {"role": " x "},
        {"techstack": " , , "},
        {"amount": 0},
        {"amount": 21},
        {"level": "Principal"},
        {"scheduleType": "later"},
        {"scheduleType": "later", "scheduledFor": "2001-01-01T00:00:00Z"},
        {"scheduledFor": "2999-01-01T00:00:00Z"},
    ],
)
def test_request_rejects_invalid(overrides):
    with pytest.raises(ValidationError):
        _request(**overrides)


def test_generate_questions_trims_to_amount(fake_models):
    questions = generate_questions(_request())

    assert questions == ["Question 1?", "Question 2?", "Question 3?"]
    prompt = fake_models["questions"][0]["prompt"]
    assert "Frontend Developer" in prompt
    assert "React, TypeScript" in prompt


def test_generate_questions_short_reply_fails():
    bind_model(QUESTIONS_KEY, lambda **_: {"questions": ["Only one?", "  "]})
    try:
        with pytest.raises(ValueError):
            generate_questions(_request())
    finally:
        unbind_model(QUESTIONS_KEY)


def test_generate_now_starts_in_progress(fake_models, interview_store):
    outcome = generate_interview(interview_store, _request(), now=NOW)

    assert outcome.success
    stored = interview_store.get(outcome.interview_id)
    assert stored.status == IN_PROGRESS
    assert stored.started_at == NOW
    assert stored.finalized is True
    assert stored.cover_image in COVER_IMAGES
    assert stored.techstack == ["React", "TypeScript"]
    assert len(stored.questions) == 3


def test_generate_later_waits_in_scheduled(fake_models, interview_store):
    when = datetime.now(timezone.utc) + timedelta(days=2)
    request = _request(scheduleType="later", scheduledFor=when.isoformat())

    outcome = generate_interview(interview_store, request)

    stored = interview_store.get(outcome.interview_id)
    assert stored.status == SCHEDULED
    assert stored.started_at is None
    assert abs(stored.scheduled_for - when) < timedelta(milliseconds=1)


def test_generation_failure_stores_nothing(interview_store):
    unbind_model(QUESTIONS_KEY)

    outcome = generate_interview(interview_store, _request(), now=NOW)

    assert outcome.success is False
    assert outcome.interview_id is None
    assert interview_store.list_by_user("u1") == []
