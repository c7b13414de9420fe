"""Start-window boundaries and entry-time status changes."""
from __future__ import annotations

import sqlite3
from datetime import datetime, timedelta, timezone

import pytest

from interviews import COMPLETED, INCOMPLETE, IN_PROGRESS, SCHEDULED
from services.lifecycle import EXPIRED, STARTABLE, TOO_EARLY, classify_window, enter_interview

T0 = datetime(2025, 3, 14, 15, 0, tzinfo=timezone.utc)


@pytest.mark.parametrize(
    "offset, expected",
    [
        (timedelta(seconds=-1), TOO_EARLY),
        (timedelta(0), STARTABLE),
        (timedelta(minutes=2, seconds=30), STARTABLE),
        (timedelta(minutes=5), STARTABLE),
        (timedelta(minutes=5, seconds=1), EXPIRED),
        (timedelta(hours=3), EXPIRED),
    ],
)
def test_classify_window_edges(offset, expected):
    assert classify_window(T0, T0 + offset) == expected


def test_classify_window_naive_times_are_utc():
    naive = T0.replace(tzinfo=None)
    assert classify_window(naive, T0 + timedelta(minutes=1)) == STARTABLE
    assert classify_window(T0, naive - timedelta(seconds=1)) == TOO_EARLY


def test_classify_window_custom_length():
    assert classify_window(T0, T0 + timedelta(minutes=9), window_minutes=10) == STARTABLE
    assert classify_window(T0, T0 + timedelta(minutes=1), window_minutes=0) == EXPIRED


def _scheduled(make_interview):
    return make_interview(schedule_type="later", status=SCHEDULED, scheduled_for=T0)


def test_entry_too_early_leaves_record_untouched(make_interview, interview_store):
    interview = _scheduled(make_interview)

    result = enter_interview(interview_store, interview.id, now=T0 - timedelta(seconds=1))

    assert result.outcome == "too-early"
    stored = interview_store.get(interview.id)
    assert stored.status == SCHEDULED
    assert stored.started_at is None


@pytest.mark.parametrize("offset", [timedelta(0), timedelta(minutes=5)])
def test_entry_inside_window_starts_interview(make_interview, interview_store, offset):
    interview = _scheduled(make_interview)
    now = T0 + offset

    result = enter_interview(interview_store, interview.id, now=now)

    assert result.admitted
    stored = interview_store.get(interview.id)
    assert stored.status == IN_PROGRESS
    assert stored.started_at == now
    assert result.interview.status == IN_PROGRESS


def test_entry_after_window_marks_incomplete(make_interview, interview_store):
    interview = _scheduled(make_interview)

    result = enter_interview(interview_store, interview.id, now=T0 + timedelta(minutes=5, seconds=1))

    assert result.outcome == "expired"
    assert interview_store.get(interview.id).status == INCOMPLETE


def test_entry_is_idempotent_once_in_progress(make_interview, interview_store, monkeypatch):
    interview = _scheduled(make_interview)
    enter_interview(interview_store, interview.id, now=T0 + timedelta(minutes=1))
    started = interview_store.get(interview.id).started_at

    def fail_update(*args, **kwargs):
        raise AssertionError("no further mutation expected")

    monkeypatch.setattr(interview_store, "update_status", fail_update)
    for _ in range(2):
        result = enter_interview(interview_store, interview.id, now=T0 + timedelta(hours=1))
        assert result.admitted

    stored = interview_store.get(interview.id)
    assert stored.status == IN_PROGRESS
    assert stored.started_at == started


@pytest.mark.parametrize("status", [COMPLETED, INCOMPLETE, None])
def test_non_scheduled_interviews_bypass_window(make_interview, interview_store, status):
    interview = make_interview(status=status)

    result = enter_interview(interview_store, interview.id, now=T0 + timedelta(days=30))

    assert result.admitted
    assert interview_store.get(interview.id).status == status


def test_entry_unknown_interview(interview_store):
    assert enter_interview(interview_store, "missing", now=T0).outcome == "not-found"


def test_failed_start_write_does_not_admit(make_interview, interview_store, monkeypatch):
    interview = _scheduled(make_interview)

    def broken(*args, **kwargs):
        raise sqlite3.OperationalError("database is locked")

    monkeypatch.setattr(interview_store, "update_status", broken)
    result = enter_interview(interview_store, interview.id, now=T0 + timedelta(minutes=1))

    assert result.outcome == "failed"
    assert not result.admitted


def test_failed_expiry_write_still_reports_expired(make_interview, interview_store, monkeypatch):
    interview = _scheduled(make_interview)
    monkeypatch.setattr(interview_store, "update_status", lambda *a, **k: False)

    result = enter_interview(interview_store, interview.id, now=T0 + timedelta(minutes=10))

    assert result.outcome == "expired"


def test_undated_scheduled_entry_is_not_gated(make_interview, interview_store, monkeypatch):
    interview = make_interview(status=SCHEDULED)
    monkeypatch.setattr(interview_store, "update_status", lambda *a, **k: pytest.fail("unexpected write"))

    result = enter_interview(interview_store, interview.id, now=T0)

    assert result.admitted
    stored = interview_store.get(interview.id)
    assert stored.status == SCHEDULED
    assert stored.started_at is None


def test_entry_honours_window_override(make_interview, interview_store):
    interview = _scheduled(make_interview)

    result = enter_interview(interview_store, interview.id, now=T0 + timedelta(minutes=30), window_minutes=60)

    assert result.admitted
    assert interview_store.get(interview.id).status == IN_PROGRESS
