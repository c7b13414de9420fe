from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from interviews import COMPLETED, INCOMPLETE, IN_PROGRESS, SCHEDULED, InvalidTransitionError, can_transition

T0 = datetime(2025, 3, 14, 15, 0, tzinfo=timezone.utc)


def test_create_and_get_round_trip(make_interview, interview_store):
    created = make_interview(schedule_type="later", status=SCHEDULED, scheduled_for=T0, cover_image="/covers/x.png")

    stored = interview_store.get(created.id)

    assert stored is not None
    assert stored.techstack == ["Python", "PostgreSQL"]
    assert stored.questions == created.questions
    assert stored.scheduled_for == T0
    assert stored.cover_image == "/covers/x.png"
    assert stored.finalized is True


def test_later_without_time_is_rejected(make_interview):
    with pytest.raises(ValueError):
        make_interview(schedule_type="later", status=SCHEDULED)


def test_get_unknown_returns_none(interview_store):
    assert interview_store.get("nope") is None


def test_latest_for_user(make_interview, interview_store):
    assert interview_store.latest_for_user("u1") == []
    make_interview(created_at=T0)
    newest = make_interview(created_at=T0 + timedelta(minutes=1))
    make_interview(user_id="u2", created_at=T0 + timedelta(minutes=2))

    latest = interview_store.latest_for_user("u1")

    assert [item.id for item in latest] == [newest.id]


def test_public_feed_excludes_requester_and_drafts(make_interview, interview_store):
    own = make_interview(user_id="u1", created_at=T0)
    older = make_interview(user_id="u2", created_at=T0 + timedelta(minutes=1))
    newer = make_interview(user_id="u3", created_at=T0 + timedelta(minutes=2))
    make_interview(user_id="u4", finalized=False, created_at=T0 + timedelta(minutes=3))

    ids = [item.id for item in interview_store.list_public("u1")]

    assert ids == [newer.id, older.id]
    assert own.id not in ids


def test_public_feed_limit_counts_own_rows(make_interview, interview_store):
    make_interview(user_id="u2", created_at=T0)
    make_interview(user_id="u1", created_at=T0 + timedelta(minutes=1))

    feed = interview_store.list_public("u1", limit=1)

    assert feed == []


def test_scheduled_sorted_soonest_first(make_interview, interview_store):
    late = make_interview(schedule_type="later", status=SCHEDULED, scheduled_for=T0 + timedelta(hours=2))
    soon = make_interview(schedule_type="later", status=SCHEDULED, scheduled_for=T0 + timedelta(hours=1))
    make_interview(status=IN_PROGRESS)

    assert [item.id for item in interview_store.list_scheduled("u1")] == [soon.id, late.id]


def test_incomplete_sorted_most_recent_first(make_interview, interview_store):
    first = make_interview(schedule_type="later", status=INCOMPLETE, scheduled_for=T0)
    second = make_interview(schedule_type="later", status=INCOMPLETE, scheduled_for=T0 + timedelta(days=1))

    assert [item.id for item in interview_store.list_incomplete("u1")] == [second.id, first.id]


def test_update_status_stamps_start_time(make_interview, interview_store):
    interview = make_interview(schedule_type="later", status=SCHEDULED, scheduled_for=T0)

    assert interview_store.update_status(interview.id, IN_PROGRESS, now=T0 + timedelta(minutes=2))

    stored = interview_store.get(interview.id)
    assert stored.status == IN_PROGRESS
    assert stored.started_at == T0 + timedelta(minutes=2)


def test_update_status_same_status_is_noop(make_interview, interview_store):
    interview = make_interview(status=COMPLETED)
    assert interview_store.update_status(interview.id, COMPLETED)


def test_update_status_rejects_backwards_move(make_interview, interview_store):
    interview = make_interview(status=COMPLETED)

    with pytest.raises(InvalidTransitionError):
        interview_store.update_status(interview.id, SCHEDULED)

    assert interview_store.get(interview.id).status == COMPLETED


def test_update_status_missing_interview(interview_store):
    assert interview_store.update_status("missing", IN_PROGRESS) is False


def test_mark_incomplete_only_touches_scheduled(make_interview, interview_store):
    pending = make_interview(schedule_type="later", status=SCHEDULED, scheduled_for=T0)
    running = make_interview(status=IN_PROGRESS)

    count = interview_store.mark_incomplete([pending.id, running.id])

    assert count == 1
    assert interview_store.get(pending.id).status == INCOMPLETE
    assert interview_store.get(running.id).status == IN_PROGRESS
    assert interview_store.mark_incomplete([]) == 0


@pytest.mark.parametrize(
    "current, target, allowed",
    [
        (SCHEDULED, IN_PROGRESS, True),
        (SCHEDULED, INCOMPLETE, True),
        (IN_PROGRESS, COMPLETED, True),
        (None, COMPLETED, True),
        (INCOMPLETE, SCHEDULED, False),
        (COMPLETED, IN_PROGRESS, False),
        (IN_PROGRESS, SCHEDULED, False),
    ],
)
def test_transition_rules(current, target, allowed):
    assert can_transition(current, target) is allowed
