"""Start-window evaluation for scheduled interviews."""
from __future__ import annotations

import logging
import sqlite3
from datetime import datetime, timedelta
from typing import Literal, Optional

from pydantic import BaseModel

from config.settings import settings
from interviews import INCOMPLETE, IN_PROGRESS, SCHEDULED, Interview, InterviewStore, InvalidTransitionError
from observability import log_event
from storage.clock import as_utc, utc_now


logger = logging.getLogger(__name__)

WindowState = Literal["too-early", "startable", "expired"]
TOO_EARLY: WindowState = "too-early"
STARTABLE: WindowState = "startable"
EXPIRED: WindowState = "expired"

EntryOutcome = Literal["admitted", "too-early", "expired", "not-found", "failed"]


class EntryResult(BaseModel):
    outcome: EntryOutcome
    interview: Optional[Interview] = None

    @property
    def admitted(self) -> bool:
        return self.outcome == "admitted"


def classify_window(
    scheduled_for: datetime,
    now: datetime,
    *,
    window_minutes: Optional[int] = None,
) -> WindowState:
    """Place ``now`` relative to the start window of a scheduled interview.

    The window is closed on both ends: arriving exactly at ``scheduled_for``
    or exactly ``window_minutes`` later is still startable.
    """

    minutes = settings.START_WINDOW_MINUTES if window_minutes is None else window_minutes
    start = as_utc(scheduled_for)
    current = as_utc(now)
    if current < start:
        return TOO_EARLY
    if current > start + timedelta(minutes=minutes):
        return EXPIRED
    return STARTABLE


def enter_interview(
    store: InterviewStore,
    interview_id: str,
    now: Optional[datetime] = None,
    *,
    window_minutes: Optional[int] = None,
) -> EntryResult:
    """Gate entry into an interview and apply the resulting status change.

    Only ``scheduled`` interviews with a ``scheduledFor`` time are evaluated;
    every other record is admitted untouched. A startable interview is
    admitted only once the ``in-progress`` write has landed.
    """

    current = as_utc(now) if now else utc_now()
    interview = store.get(interview_id)
    if interview is None:
        return EntryResult(outcome="not-found")
    if interview.status != SCHEDULED or interview.scheduled_for is None:
        return EntryResult(outcome="admitted", interview=interview)

    window = classify_window(interview.scheduled_for, current, window_minutes=window_minutes)

    if window == TOO_EARLY:
        log_event("interview.entry", interview.user_id, interview_id=interview_id, window=window, outcome="too-early")
        return EntryResult(outcome="too-early", interview=interview)

    if window == EXPIRED:
        if not _transition(store, interview_id, INCOMPLETE, current):
            logger.warning("Expired interview %s could not be marked incomplete", interview_id)
        log_event("interview.entry", interview.user_id, interview_id=interview_id, window=window, outcome="expired")
        return EntryResult(outcome="expired", interview=interview)

    if not _transition(store, interview_id, IN_PROGRESS, current):
        log_event("interview.entry", interview.user_id, interview_id=interview_id, window=window, outcome="failed")
        return EntryResult(outcome="failed", interview=interview)

    log_event("interview.entry", interview.user_id, interview_id=interview_id, window=window, outcome="admitted")
    return EntryResult(outcome="admitted", interview=store.get(interview_id) or interview)


def _transition(store: InterviewStore, interview_id: str, status: str, now: datetime) -> bool:
    try:
        return store.update_status(interview_id, status, now=now)
    except (sqlite3.Error, InvalidTransitionError):
        logger.exception("Error updating interview status id=%s status=%s", interview_id, status)
        return False


__all__ = [
    "EXPIRED",
    "STARTABLE",
    "TOO_EARLY",
    "EntryOutcome",
    "EntryResult",
    "WindowState",
    "classify_window",
    "enter_interview",
]
