"""Opportunistic expiry sweep for a user's scheduled interviews."""
from __future__ import annotations

import logging
from datetime import datetime
from typing import List, Optional

from interviews import InterviewStore
from observability import log_event
from storage.clock import as_utc, utc_now
from services.lifecycle import EXPIRED, classify_window


logger = logging.getLogger(__name__)


def sweep_expired(
    store: InterviewStore,
    user_id: str,
    now: Optional[datetime] = None,
    *,
    window_minutes: Optional[int] = None,
) -> int:
    """Mark every missed scheduled interview of ``user_id`` as incomplete.

    All expired records found in one pass are written in a single
    transaction. Failures are logged and reported as zero transitions so the
    caller can keep rendering.
    """

    current = as_utc(now) if now else utc_now()
    try:
        pending = store.list_scheduled(user_id)
        expired: List[str] = [
            interview.id
            for interview in pending
            if interview.scheduled_for is not None
            and classify_window(interview.scheduled_for, current, window_minutes=window_minutes) == EXPIRED
        ]
        count = store.mark_incomplete(expired)
    except Exception:  # noqa: BLE001
        logger.exception("Error checking expired interviews for user=%s", user_id)
        return 0
    if count:
        log_event("interview.sweep", user_id, count=count)
    return count


__all__ = ["sweep_expired"]
