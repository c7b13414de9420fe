"""Dashboard assembly: expiry sweep followed by the interview sections."""
from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, Field

from config.settings import Settings, settings as default_settings
from interviews import COMPLETED, INCOMPLETE, SCHEDULED, Interview, InterviewStore
from services.expiry_sweep import sweep_expired

Section = Literal["completed", "in-progress", "scheduled", "incomplete"]


class Dashboard(BaseModel):  # Sections rendered on the home view
    completed: List[Interview] = Field(default_factory=list)
    in_progress: List[Interview] = Field(default_factory=list)
    scheduled: List[Interview] = Field(default_factory=list)
    incomplete: List[Interview] = Field(default_factory=list)
    public: List[Interview] = Field(default_factory=list)
    expired_count: int = 0


def section_for(interview: Interview) -> Section:
    """Place an interview in exactly one dashboard section.

    Immediate interviews are listed with the completed ones whatever their
    status. A started scheduled interview stays in ``in-progress`` until
    feedback closes it.
    """

    if interview.status == SCHEDULED:
        return "scheduled"
    if interview.status == INCOMPLETE:
        return "incomplete"
    if interview.effective_status == COMPLETED or interview.schedule_type == "now":
        return "completed"
    return "in-progress"


def completed_only(interviews: List[Interview]) -> List[Interview]:
    return [item for item in interviews if section_for(item) == "completed"]


def in_progress_only(interviews: List[Interview]) -> List[Interview]:
    return [item for item in interviews if section_for(item) == "in-progress"]


def build_dashboard(
    store: InterviewStore,
    user_id: str,
    now: Optional[datetime] = None,
    *,
    app_settings: Optional[Settings] = None,
) -> Dashboard:
    """Sweep stale schedules, then read the sections concurrently."""

    cfg = app_settings or default_settings
    expired = sweep_expired(store, user_id, now, window_minutes=cfg.START_WINDOW_MINUTES)
    with ThreadPoolExecutor(max_workers=cfg.DASHBOARD_WORKERS) as executor:
        history = executor.submit(store.list_by_user, user_id)
        public = executor.submit(store.list_public, user_id, limit=cfg.PUBLIC_FEED_LIMIT)
        scheduled = executor.submit(store.list_scheduled, user_id)
        incomplete = executor.submit(store.list_incomplete, user_id)
        own = history.result()
        return Dashboard(
            completed=completed_only(own),
            in_progress=in_progress_only(own),
            scheduled=scheduled.result(),
            incomplete=incomplete.result(),
            public=public.result(),
            expired_count=expired,
        )


__all__ = ["Dashboard", "Section", "build_dashboard", "completed_only", "in_progress_only", "section_for"]
