"""Progress analytics computed from a user's interview history."""
from __future__ import annotations

from collections import Counter
from typing import List, Optional, Sequence

from pydantic import BaseModel, Field

from config.settings import settings
from interviews import Interview
from services.dashboard import section_for


class ShareEntry(BaseModel):
    label: str
    count: int
    percentage: float


class ActivityEntry(BaseModel):
    interview_id: str
    role: str
    type: str
    level: str
    status: str
    created_at: str


class AnalyticsSummary(BaseModel):
    total: int = 0
    completed: int = 0
    in_progress: int = 0
    scheduled: int = 0
    incomplete: int = 0
    top_techstack: List[ShareEntry] = Field(default_factory=list)
    interview_types: List[ShareEntry] = Field(default_factory=list)
    recent_activity: List[ActivityEntry] = Field(default_factory=list)


def _share(label: str, count: int, total: int) -> ShareEntry:
    percentage = round(count / total * 100, 1) if total else 0.0
    return ShareEntry(label=label, count=count, percentage=percentage)


def build_analytics(
    interviews: Sequence[Interview],
    *,
    top_n: Optional[int] = None,
    recent_n: Optional[int] = None,
) -> AnalyticsSummary:
    """Summarise ``interviews`` (newest first, as returned by ``list_by_user``).

    Percentages are relative to the total interview count, so tech stack
    shares can add up to more than 100. Status counts use the dashboard
    sections, so they always add up to ``total``.
    """

    top_n = settings.ANALYTICS_TOP_TECH if top_n is None else top_n
    recent_n = settings.RECENT_ACTIVITY if recent_n is None else recent_n
    total = len(interviews)

    sections = Counter(section_for(item) for item in interviews)
    tech_counts: Counter = Counter()
    for item in interviews:
        tech_counts.update(item.techstack)
    type_counts = Counter(item.type for item in interviews)

    return AnalyticsSummary(
        total=total,
        completed=sections.get("completed", 0),
        in_progress=sections.get("in-progress", 0),
        scheduled=sections.get("scheduled", 0),
        incomplete=sections.get("incomplete", 0),
        top_techstack=[_share(tech, count, total) for tech, count in tech_counts.most_common(top_n)],
        interview_types=[_share(kind, count, total) for kind, count in type_counts.items()],
        recent_activity=[
            ActivityEntry(
                interview_id=item.id,
                role=item.role,
                type=item.type,
                level=item.level,
                status=item.effective_status,
                created_at=item.created_at.isoformat(),
            )
            for item in list(interviews)[:recent_n]
        ],
    )


__all__ = ["ActivityEntry", "AnalyticsSummary", "ShareEntry", "build_analytics"]
