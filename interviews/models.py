from __future__ import annotations  # Interview domain models

from datetime import datetime
from typing import Dict, FrozenSet, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

InterviewStatus = Literal["scheduled", "in-progress", "completed", "incomplete"]
ScheduleType = Literal["now", "later"]

SCHEDULED: InterviewStatus = "scheduled"
IN_PROGRESS: InterviewStatus = "in-progress"
COMPLETED: InterviewStatus = "completed"
INCOMPLETE: InterviewStatus = "incomplete"

# Legacy records without a status are read as completed and can only stay there.
ALLOWED_TRANSITIONS: Dict[Optional[str], FrozenSet[str]] = {
    SCHEDULED: frozenset({IN_PROGRESS, INCOMPLETE}),
    IN_PROGRESS: frozenset({COMPLETED, INCOMPLETE}),
    COMPLETED: frozenset(),
    INCOMPLETE: frozenset(),
    None: frozenset({COMPLETED}),
}


class InvalidTransitionError(ValueError):  # Raised when a status would move backwards
    pass


def can_transition(current: Optional[str], target: str) -> bool:  # Check monotonic status rule
    if current == target:
        return True
    return target in ALLOWED_TRANSITIONS.get(current, frozenset())


class Interview(BaseModel):  # Stored interview document
    model_config = ConfigDict(populate_by_name=True)

    id: str
    user_id: str = Field(alias="userId")
    role: str
    level: str
    type: str
    techstack: List[str] = Field(default_factory=list)
    questions: List[str] = Field(default_factory=list)
    finalized: bool = False
    cover_image: Optional[str] = Field(default=None, alias="coverImage")
    schedule_type: ScheduleType = Field(default="now", alias="scheduleType")
    status: Optional[InterviewStatus] = None
    scheduled_for: Optional[datetime] = Field(default=None, alias="scheduledFor")
    started_at: Optional[datetime] = Field(default=None, alias="startedAt")
    created_at: datetime = Field(alias="createdAt")

    @property
    def effective_status(self) -> str:  # Missing status reads as completed
        return self.status or COMPLETED


__all__ = [
    "ALLOWED_TRANSITIONS",
    "COMPLETED",
    "INCOMPLETE",
    "IN_PROGRESS",
    "SCHEDULED",
    "Interview",
    "InterviewStatus",
    "InvalidTransitionError",
    "ScheduleType",
    "can_transition",
]
