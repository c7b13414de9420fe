from __future__ import annotations  # Public exports for interview records

from .models import (
    COMPLETED,
    INCOMPLETE,
    IN_PROGRESS,
    SCHEDULED,
    Interview,
    InterviewStatus,
    InvalidTransitionError,
    ScheduleType,
    can_transition,
)
from .store import InterviewStore

__all__ = [
    "COMPLETED",
    "INCOMPLETE",
    "IN_PROGRESS",
    "SCHEDULED",
    "Interview",
    "InterviewStatus",
    "InterviewStore",
    "InvalidTransitionError",
    "ScheduleType",
    "can_transition",
]
