from .generation import SYSTEM_PROMPT, create_feedback, format_transcript, generate_feedback
from .models import (
    CATEGORY_NAMES,
    CategoryScore,
    Feedback,
    FeedbackDraft,
    FeedbackOutcome,
    TranscriptTurn,
)
from .store import FeedbackStore

__all__ = [
    "CATEGORY_NAMES",
    "CategoryScore",
    "Feedback",
    "FeedbackDraft",
    "FeedbackOutcome",
    "FeedbackStore",
    "SYSTEM_PROMPT",
    "TranscriptTurn",
    "create_feedback",
    "format_transcript",
    "generate_feedback",
]
